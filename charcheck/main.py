import asyncio
import logging
import sys
from typing import List, Optional

from .config import RunConfig
from .coordinator import run
from .utils import InputError, configure_logging

log = logging.getLogger(__name__)

USAGE = "Usage: charcheck <path_to_usernames_file> [num_workers]"


def parse_workers(raw: str) -> int:
    workers = int(raw, 10)
    if workers < 1:
        raise ValueError(f"num_workers must be >= 1, got {workers}")
    return workers


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        print(USAGE, file=sys.stderr)
        return 1

    workers = None
    if len(argv) > 1:
        try:
            workers = parse_workers(argv[1])
        except ValueError as e:
            print(f"Invalid num_workers: {e}", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            return 2

    configure_logging()
    try:
        config = RunConfig.from_env(argv[0], workers)
    except ValueError as e:
        log.error("%s", e)
        return 2

    try:
        asyncio.run(run(config))
    except InputError as e:
        log.error("%s", e)
        return 1
    finally:
        log.info("Main process finished.")
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
