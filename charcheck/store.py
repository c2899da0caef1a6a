import logging
import os
from typing import Iterable, List, Set

from .utils import InputError

log = logging.getLogger(__name__)


def parse_lines(text: str) -> List[str]:
    """Split on any line ending, trim, drop blanks. Order and repeats are kept."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def read_identifiers(path: str) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_lines(f.read())
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Error reading usernames file {path}: {e}") from e


class ResultStore:
    """
    Append-only file of identifiers already known to be available.

    Only the coordinator talks to it: ``load()`` once before any worker starts,
    ``append_new()`` once after all of them are done. Nothing here ever
    rewrites or truncates existing lines. Two processes appending to the same
    file at once can still interleave; keeping runs apart is up to the caller.
    """

    def __init__(self, path: str):
        self.path = path

    def load(self) -> Set[str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                known = set(parse_lines(f.read()))
        except FileNotFoundError:
            log.info("'%s' not found, will check all usernames.", self.path)
            return set()
        except (OSError, UnicodeDecodeError) as e:
            log.error("Error reading %s: %s", self.path, e)
            return set()

        log.info("Loaded %d existing available usernames from %s.", len(known), self.path)
        return known

    def _needs_separator(self) -> bool:
        try:
            if os.path.getsize(self.path) == 0:
                return False
        except FileNotFoundError:
            return False
        with open(self.path, "rb") as f:
            f.seek(-1, os.SEEK_END)
            return f.read(1) not in (b"\n", b"\r")

    def append_new(self, identifiers: Iterable[str]) -> int:
        """Append *identifiers*, one per line. Returns how many were written."""
        batch = list(identifiers)
        if not batch:
            return 0
        lead = "\n" if self._needs_separator() else ""
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(lead + "\n".join(batch) + "\n")
        return len(batch)
