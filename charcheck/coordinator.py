import asyncio
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Set

from .browser import make_provider
from .check import check_identifier
from .config import SERVICE_HOST, RunConfig
from .store import ResultStore, read_identifiers
from .utils import host_probe
from .worker import Probe, run_worker

log = logging.getLogger(__name__)


@dataclass
class RunSummary:
    total: int = 0
    already_known: int = 0
    checked: int = 0
    chunks: int = 0
    new_available: List[str] = field(default_factory=list)
    persisted: bool = False
    elapsed: float = 0.0


def compute_work_set(identifiers: Iterable[str], known: Set[str]) -> List[str]:
    """Identifiers not already known, first occurrence kept, input order kept."""
    seen: Set[str] = set()
    work: List[str] = []
    for ident in identifiers:
        if ident in known or ident in seen:
            continue
        seen.add(ident)
        work.append(ident)
    return work


def partition(items: Sequence[str], workers: int) -> List[List[str]]:
    """
    Split *items* into at most *workers* contiguous chunks of
    ``ceil(len(items) / workers)`` items. Empty chunks are never produced,
    so asking for more workers than items yields one chunk per item.
    """
    if workers < 1:
        raise ValueError(f"workers must be >= 1, got {workers}")
    if not items:
        return []
    size = math.ceil(len(items) / workers)
    chunks = []
    for i in range(workers):
        chunk = list(items[i * size:(i + 1) * size])
        if chunk:
            chunks.append(chunk)
    return chunks


def merge_reports(reports: Iterable, known: Set[str]) -> List[str]:
    """
    Fold worker reports into one list of new identifiers. Exceptions in
    *reports* (a worker that blew up) contribute nothing.
    """
    merged: List[str] = []
    seen = set(known)
    for report in reports:
        if isinstance(report, BaseException):
            continue
        for ident in report:
            if ident not in seen:
                seen.add(ident)
                merged.append(ident)
    return merged


async def _dispatch(provider, chunks: List[List[str]], probe: Probe) -> list:
    tasks = [
        asyncio.create_task(run_worker(provider, chunk, wid, probe))
        for wid, chunk in enumerate(chunks, start=1)
    ]
    reports = await asyncio.gather(*tasks, return_exceptions=True)
    for wid, report in enumerate(reports, start=1):
        if isinstance(report, BaseException):
            log.error("Worker %d stopped with an error: %r", wid, report)
    return reports


async def _release(provider) -> None:
    try:
        await provider.close()
    except Exception as e:
        log.error("Error closing browser: %s", e)


def _persist(store: ResultStore, summary: RunSummary) -> None:
    if not summary.new_available:
        log.info("No new available usernames found by any worker.")
        return
    log.info("Found %d new available usernames. Saving to %s...",
             len(summary.new_available), store.path)
    try:
        store.append_new(summary.new_available)
        summary.persisted = True
        log.info("Successfully saved new available usernames.")
    except OSError as e:
        log.error("Error writing to %s: %s", store.path, e)


def _finish(summary: RunSummary, t0: float) -> RunSummary:
    summary.elapsed = time.time() - t0
    log.info("Checked %d usernames in %.2fs (%.2f usernames/sec), %d new available%s",
             summary.checked, summary.elapsed,
             summary.checked / summary.elapsed if summary.elapsed > 0 else 0,
             len(summary.new_available),
             "" if summary.persisted or not summary.new_available else " (not saved)")
    return summary


async def run(
    config: RunConfig,
    *,
    provider=None,
    store: Optional[ResultStore] = None,
    probe: Probe = check_identifier,
) -> RunSummary:
    """
    Check every identifier in ``config.input_path`` that is not already in the
    record and append the newly available ones to it.

    Raises ``InputError`` when the identifier source cannot be read. Anything
    that goes wrong after that is logged and reflected in the summary.
    """
    t0 = time.time()
    summary = RunSummary()
    log.info("Using %d workers.", config.workers)

    identifiers = read_identifiers(config.input_path)
    summary.total = len(identifiers)
    if not identifiers:
        log.info("Input file is empty or contains no valid usernames.")
        return _finish(summary, t0)
    log.info("Read %d total usernames from %s", len(identifiers), config.input_path)

    store = store or ResultStore(config.record_path)
    known = store.load()

    work = compute_work_set(identifiers, known)
    summary.already_known = sum(1 for ident in set(identifiers) if ident in known)
    if not work:
        log.info("All usernames from the input file are already listed in %s. No checks needed.",
                 store.path)
        return _finish(summary, t0)
    log.info("Filtered list: %d usernames need to be checked online.", len(work))

    chunks = partition(work, config.workers)
    summary.checked = len(work)
    summary.chunks = len(chunks)

    if config.preflight:
        if await host_probe(f"https://{SERVICE_HOST}") is None:
            log.warning("%s did not answer the preflight request, results may be empty.",
                        SERVICE_HOST)

    provider = provider or make_provider(config)
    reports: list = []
    try:
        try:
            await provider.start()
            log.info("Distributing %d usernames to %d workers...", len(work), len(chunks))
            reports = await _dispatch(provider, chunks, probe)
        except Exception as e:
            log.error("An error occurred in the main process: %s", e)

        summary.new_available = merge_reports(reports, known)
        _persist(store, summary)
    finally:
        await _release(provider)

    return _finish(summary, t0)
