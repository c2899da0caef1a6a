import logging
from typing import Awaitable, Callable, List

from playwright.async_api import Page

from .check import Availability, CheckResult, check_identifier

log = logging.getLogger(__name__)

Probe = Callable[[Page, str], Awaitable[CheckResult]]


async def _probe_one(page: Page, identifier: str, probe: Probe, wid: int) -> CheckResult:
    try:
        return await probe(page, identifier)
    except Exception as e:
        log.debug("  Worker %d: probe for %s failed: %r", wid, identifier, e)
        return CheckResult(identifier, Availability.INDETERMINATE, str(e))


def _record(result: CheckResult, found: List[str], wid: int) -> None:
    if result.available:
        log.info("  Worker %d: Available - %s", wid, result.identifier)
        found.append(result.identifier)


async def _run_shared(provider, chunk: List[str], wid: int, probe: Probe) -> List[str]:
    found: List[str] = []
    async with provider.open_page() as page:
        for identifier in chunk:
            _record(await _probe_one(page, identifier, probe, wid), found, wid)
    return found


async def _run_per_probe(provider, chunk: List[str], wid: int, probe: Probe) -> List[str]:
    found: List[str] = []
    for identifier in chunk:
        result = None
        try:
            async with provider.open_page() as page:
                result = await _probe_one(page, identifier, probe, wid)
        except Exception as e:
            # result survives a failed browser teardown
            log.debug("  Worker %d: browser for %s failed: %r", wid, identifier, e)
        if result is not None:
            _record(result, found, wid)
    return found


async def run_worker(provider, chunk: List[str], wid: int, probe: Probe = check_identifier) -> List[str]:
    """
    Check every identifier of *chunk* in order and return the available ones.

    A shared provider gives this worker one page for its whole lifetime; a
    per-probe provider gives it a fresh browser for each identifier. A failed
    probe only loses that identifier. If the worker itself breaks (the page
    cannot be opened, the browser went away) it logs and reports nothing, so
    the caller always gets a list back.
    """
    log.info("  Worker %d: checking %d identifiers", wid, len(chunk))
    try:
        if getattr(provider, "per_probe", False):
            found = await _run_per_probe(provider, chunk, wid, probe)
        else:
            found = await _run_shared(provider, chunk, wid, probe)
    except Exception as e:
        log.error("  Worker %d: General error: %s", wid, e)
        return []

    log.info("  Worker %d: done, %d available", wid, len(found))
    return found
