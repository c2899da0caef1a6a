import logging
import os
from typing import Optional

import aiohttp
import async_timeout
from playwright.async_api import Page

from .config import PREFLIGHT_TIMEOUT

log = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class CharCheckError(RuntimeError):
    """Base class for errors raised by charcheck."""
    pass


class InputError(CharCheckError):
    """Raised when the identifier source cannot be read."""
    pass


class ProbeError(CharCheckError):
    """Raised when the rendered page cannot be inspected."""
    pass


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or os.environ.get("CHARCHECK_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


async def read_text(page: Page, selector: str) -> Optional[str]:
    """
    Return the trimmed ``textContent`` of the first node matching *selector*,
    or ``None`` when the page has no such node.

    The lookup runs inside the page so the value reflects the rendered DOM,
    not the raw HTML.
    """
    try:
        return await page.evaluate(
            """
            (sel) => {
                const node = document.querySelector(sel);
                return node ? node.textContent.trim() : null;
            }
            """,
            selector,
        )
    except Exception as e:
        raise ProbeError(f"could not read {selector} on {page.url}: {e}") from e


async def host_probe(url: str, timeout: float = PREFLIGHT_TIMEOUT) -> Optional[str]:
    """HEAD *url* and return the final URL if the host answers below 500."""
    try:
        async with async_timeout.timeout(timeout):
            async with aiohttp.ClientSession() as s:
                async with s.head(url, allow_redirects=True) as r:
                    if r.status < 500:
                        return str(r.url)
                    log.debug("Preflight %s answered %s", url, r.status)
    except Exception as e:
        log.debug("Preflight %s failed: %r", url, e)
    return None
