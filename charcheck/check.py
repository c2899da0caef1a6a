import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PWTimeout     # navigation timeout

from .config import ALERT_SELECTOR, NOT_FOUND_MESSAGE, PAGE_TIMEOUT, URL_TEMPLATE
from .utils import read_text

log = logging.getLogger(__name__)


class Availability(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    INDETERMINATE = "indeterminate"     # probe failed, no conclusion


@dataclass(frozen=True)
class CheckResult:
    identifier: str
    status: Availability
    detail: Optional[str] = None

    @property
    def available(self) -> bool:
        return self.status is Availability.AVAILABLE


def char_page_url(identifier: str) -> str:
    # substituted verbatim, no extra encoding
    return URL_TEMPLATE.format(identifier)


def classify(text: Optional[str]) -> Availability:
    """Map the alert text of a loaded page to a definite answer."""
    if text == NOT_FOUND_MESSAGE:
        return Availability.AVAILABLE
    return Availability.UNAVAILABLE


async def check_identifier(page: Page, identifier: str) -> CheckResult:
    """
    Load the character page for *identifier* and classify it.

    The service renders ``Not Found!`` into ``#serveralert`` when no character
    owns the name, so only that exact text counts as available. A missing node
    on a page that did load is a plain "taken". Timeouts and any navigation or
    evaluation error give ``INDETERMINATE``; this function never raises.
    """
    url = char_page_url(identifier)
    try:
        await page.goto(url, wait_until="networkidle", timeout=PAGE_TIMEOUT)
        text = await read_text(page, ALERT_SELECTOR)
    except PWTimeout:
        log.debug("TIMEOUT   %s", url)
        return CheckResult(identifier, Availability.INDETERMINATE, "timeout")
    except Exception as e:
        log.debug("ERROR     %s %s", url, e)
        return CheckResult(identifier, Availability.INDETERMINATE, str(e))

    return CheckResult(identifier, classify(text), text)
