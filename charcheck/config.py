import multiprocessing
import os
from dataclasses import dataclass
from typing import Optional

# ––– CONFIG –––––––––––––––––––––––––––––––––––––––––––––––––––––––
SERVICE_HOST         = os.environ.get("CHARCHECK_SERVICE_HOST", "account.aq.com")
URL_TEMPLATE         = "https://" + SERVICE_HOST + "/CharPage?id={}"
ALERT_SELECTOR       = "#serveralert"
NOT_FOUND_MESSAGE    = "Not Found!"
PAGE_TIMEOUT         = 30_000          # page.goto() timeout in ms
PREFLIGHT_TIMEOUT    = 5               # seconds
RECORD_FILE          = "available_usernames.txt"
BLOCKED_RESOURCES    = r"**/*.{png,jpg,jpeg,webp,gif,css,woff,woff2}"

BROWSER_MODES        = ("shared", "per-probe")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off")


@dataclass
class RunConfig:
    input_path: str
    workers: int
    record_path: str = RECORD_FILE
    browser_mode: str = "shared"
    headless: bool = True
    cdp_endpoint: Optional[str] = None
    preflight: bool = True

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.browser_mode not in BROWSER_MODES:
            raise ValueError(
                f"browser mode must be one of {', '.join(BROWSER_MODES)}, got {self.browser_mode!r}"
            )

    @classmethod
    def from_env(cls, input_path: str, workers: Optional[int] = None) -> "RunConfig":
        """Build a run config from CLI values plus CHARCHECK_* overrides."""
        return cls(
            input_path=input_path,
            workers=workers if workers is not None else multiprocessing.cpu_count(),
            record_path=os.environ.get("CHARCHECK_RECORD_FILE") or RECORD_FILE,
            browser_mode=os.environ.get("CHARCHECK_BROWSER_MODE") or "shared",
            headless=_env_flag("CHARCHECK_HEADLESS", True),
            cdp_endpoint=os.environ.get("CHARCHECK_CDP_ENDPOINT") or None,
            preflight=_env_flag("CHARCHECK_PREFLIGHT", True),
        )
