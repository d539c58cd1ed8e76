"""
HTTP site checker.

Fetches each configured site, follows redirects by hand, times the request
and looks for the expected string in the body. Every outcome is handed to
the UptimeTracker; failures are collected and reported by email once per run.
"""
import logging
import time
from contextlib import nullcontext
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import httpx
from pydantic import BaseModel

from ..config import settings
from ..schemas.config import MonitorConfig, SiteConfig
from . import notification_service
from .uptime_tracker import UptimeTracker

logger = logging.getLogger(__name__)


class TooManyRedirects(Exception):
    pass


class CheckOutcome(BaseModel):
    name: str
    url: str
    status: str  # "up" or "down"
    response_time: Optional[int] = None  # in ms, None when the request never completed
    error: Optional[str] = None
    summary: str  # one-line result for the last-run file

    @property
    def ok(self) -> bool:
        return self.status == "up"


class SiteChecker:
    def __init__(
        self,
        config: MonitorConfig,
        tracker: UptimeTracker,
        client: Optional[httpx.Client] = None,
        last_run_file: Optional[str] = None,
        record_lock=None,
    ):
        self.config = config
        self.tracker = tracker
        self.client = client or httpx.Client(
            timeout=settings.HTTP_TIMEOUT,
            follow_redirects=False,
            headers={"User-Agent": settings.USER_AGENT},
        )
        self.last_run_file = Path(last_run_file or settings.LAST_RUN_FILE)
        self.max_redirects = settings.MAX_REDIRECTS
        self.record_lock = record_lock or nullcontext()

    def check_all_sites(self) -> List[CheckOutcome]:
        logger.info(f"Checking {len(self.config.sites)} sites...")

        outcomes = [self.check_site(site) for site in self.config.sites]
        failures = [
            {
                "name": o.name,
                "url": o.url,
                "expected_string": site.expected_string,
                "reason": o.error,
            }
            for o, site in zip(outcomes, self.config.sites)
            if not o.ok
        ]

        if failures:
            logger.warning(f"{len(failures)} site(s) failed the check")
            notification_service.send_failure_notification(self.config.email, failures)
        else:
            logger.info("All sites passed the check!")

        self.log_last_run(outcomes)
        return outcomes

    def check_site(self, site: SiteConfig) -> CheckOutcome:
        name = site.display_name
        url = site.url
        start = time.monotonic()

        try:
            response = self.fetch_with_redirects(url)
        except (httpx.HTTPError, httpx.InvalidURL, TooManyRedirects) as e:
            error = f"Error: {e}"
            logger.warning(f"❌ {name} FAILED - {e}")
            self._record(name, url, "down", error=error)
            return CheckOutcome(name=name, url=url, status="down", error=error, summary=f"FAILED - {e}")

        response_time = round((time.monotonic() - start) * 1000)

        if not response.is_success:
            error = f"HTTP error: {response.status_code} {response.reason_phrase}"
            logger.warning(f"❌ {name} FAILED - HTTP {response.status_code}")
            self._record(name, url, "down", response_time, error)
            return CheckOutcome(
                name=name, url=url, status="down", response_time=response_time, error=error,
                summary=f"FAILED - HTTP {response.status_code}",
            )

        if site.expected_string not in response.text:
            error = "Expected string not found in response"
            logger.warning(f"❌ {name} FAILED - String '{site.expected_string}' not found")
            self._record(name, url, "down", response_time, error)
            return CheckOutcome(
                name=name, url=url, status="down", response_time=response_time, error=error,
                summary=f"FAILED - String '{site.expected_string}' not found",
            )

        logger.info(f"✅ {name} OK ({response_time}ms)")
        self._record(name, url, "up", response_time)
        return CheckOutcome(name=name, url=url, status="up", response_time=response_time, summary="OK")

    def fetch_with_redirects(self, url: str) -> httpx.Response:
        current = httpx.URL(url)
        for _ in range(self.max_redirects):
            response = self.client.get(current)
            if not response.is_redirect:
                return response
            # relative Location headers resolve against the URL that answered
            current = current.join(response.headers["location"])
        raise TooManyRedirects("Too many HTTP redirects")

    def send_test_email(self) -> None:
        notification_service.send_test_email(self.config)

    def log_last_run(self, outcomes: List[CheckOutcome]) -> None:
        content = datetime.now().strftime("%Y-%m-%d %H:%M:%S") + "\n"
        for outcome in outcomes:
            content += f"{outcome.name}: {outcome.summary}\n"
        self.last_run_file.write_text(content, encoding="utf-8")

    def _record(self, name, url, status, response_time=None, error=None) -> None:
        with self.record_lock:
            self.tracker.record(name, url, status, response_time, error)
