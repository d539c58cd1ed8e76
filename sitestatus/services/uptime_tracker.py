"""
Uptime tracking engine.

Ingests check results handed to it by a checker, keeps a rolling 90-day
history per site, derives incidents from up/down transitions and answers
the summary queries used by the API.

The engine does no locking: callers must serialize record() calls. Queries
work on a deep copy of the state taken at call time.
"""
import logging
import time
from typing import Callable, Dict, List, Optional

from ..models import CheckResult, Incident, SiteHistory
from ..schemas.analytics import DailyUptime, SiteSummary, UptimeBar
from ..store import DataStore
from . import analytics_service
from .history_service import append_check, prune_history
from .incident_service import find_active_incident, update_incidents

logger = logging.getLogger(__name__)


class UptimeTracker:
    def __init__(self, store: DataStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock
        self.uptime: Dict[str, SiteHistory] = store.load_uptime()
        self.incidents: List[Incident] = store.load_incidents()

    def now(self) -> int:
        return int(self.clock())

    # --- RECORDING ---

    def record(
        self,
        site_name: str,
        url: str,
        status: str,
        response_time: Optional[int] = None,
        error: Optional[str] = None,
    ) -> CheckResult:
        """Record one check result and persist both documents.

        Raises pydantic.ValidationError for an unknown status or a negative
        response_time; nothing is changed in that case.
        """
        check = CheckResult(
            timestamp=self.now(),
            status=status,
            response_time=response_time,
            error=error,
        )

        history = append_check(self.uptime, site_name, url, check)
        removed = prune_history(history, check.timestamp)
        if removed:
            logger.debug(f"Pruned {removed} expired checks for {site_name}")

        update_incidents(self.incidents, site_name, check)

        self.store.save_uptime(self.uptime)
        self.store.save_incidents(self.incidents)
        return check

    def active_incident_for(self, site_name: str) -> Optional[Incident]:
        return find_active_incident(self._incidents_snapshot(), site_name)

    # --- QUERIES ---

    def _uptime_snapshot(self) -> Dict[str, SiteHistory]:
        return {name: history.model_copy(deep=True) for name, history in self.uptime.items()}

    def _site_snapshot(self, site_name: str) -> Optional[SiteHistory]:
        history = self.uptime.get(site_name)
        return history.model_copy(deep=True) if history is not None else None

    def _incidents_snapshot(self) -> List[Incident]:
        return [incident.model_copy(deep=True) for incident in self.incidents]

    def status_summary(self) -> Dict[str, SiteSummary]:
        return analytics_service.get_status_summary(self._uptime_snapshot(), self._incidents_snapshot())

    def uptime_history(self, site_name: str, days: int = 90) -> List[CheckResult]:
        return analytics_service.get_uptime_history(self._site_snapshot(site_name), self.now(), days)

    def daily_uptime(self, site_name: str, days: int = 90) -> List[DailyUptime]:
        return analytics_service.get_daily_uptime(self._site_snapshot(site_name), self.now(), days)

    def uptime_bars(self, site_name: str, days: int = 90) -> List[UptimeBar]:
        return analytics_service.get_uptime_bars(self._site_snapshot(site_name), self.now(), days)

    def recent_incidents(self, limit: int = 10) -> List[Incident]:
        return analytics_service.get_recent_incidents(self._incidents_snapshot(), limit)

    def active_incidents(self) -> List[Incident]:
        return analytics_service.get_active_incidents(self._incidents_snapshot())
