import math
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from ..models import CheckResult, Incident, SiteHistory
from ..schemas.analytics import DailyUptime, SiteSummary, UptimeBar
from .history_service import SECONDS_PER_DAY, checks_since

SUMMARY_WINDOW = 100


def _percentage(part: int, total: int) -> float:
    return round(part / total * 100, 2)


def _utc_date(timestamp: int):
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).date()


def _count_by_day(checks: List[CheckResult]) -> Dict[str, Dict[str, int]]:
    daily: Dict[str, Dict[str, int]] = {}
    for check in checks:
        day = _utc_date(check.timestamp).isoformat()
        stats = daily.setdefault(day, {"up": 0, "down": 0})
        stats[check.status] += 1
    return daily


def get_status_summary(uptime: Dict[str, SiteHistory], incidents: List[Incident]) -> Dict[str, SiteSummary]:
    """
    Point-in-time summary for every site with at least one check.

    uptime_percentage and avg_response_time only look at the last 100 checks;
    status/last_* come from the latest check and total_checks counts the
    whole retained history.
    """
    summary: Dict[str, SiteSummary] = {}

    for site_name, history in uptime.items():
        checks = history.checks
        if not checks:
            continue

        recent = checks[-SUMMARY_WINDOW:]
        up_count = sum(1 for c in recent if c.status == "up")
        latest = checks[-1]

        response_times = [c.response_time for c in recent if c.response_time is not None]
        # half-up rounding; response times are never negative
        avg_response_time = math.floor(sum(response_times) / len(response_times) + 0.5) if response_times else None

        active = sum(1 for i in incidents if i.site_name == site_name and i.resolved_at is None)

        summary[site_name] = SiteSummary(
            url=history.url,
            status=latest.status,
            uptime_percentage=_percentage(up_count, len(recent)),
            last_checked=latest.timestamp,
            last_error=latest.error,
            avg_response_time=avg_response_time,
            total_checks=len(checks),
            active_incidents=active,
        )

    return summary


def get_uptime_history(history: Optional[SiteHistory], now: int, days: int = 90) -> List[CheckResult]:
    return checks_since(history, now - days * SECONDS_PER_DAY)


def get_daily_uptime(history: Optional[SiteHistory], now: int, days: int = 90) -> List[DailyUptime]:
    """Per-day uptime for days that have checks, oldest first."""
    checks = get_uptime_history(history, now, days)
    if not checks:
        return []

    daily = _count_by_day(checks)
    result = []
    for day in sorted(daily):
        stats = daily[day]
        total = stats["up"] + stats["down"]
        result.append(
            DailyUptime(
                date=day,
                uptime_percentage=_percentage(stats["up"], total),
                total_checks=total,
                up_count=stats["up"],
                down_count=stats["down"],
            )
        )
    return result


def get_uptime_bars(history: Optional[SiteHistory], now: int, days: int = 90) -> List[UptimeBar]:
    """
    One bar per calendar day from today - days to today inclusive.

    Always days + 1 entries; days without checks are "no_data".
    """
    end_date = _utc_date(now)
    start_date = end_date - timedelta(days=days)
    daily = _count_by_day(get_uptime_history(history, now, days))

    bars = []
    for offset in range(days + 1):
        day = (start_date + timedelta(days=offset)).isoformat()
        stats = daily.get(day)

        if stats is None:
            bars.append(UptimeBar(date=day, status="no_data"))
            continue

        total = stats["up"] + stats["down"]
        bars.append(
            UptimeBar(
                date=day,
                status="error" if stats["down"] > 0 else "up",
                uptime=_percentage(stats["up"], total),
                up_count=stats["up"],
                down_count=stats["down"],
                total_checks=total,
            )
        )
    return bars


def get_recent_incidents(incidents: List[Incident], limit: int = 10) -> List[Incident]:
    # stable sort: equal started_at keep storage order, newest-first overall
    ordered = sorted(incidents, key=lambda i: i.started_at, reverse=True)
    return ordered[:max(limit, 0)]


def get_active_incidents(incidents: List[Incident]) -> List[Incident]:
    return [i for i in incidents if i.resolved_at is None]
