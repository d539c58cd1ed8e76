from typing import Dict, Optional
from ..models import CheckResult, SiteHistory

MAX_HISTORY_DAYS = 90
SECONDS_PER_DAY = 24 * 60 * 60


def append_check(
    uptime: Dict[str, SiteHistory],
    site_name: str,
    url: str,
    check: CheckResult,
) -> SiteHistory:
    """Append a check to a site's history, creating the history on first sight.

    The url is overwritten on every call so a site can move without losing
    its history.
    """
    history = uptime.get(site_name)
    if history is None:
        history = SiteHistory(url=url)
        uptime[site_name] = history
    else:
        history.url = url
    history.checks.append(check)
    return history


def prune_history(history: SiteHistory, now: int, max_days: int = MAX_HISTORY_DAYS) -> int:
    """Drop checks older than the retention window. Returns how many were removed."""
    cutoff = now - max_days * SECONDS_PER_DAY
    kept = [c for c in history.checks if c.timestamp >= cutoff]
    removed = len(history.checks) - len(kept)
    if removed:
        history.checks = kept
    return removed


def checks_since(history: Optional[SiteHistory], cutoff: int) -> list:
    if history is None:
        return []
    return [c for c in history.checks if c.timestamp >= cutoff]
