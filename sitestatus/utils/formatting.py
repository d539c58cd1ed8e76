import time
from datetime import datetime
from typing import Dict, Optional

from ..schemas.analytics import SiteSummary


def format_duration(seconds: Optional[int]) -> str:
    """Compact duration such as "2d 3h", "4h 10m", "5m" or "42s"."""
    if seconds is None:
        return "N/A"

    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h"
    elif hours > 0:
        return f"{hours}h {minutes % 60}m"
    elif minutes > 0:
        return f"{minutes}m"
    return f"{seconds}s"


def format_timestamp(timestamp: int) -> str:
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def time_ago(timestamp: int, now: Optional[int] = None) -> str:
    seconds = int(now if now is not None else time.time()) - timestamp

    if seconds < 60:
        return f"{seconds}s ago"
    elif seconds < 3600:
        return f"{seconds // 60}m ago"
    elif seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def overall_status(summary: Dict[str, SiteSummary]) -> str:
    if not summary:
        return "unknown"

    down_count = sum(1 for s in summary.values() if s.status == "down")
    if down_count == 0:
        return "operational"
    elif down_count == len(summary):
        return "major_outage"
    return "partial_outage"


def status_class(status: str) -> str:
    if status in ("up", "operational"):
        return "status-operational"
    if status in ("down", "major_outage"):
        return "status-critical"
    if status == "partial_outage":
        return "status-degraded"
    return "status-unknown"


def status_text(status: str) -> str:
    return {
        "operational": "All Systems Operational",
        "partial_outage": "Partial System Outage",
        "major_outage": "Major System Outage",
    }.get(status, "System Status Unknown")


def uptime_bar_class(uptime: Optional[float]) -> str:
    if uptime is None:
        return "uptime-no-data"
    if uptime >= 99.9:
        return "uptime-excellent"
    elif uptime >= 99.0:
        return "uptime-good"
    elif uptime >= 95.0:
        return "uptime-degraded"
    return "uptime-poor"
