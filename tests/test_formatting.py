from __future__ import annotations

from sitestatus.schemas.analytics import SiteSummary
from sitestatus.utils.formatting import (
    format_duration,
    overall_status,
    status_class,
    status_text,
    time_ago,
    uptime_bar_class,
)


def summary(status: str) -> SiteSummary:
    return SiteSummary(
        url="https://a.test",
        status=status,
        uptime_percentage=100.0,
        last_checked=0,
        total_checks=1,
        active_incidents=0,
    )


def test_format_duration() -> None:
    assert format_duration(None) == "N/A"
    assert format_duration(42) == "42s"
    assert format_duration(300) == "5m"
    assert format_duration(3 * 3600 + 600) == "3h 10m"
    assert format_duration(2 * 86400 + 3 * 3600) == "2d 3h"


def test_time_ago() -> None:
    assert time_ago(1000, now=1030) == "30s ago"
    assert time_ago(1000, now=1000 + 5 * 60) == "5m ago"
    assert time_ago(1000, now=1000 + 2 * 3600) == "2h ago"
    assert time_ago(1000, now=1000 + 3 * 86400) == "3d ago"


def test_overall_status() -> None:
    assert overall_status({}) == "unknown"
    assert overall_status({"a": summary("up"), "b": summary("up")}) == "operational"
    assert overall_status({"a": summary("up"), "b": summary("down")}) == "partial_outage"
    assert overall_status({"a": summary("down")}) == "major_outage"


def test_css_helpers() -> None:
    assert status_class("operational") == "status-operational"
    assert status_class("down") == "status-critical"
    assert status_class("partial_outage") == "status-degraded"
    assert status_class("mystery") == "status-unknown"
    assert status_text("major_outage") == "Major System Outage"
    assert status_text("mystery") == "System Status Unknown"
    assert uptime_bar_class(100.0) == "uptime-excellent"
    assert uptime_bar_class(99.5) == "uptime-good"
    assert uptime_bar_class(96.0) == "uptime-degraded"
    assert uptime_bar_class(50.0) == "uptime-poor"
    assert uptime_bar_class(None) == "uptime-no-data"
