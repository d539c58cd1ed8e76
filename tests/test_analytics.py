from __future__ import annotations

from datetime import date, timedelta

from sitestatus.services.uptime_tracker import UptimeTracker
from sitestatus.store import DataStore

from .conftest import BASE_TS

DAY = 24 * 60 * 60


def test_summary_uptime_percentage(tracker, clock) -> None:
    for status in ("up", "up", "down", "up"):
        tracker.record("a", "https://a.test", status, 100 if status == "up" else None)
        clock.advance(60)

    summary = tracker.status_summary()["a"]
    assert summary.uptime_percentage == 75.0
    assert summary.status == "up"
    assert summary.total_checks == 4
    assert summary.avg_response_time == 100
    assert summary.active_incidents == 0
    assert summary.url == "https://a.test"


def test_summary_window_is_last_100_checks(tracker, clock) -> None:
    for _ in range(50):
        tracker.record("a", "https://a.test", "down", None, "boom")
        clock.advance(60)
    for _ in range(100):
        tracker.record("a", "https://a.test", "up", 200)
        clock.advance(60)

    summary = tracker.status_summary()["a"]
    assert summary.uptime_percentage == 100.0
    assert summary.total_checks == 150
    assert summary.avg_response_time == 200


def test_summary_latest_check_fields(tracker, clock) -> None:
    tracker.record("a", "https://a.test", "up", 100)
    clock.advance(60)
    tracker.record("a", "https://a.test", "down", None, "HTTP error: 503 Service Unavailable")

    summary = tracker.status_summary()["a"]
    assert summary.status == "down"
    assert summary.last_checked == BASE_TS + 60
    assert summary.last_error == "HTTP error: 503 Service Unavailable"
    assert summary.uptime_percentage == 50.0
    assert summary.active_incidents == 1


def test_summary_avg_response_time_rounds_and_skips_missing(tracker) -> None:
    tracker.record("a", "https://a.test", "up", 100)
    tracker.record("a", "https://a.test", "up", 101)
    tracker.record("a", "https://a.test", "up", 103)
    tracker.record("a", "https://a.test", "down", None, "Error: timed out")
    assert tracker.status_summary()["a"].avg_response_time == 101

    tracker.record("b", "https://b.test", "down", None, "Error: timed out")
    summary = tracker.status_summary()["b"]
    assert summary.avg_response_time is None
    assert summary.uptime_percentage == 0.0


def test_unknown_site_yields_empty_results(tracker) -> None:
    assert tracker.status_summary() == {}
    assert tracker.uptime_history("nope") == []
    assert tracker.daily_uptime("nope") == []
    assert "nope" not in tracker.status_summary()


def test_uptime_history_filters_by_days(tracker, clock) -> None:
    tracker.record("a", "https://a.test", "up", 10)
    clock.advance(10 * DAY)
    tracker.record("a", "https://a.test", "down", None, "boom")
    clock.advance(DAY)
    tracker.record("a", "https://a.test", "up", 10)

    assert len(tracker.uptime_history("a", 90)) == 3
    recent = tracker.uptime_history("a", 7)
    assert [c.status for c in recent] == ["down", "up"]


def test_daily_uptime_groups_by_utc_day(tracker, clock) -> None:
    # BASE_TS is noon UTC on 2026-03-15
    tracker.record("a", "https://a.test", "up", 10)
    clock.advance(3600)
    tracker.record("a", "https://a.test", "down", None, "boom")
    clock.advance(3600)
    tracker.record("a", "https://a.test", "up", 10)
    clock.advance(2 * DAY)
    tracker.record("a", "https://a.test", "up", 10)

    daily = tracker.daily_uptime("a", 90)
    assert [d.date for d in daily] == ["2026-03-15", "2026-03-17"]
    assert daily[0].uptime_percentage == 66.67
    assert (daily[0].total_checks, daily[0].up_count, daily[0].down_count) == (3, 2, 1)
    assert daily[1].uptime_percentage == 100.0


def test_uptime_bars_are_dense(tracker, clock) -> None:
    tracker.record("a", "https://a.test", "up", 10)
    clock.advance(3600)
    tracker.record("a", "https://a.test", "down", None, "boom")
    clock.advance(DAY)
    tracker.record("a", "https://a.test", "up", 10)

    bars = tracker.uptime_bars("a", 30)
    assert len(bars) == 31

    dates = [date.fromisoformat(b.date) for b in bars]
    assert all(later - earlier == timedelta(days=1) for earlier, later in zip(dates, dates[1:]))
    assert dates[-1] == date(2026, 3, 16)

    by_date = {b.date: b for b in bars}
    assert by_date["2026-03-15"].status == "error"
    assert by_date["2026-03-15"].uptime == 50.0
    assert by_date["2026-03-16"].status == "up"
    assert by_date["2026-03-16"].uptime == 100.0

    empty = by_date["2026-03-01"]
    assert empty.status == "no_data"
    assert empty.uptime is None
    assert (empty.up_count, empty.down_count, empty.total_checks) == (0, 0, 0)


def test_uptime_bars_for_unknown_site(tracker) -> None:
    for days in (0, 1, 90):
        bars = tracker.uptime_bars("nope", days)
        assert len(bars) == days + 1
        assert all(b.status == "no_data" for b in bars)


def test_recent_and_active_incidents(tracker, clock) -> None:
    tracker.record("a", "https://a.test", "down", None, "a1")
    clock.advance(100)
    tracker.record("a", "https://a.test", "up", 10)
    clock.advance(100)
    tracker.record("b", "https://b.test", "down", None, "b1")
    clock.advance(100)
    tracker.record("c", "https://c.test", "down", None, "c1")

    recent = tracker.recent_incidents(2)
    assert [i.site_name for i in recent] == ["c", "b"]
    assert [i.site_name for i in tracker.recent_incidents(10)] == ["c", "b", "a"]

    active = tracker.active_incidents()
    assert [i.site_name for i in active] == ["b", "c"]


def test_queries_return_copies(tracker) -> None:
    tracker.record("a", "https://a.test", "down", None, "boom")
    tracker.active_incidents()[0].resolved_at = 1
    tracker.uptime_history("a")[0].status = "up"

    assert tracker.incidents[0].resolved_at is None
    assert tracker.uptime["a"].checks[0].status == "down"


def test_reload_reproduces_query_results(tracker, clock, data_dir) -> None:
    for i, status in enumerate(["up", "down", "down", "up", "up", "down"]):
        tracker.record(f"site-{i % 2}", f"https://site-{i % 2}.test", status, 50 + i if status == "up" else None, "boom" if status == "down" else None)
        clock.advance(7 * 3600)

    reloaded = UptimeTracker(DataStore(data_dir), clock=clock)

    assert reloaded.status_summary() == tracker.status_summary()
    assert reloaded.recent_incidents(10) == tracker.recent_incidents(10)
    assert reloaded.active_incidents() == tracker.active_incidents()
    for site in ("site-0", "site-1"):
        assert reloaded.uptime_history(site) == tracker.uptime_history(site)
        assert reloaded.daily_uptime(site) == tracker.daily_uptime(site)
        assert reloaded.uptime_bars(site) == tracker.uptime_bars(site)


def test_summary_avg_response_time_rounds_half_up(tracker) -> None:
    tracker.record("a", "https://a.test", "up", 100)
    tracker.record("a", "https://a.test", "up", 101)
    assert tracker.status_summary()["a"].avg_response_time == 101

    tracker.record("b", "https://b.test", "up", 102)
    tracker.record("b", "https://b.test", "up", 103)
    assert tracker.status_summary()["b"].avg_response_time == 103
