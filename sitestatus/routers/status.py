import time

from fastapi import APIRouter, Depends, HTTPException, Query

from ..dependencies import get_tracker, tracker_lock
from ..models import Incident
from ..services.uptime_tracker import UptimeTracker
from ..utils.formatting import (
    format_duration,
    format_timestamp,
    overall_status,
    status_class,
    status_text,
    time_ago,
    uptime_bar_class,
)

router = APIRouter()


def incident_out(incident: Incident) -> dict:
    return {**incident.model_dump(), "duration_text": format_duration(incident.duration)}


@router.get("/status")
def status_summary(tracker: UptimeTracker = Depends(get_tracker)):
    with tracker_lock:
        summary = tracker.status_summary()
        active = tracker.active_incidents()
    overall = overall_status(summary)
    return {
        "status": overall,
        "status_text": status_text(overall),
        "status_class": status_class(overall),
        "sites": summary,
        "active_incidents": [incident_out(i) for i in active],
        "timestamp": int(time.time()),
    }


@router.get("/site/{name}")
def site_detail(
    name: str,
    days: int = Query(90, ge=1, le=90),
    tracker: UptimeTracker = Depends(get_tracker),
):
    """
    Summary, daily rollup, calendar bars and the last 7 days of raw checks
    for one site. 404 when the site has never been checked.
    """
    with tracker_lock:
        summary = tracker.status_summary().get(name)
        if summary is None:
            raise HTTPException(status_code=404, detail="Site not found")
        now = tracker.now()
        bars = tracker.uptime_bars(name, days)
        return {
            "name": name,
            "summary": summary,
            "status_class": status_class(summary.status),
            "last_checked_at": format_timestamp(summary.last_checked),
            "last_checked_ago": time_ago(summary.last_checked, now=now),
            "daily_uptime": tracker.daily_uptime(name, days),
            "uptime_bars": [{**bar.model_dump(), "bar_class": uptime_bar_class(bar.uptime)} for bar in bars],
            "recent_history": tracker.uptime_history(name, 7),
        }


@router.get("/incidents")
def incidents(limit: int = Query(50, ge=1, le=500), tracker: UptimeTracker = Depends(get_tracker)):
    with tracker_lock:
        recent = tracker.recent_incidents(limit)
        active = tracker.active_incidents()
    return {
        "recent": [incident_out(i) for i in recent],
        "active": [incident_out(i) for i in active],
    }
