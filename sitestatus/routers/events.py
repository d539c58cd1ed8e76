from fastapi import APIRouter, Depends
from ..dependencies import get_tracker, tracker_lock
from ..schemas.event import CheckEvent
from ..services.uptime_tracker import UptimeTracker
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/check")
def record_check(payload: CheckEvent, tracker: UptimeTracker = Depends(get_tracker)):
    """
    Record one check result produced by an external checker.
    Incidents are opened/resolved by the tracker as a side effect.
    """
    with tracker_lock:
        check = tracker.record(
            payload.site_name,
            payload.url,
            payload.status,
            payload.response_time,
            payload.error,
        )
        active = tracker.active_incident_for(payload.site_name)

    logger.info(f"📝 Recorded {check.status} for {payload.site_name} at {check.timestamp}")

    return {
        "message": "Check recorded",
        "site_name": payload.site_name,
        "status": check.status,
        "timestamp": check.timestamp,
        "active_incident": active,
    }
