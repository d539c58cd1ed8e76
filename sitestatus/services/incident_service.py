import logging
import random
from typing import Callable, List, Optional

from ..models import CheckResult, Incident

logger = logging.getLogger(__name__)


def generate_incident_id(now: int, existing_ids=()) -> str:
    """INC-<epoch>-<4 random digits>, retried until unique within the list."""
    taken = set(existing_ids)
    while True:
        incident_id = f"INC-{now}-{random.randint(1000, 9999)}"
        if incident_id not in taken:
            return incident_id


def find_active_incident(incidents: List[Incident], site_name: str) -> Optional[Incident]:
    """
    Return the unresolved incident for a site, or None.

    At most one should exist. If several are found (e.g. hand-edited data),
    the most recently started one wins (later storage position breaks ties)
    and the rest are reported.
    """
    active = [i for i in incidents if i.site_name == site_name and i.resolved_at is None]
    if not active:
        return None
    if len(active) == 1:
        return active[0]

    # max() keeps the first maximum, so walk in reverse to prefer the later one
    chosen = max(reversed(active), key=lambda i: i.started_at)
    others = [i.id for i in active if i is not chosen]
    logger.warning(
        f"⚠️ {len(active)} unresolved incidents for {site_name}; "
        f"using {chosen.id}, ignoring {', '.join(others)}"
    )
    return chosen


def update_incidents(
    incidents: List[Incident],
    site_name: str,
    check: CheckResult,
    id_factory: Callable[[int, list], str] = generate_incident_id,
) -> Optional[Incident]:
    """
    Advance the per-site incident state machine with one check.

    Healthy + down opens an incident, Outage + up resolves it, anything else
    is a no-op. Returns the incident that was opened or resolved, if any.
    """
    active = find_active_incident(incidents, site_name)

    if check.status == "down":
        if active is not None:
            return None
        incident = Incident(
            id=id_factory(check.timestamp, [i.id for i in incidents]),
            site_name=site_name,
            started_at=check.timestamp,
            error=check.error,
        )
        incidents.append(incident)
        logger.info(f"🔴 Incident {incident.id} opened for {site_name}: {check.error or 'no error message'}")
        return incident

    if active is None:
        return None

    active.resolve(check.timestamp)
    logger.info(f"✅ Incident {active.id} resolved for {site_name} after {active.duration}s")
    return active
