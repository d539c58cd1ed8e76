import threading
from functools import lru_cache

from .config import settings
from .services.uptime_tracker import UptimeTracker
from .store import DataStore

# The tracker has no locking of its own. Request handlers run in a thread
# pool next to the scheduled check job, so every access goes through this lock.
tracker_lock = threading.Lock()


@lru_cache(maxsize=1)
def get_tracker() -> UptimeTracker:
    return UptimeTracker(DataStore(settings.DATA_DIR))
