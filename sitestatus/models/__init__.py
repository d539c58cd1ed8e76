from .check_result import CheckResult, CheckStatus
from .site_history import SiteHistory
from .incident import Incident

__all__ = [
    "CheckResult",
    "CheckStatus",
    "SiteHistory",
    "Incident",
]
