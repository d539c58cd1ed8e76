from pydantic import BaseModel
from typing import Literal, Optional


class SiteSummary(BaseModel):
    url: str
    status: str
    uptime_percentage: float
    last_checked: int
    last_error: Optional[str] = None
    avg_response_time: Optional[int] = None
    total_checks: int
    active_incidents: int


class DailyUptime(BaseModel):
    date: str
    uptime_percentage: float
    total_checks: int
    up_count: int
    down_count: int


class UptimeBar(BaseModel):
    date: str
    status: Literal["up", "error", "no_data"]
    uptime: Optional[float] = None
    up_count: int = 0
    down_count: int = 0
    total_checks: int = 0
