from pydantic import BaseModel, Field
from typing import List, Optional


class Incident(BaseModel):
    id: str
    site_name: str
    started_at: int
    resolved_at: Optional[int] = None  # None while the outage is ongoing
    error: Optional[str] = None
    updates: List[dict] = Field(default_factory=list)  # reserved, always empty
    duration: Optional[int] = None  # seconds, set on resolution

    def resolve(self, timestamp: int) -> None:
        self.resolved_at = timestamp
        self.duration = timestamp - self.started_at

    def to_document(self) -> dict:
        doc = {
            "id": self.id,
            "site_name": self.site_name,
            "started_at": self.started_at,
            "resolved_at": self.resolved_at,
            "error": self.error,
            "updates": list(self.updates),
        }
        if self.duration is not None:
            doc["duration"] = self.duration
        return doc
