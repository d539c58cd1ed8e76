from pydantic import BaseModel, Field
from typing import Literal, Optional

CheckStatus = Literal["up", "down"]


class CheckResult(BaseModel):
    timestamp: int  # epoch seconds
    status: CheckStatus
    response_time: Optional[int] = Field(default=None, ge=0)  # in ms
    error: Optional[str] = None

    def to_document(self) -> dict:
        # response_time is always written (null when missing), error only when set
        doc = {
            "timestamp": self.timestamp,
            "status": self.status,
            "response_time": self.response_time,
        }
        if self.error is not None:
            doc["error"] = self.error
        return doc
