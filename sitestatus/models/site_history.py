from pydantic import BaseModel, Field
from typing import List
from .check_result import CheckResult


class SiteHistory(BaseModel):
    url: str
    checks: List[CheckResult] = Field(default_factory=list)

    def to_document(self) -> dict:
        return {
            "url": self.url,
            "checks": [check.to_document() for check in self.checks],
        }
