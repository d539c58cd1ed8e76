from pydantic import BaseModel, Field
from typing import Literal, Optional


class CheckEvent(BaseModel):
    site_name: str = Field(min_length=1)
    url: str
    status: Literal["up", "down"]
    response_time: Optional[int] = Field(default=None, ge=0)  # in ms
    error: Optional[str] = None
