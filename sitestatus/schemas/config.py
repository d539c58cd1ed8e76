from pydantic import BaseModel, Field
from typing import List, Optional


class SiteConfig(BaseModel):
    url: str
    name: Optional[str] = None
    expected_string: str = ""

    @property
    def display_name(self) -> str:
        return self.name or self.url


class EmailConfig(BaseModel):
    # "from" is a keyword, so the YAML key is mapped through an alias
    sender: str = Field(alias="from")
    to: str
    smtp_server: str
    smtp_port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None

    model_config = {"populate_by_name": True}


class MonitorConfig(BaseModel):
    sites: List[SiteConfig] = Field(default_factory=list)
    email: Optional[EmailConfig] = None
