import os
from pathlib import Path
from typing import Optional, Union

import yaml
from dotenv import load_dotenv

from .schemas.config import MonitorConfig

load_dotenv()


class Settings:
    # Both JSON documents (uptime.json, incidents.json) live in this directory.
    DATA_DIR: str = os.getenv("DATA_DIR") or "data"

    # YAML file listing the monitored sites and the alert email settings.
    SITES_CONFIG: str = os.getenv("SITES_CONFIG") or "config.yml"

    # 0 disables the scheduled check job inside the API process.
    CHECK_INTERVAL_MINUTES: int = int(os.getenv("CHECK_INTERVAL_MINUTES") or 5)

    LAST_RUN_FILE: str = os.getenv("LAST_RUN_FILE") or ".last_run.txt"

    HTTP_TIMEOUT: float = float(os.getenv("HTTP_TIMEOUT") or 10)
    MAX_REDIRECTS: int = int(os.getenv("MAX_REDIRECTS") or 10)
    USER_AGENT: str = os.getenv("USER_AGENT") or "SiteChecker/1.0"

    PROJECT_NAME: str = os.getenv("PROJECT_NAME") or "Site Status API"


settings = Settings()


def load_monitor_config(path: Optional[Union[str, Path]] = None) -> MonitorConfig:
    """Read the sites/email YAML file.

    Raises FileNotFoundError when the file does not exist; an empty file
    yields a config with no sites.
    """
    config_path = Path(path or settings.SITES_CONFIG)
    with config_path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    return MonitorConfig(**payload)
