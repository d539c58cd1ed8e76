"""
JSON document store for check history and incidents.

Two independent documents live under the data directory:

    uptime.json     {site_name: {"url": ..., "checks": [...]}}
    incidents.json  [{"id": ..., "site_name": ..., ...}, ...]

A missing document loads as empty. A document that cannot be parsed or does
not match the expected shape is reset to empty with a warning; the other
document is unaffected.
"""
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Union

from pydantic import ValidationError

from .models import Incident, SiteHistory

logger = logging.getLogger(__name__)

UPTIME_FILENAME = "uptime.json"
INCIDENTS_FILENAME = "incidents.json"


class DataStore:
    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.uptime_path = self.data_dir / UPTIME_FILENAME
        self.incidents_path = self.data_dir / INCIDENTS_FILENAME

    # --- LOADING ---

    def load_uptime(self) -> Dict[str, SiteHistory]:
        raw = self._read_document(self.uptime_path)
        if raw is None:
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"⚠️ {self.uptime_path} is not a mapping, resetting to empty")
            return {}
        try:
            return {str(name): SiteHistory(**data) for name, data in raw.items()}
        except (TypeError, ValidationError) as e:
            logger.warning(f"⚠️ {self.uptime_path} failed validation, resetting to empty: {e}")
            return {}

    def load_incidents(self) -> List[Incident]:
        raw = self._read_document(self.incidents_path)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning(f"⚠️ {self.incidents_path} is not a list, resetting to empty")
            return []
        try:
            return [Incident(**item) for item in raw]
        except (TypeError, ValidationError) as e:
            logger.warning(f"⚠️ {self.incidents_path} failed validation, resetting to empty: {e}")
            return []

    def _read_document(self, path: Path):
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, UnicodeDecodeError, ValueError, RecursionError) as e:
            # ValueError covers JSONDecodeError and oversized integer literals
            logger.warning(f"⚠️ Could not read {path}, resetting to empty: {e}")
            return None

    # --- SAVING ---

    def save_uptime(self, uptime: Dict[str, SiteHistory]) -> None:
        self._write_document(
            self.uptime_path,
            {name: history.to_document() for name, history in uptime.items()},
        )

    def save_incidents(self, incidents: List[Incident]) -> None:
        self._write_document(
            self.incidents_path,
            [incident.to_document() for incident in incidents],
        )

    def _write_document(self, path: Path, payload) -> None:
        # Whole-file rewrite through a temp file so readers never see a partial document
        tmp = path.with_name(path.name + ".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        os.replace(tmp, path)
