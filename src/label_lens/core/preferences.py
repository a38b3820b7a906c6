"""
Preference Store

Process-wide appearance preferences persisted to a small JSON file.
Values are read once at init and written on every change. Nothing in the
extraction pipeline reads from here.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from label_lens.core import config

logger = logging.getLogger(__name__)

THEMES = ("light", "dark")
DEFAULT_THEME = "light"


class PreferenceStore:
    """Read-at-init, write-on-change preference file."""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or config.PREFERENCES_FILE).expanduser()
        self._values: Dict[str, Any] = self._read()

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable preferences file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._values, f, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self._write()

    @property
    def theme(self) -> str:
        theme = self.get("theme")
        return theme if theme in THEMES else DEFAULT_THEME

    @theme.setter
    def theme(self, value: str) -> None:
        if value not in THEMES:
            raise ValueError(f"Unknown theme: {value}. Must be one of {', '.join(THEMES)}")
        self.set("theme", value)

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        return self.theme
