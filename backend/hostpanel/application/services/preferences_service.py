"""Application service for runtime panel preferences.

Reads/writes preferences to a JSON file so they persist across restarts
without requiring a database migration. The file only holds overrides;
reads always merge them over the defaults below.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any

from hostpanel.domain.exceptions import EntityNotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES: dict[str, dict[str, Any]] = {
    "system": {
        "server_name": "web-server-01",
        "timezone": "UTC",
        "language": "en",
        "auto_updates": True,
        "maintenance_mode": False,
        "debug_mode": False,
    },
    "user": {
        "username": "admin",
        "email": "admin@example.com",
        "notifications": True,
        "two_factor": True,
    },
    "display": {
        "theme": "light",
        "items_per_page": 25,
        "auto_refresh": True,
        "refresh_interval": 30,
        "notifications": {
            "email": True,
            "system": True,
            "security": True,
            "maintenance": False,
        },
        "session_timeout": 30,
        "ip_restrictions": False,
    },
}


def _same_kind(default: Any, value: Any) -> bool:
    # bool is a subclass of int; keep the two apart.
    if isinstance(default, bool) or isinstance(value, bool):
        return isinstance(default, bool) and isinstance(value, bool)
    if isinstance(default, (int, float)):
        return isinstance(value, (int, float))
    return isinstance(value, type(default))


class PreferencesService:
    """JSON-file-backed preferences store, one section per settings panel."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _read_overrides(self) -> dict[str, Any]:
        """Read the JSON overrides file, returning {} if missing or corrupt."""
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Could not read %s, using defaults", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed preferences in %s", self._path)
            return {}
        return data

    def _write_overrides(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get_all(self) -> dict[str, dict[str, Any]]:
        """Return the effective preferences: defaults merged with overrides."""
        overrides = self._read_overrides()
        merged = copy.deepcopy(DEFAULT_PREFERENCES)
        for section, values in merged.items():
            stored = overrides.get(section)
            if not isinstance(stored, dict):
                continue
            for key, value in stored.items():
                if key not in values or not _same_kind(values[key], value):
                    continue
                if isinstance(values[key], dict):
                    nested = values[key]
                    nested.update({
                        k: v for k, v in value.items()
                        if k in nested and _same_kind(nested[k], v)
                    })
                else:
                    values[key] = value
        return merged

    def get_section(self, section: str) -> dict[str, Any]:
        if section not in DEFAULT_PREFERENCES:
            raise EntityNotFoundError("PreferenceSection", section)
        return self.get_all()[section]

    def update_section(self, section: str, updates: dict[str, Any]) -> dict[str, Any]:
        """Validate and persist overrides for one section; return its new values.

        Raises EntityNotFoundError for an unknown section and ValidationError
        for unknown keys or values of the wrong type.
        """
        if section not in DEFAULT_PREFERENCES:
            raise EntityNotFoundError("PreferenceSection", section)

        defaults = DEFAULT_PREFERENCES[section]
        for key, value in updates.items():
            if key not in defaults:
                raise ValidationError(key, f"Unknown preference '{key}' in section '{section}'")
            if not _same_kind(defaults[key], value):
                raise ValidationError(key, f"Preference '{key}' expects {type(defaults[key]).__name__}")
            if isinstance(defaults[key], dict):
                unknown = set(value) - set(defaults[key])
                if unknown:
                    raise ValidationError(key, f"Unknown keys: {', '.join(sorted(unknown))}")
                for sub_key, sub_value in value.items():
                    if not _same_kind(defaults[key][sub_key], sub_value):
                        expected = type(defaults[key][sub_key]).__name__
                        raise ValidationError(f"{key}.{sub_key}", f"Preference '{key}.{sub_key}' expects {expected}")

        overrides = self._read_overrides()
        stored = overrides.get(section)
        if not isinstance(stored, dict):
            stored = overrides[section] = {}
        for key, value in updates.items():
            if isinstance(defaults[key], dict):
                nested = stored.get(key)
                if not isinstance(nested, dict):
                    nested = stored[key] = {}
                nested.update(value)
            else:
                stored[key] = value
        self._write_overrides(overrides)

        logger.info("Preferences section '%s' updated: %s", section, sorted(updates))
        return self.get_section(section)
