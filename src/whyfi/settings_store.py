"""Settings persistence port.

A single record (AppSettings) is kept under the ``app_settings`` key of a
JSON document. Loading never fails: an unreadable or malformed file is
logged and treated as "no settings". Saving does fail loudly, so the caller
can tell the user the credential was not stored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

import pydantic

from whyfi.models import AppSettings

logger = logging.getLogger("whyfi.settings_store")

SETTINGS_KEY = "app_settings"


class SettingsStore(Protocol):
    """Load/save boundary for the persisted settings record."""

    def load(self) -> AppSettings: ...

    def save(self, settings: AppSettings) -> None: ...


class MemorySettingsStore:
    """In-process store; nothing survives the process."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    def load(self) -> AppSettings:
        return self._settings.model_copy()

    def save(self, settings: AppSettings) -> None:
        self._settings = settings.model_copy()


class JsonFileSettingsStore:
    """Settings persisted to a JSON file, ``{"app_settings": {...}}``."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> AppSettings:
        if not self._path.exists():
            return AppSettings()
        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
            return AppSettings.model_validate(document.get(SETTINGS_KEY) or {})
        except (OSError, ValueError, AttributeError, pydantic.ValidationError) as e:
            logger.error("Failed to load settings from %s: %s", self._path, e)
            return AppSettings()

    def save(self, settings: AppSettings) -> None:
        document = {SETTINGS_KEY: settings.model_dump(mode="json")}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        except OSError:
            logger.exception("Failed to save settings to %s", self._path)
            raise
        logger.info("Settings saved to %s", self._path)


def store_api_key(store: SettingsStore, api_key: str) -> AppSettings:
    """Persist a stripped, non-blank API key and return the saved record.

    Raises:
        ValueError: the key is blank after stripping.
        OSError: the store could not write the record.
    """
    key = api_key.strip()
    if not key:
        raise ValueError("API key must not be blank")
    settings = store.load().model_copy(update={"openai_api_key": key})
    store.save(settings)
    logger.info("API key saved")
    return settings


def clear_api_key(store: SettingsStore) -> AppSettings:
    settings = store.load().model_copy(update={"openai_api_key": None})
    store.save(settings)
    logger.info("API key cleared")
    return settings
