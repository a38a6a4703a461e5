"""SQLite-backed settings, presets and run history."""

from .history_store import DEFAULT_HISTORY_LIMIT, HistoryStore
from .models import RECORD_FIELDS, HistoryEntry, StoredSettings
from .preset_store import PresetStore, validate_preset_url
from .settings_store import SETTINGS_KEY, SettingsStore

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "HistoryEntry",
    "HistoryStore",
    "PresetStore",
    "RECORD_FIELDS",
    "SETTINGS_KEY",
    "SettingsStore",
    "StoredSettings",
    "validate_preset_url",
]
