"""Persisted settings record and history entry types."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from proberunner.errors import InvalidSettingsError
from proberunner.modules.catalogue import Catalogue
from proberunner.modules.probe import ProbeResult
from proberunner.modules.run import RunSettings

# Record key -> (RunSettings field, value type)
RECORD_FIELDS: dict[str, tuple[str, type]] = {
    "requestDelayMs": ("delay_ms", int),
    "timeoutSeconds": ("timeout_seconds", float),
    "concurrencyHint": ("concurrency", int),
    "verboseLog": ("verbose_log", bool),
    "autoExport": ("auto_export", bool),
    "retries": ("retries", int),
    "retryBackoffMs": ("retry_backoff_ms", int),
    "parallel": ("parallel", bool),
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _coerce(value: Any, kind: type) -> Any:
    """Convert CLI text or a stored JSON value to ``kind``."""
    try:
        if kind is bool:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
            raise ValueError(value)
        if isinstance(value, bool):
            raise ValueError(value)
        if kind is int:
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(value)
            return int(value.strip() if isinstance(value, str) else value)
        number = float(value.strip() if isinstance(value, str) else value)
        if not math.isfinite(number):
            raise ValueError(value)
        return number
    except (TypeError, ValueError) as exc:
        raise InvalidSettingsError(f"Invalid value {value!r}: expected {kind.__name__}") from exc


@dataclass(frozen=True, slots=True)
class StoredSettings:
    """Run settings plus the default category selection."""

    settings: RunSettings = field(default_factory=RunSettings)
    default_categories: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def defaults(cls, catalogue: Catalogue, settings: RunSettings | None = None) -> StoredSettings:
        return cls(
            settings=settings or RunSettings(),
            default_categories={category_id: True for category_id in catalogue.ids()},
        )

    def selected_categories(self, catalogue: Catalogue) -> list[str]:
        """Enabled categories in catalogue order; unknown ids are ignored."""
        return [
            category_id
            for category_id in catalogue.ids()
            if self.default_categories.get(category_id, True)
        ]

    def with_value(self, key: str, value: Any) -> StoredSettings:
        """Return a copy with one record key changed.

        Raises:
            InvalidSettingsError: unknown key or invalid value.
        """
        if key not in RECORD_FIELDS:
            raise InvalidSettingsError(
                f"Unknown setting: {key} (expected one of {', '.join(RECORD_FIELDS)})"
            )
        attr, kind = RECORD_FIELDS[key]
        value = _coerce(value, kind)
        return replace(self, settings=replace(self.settings, **{attr: value}))

    def with_category(self, category_id: str, enabled: bool) -> StoredSettings:
        selection = dict(self.default_categories)
        selection[category_id] = enabled
        return replace(self, default_categories=selection)

    def to_record(self) -> dict[str, Any]:
        record = {key: getattr(self.settings, attr) for key, (attr, _) in RECORD_FIELDS.items()}
        record["defaultCategorySelection"] = dict(self.default_categories)
        return record

    @classmethod
    def from_record(
        cls,
        record: dict[str, Any],
        catalogue: Catalogue,
        base: RunSettings | None = None,
    ) -> StoredSettings:
        """Build from a stored record; missing keys take their values from ``base``."""
        base = base or RunSettings()
        values = {
            attr: _coerce(record[key], kind) if key in record else getattr(base, attr)
            for key, (attr, kind) in RECORD_FIELDS.items()
        }
        selection = {category_id: True for category_id in catalogue.ids()}
        stored_selection = record.get("defaultCategorySelection") or {}
        for category_id, enabled in stored_selection.items():
            if category_id in selection:
                selection[category_id] = bool(enabled)
        return cls(settings=RunSettings(**values), default_categories=selection)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A run as read back from history."""

    id: int
    target: str
    phase: str
    categories: tuple[str, ...]
    summary: dict[str, Any]
    results: tuple[ProbeResult, ...]
    planned: int
    created_at: datetime | None = None
