"""Settings persistence."""

import json
import logging
from pathlib import Path

from proberunner.db.init import get_session, init_db
from proberunner.db.models import SettingRecord
from proberunner.modules.catalogue import Catalogue, default_catalogue
from proberunner.modules.run import RunSettings

from .models import StoredSettings

logger = logging.getLogger(__name__)

SETTINGS_KEY = "run_settings"


class SettingsStore:
    """Loads and saves the single settings record."""

    def __init__(
        self,
        db_path: Path,
        db_url: str | None = None,
        catalogue: Catalogue | None = None,
        defaults: RunSettings | None = None,
    ):
        self.db_path = db_path
        self.db_url = db_url
        self.catalogue = default_catalogue() if catalogue is None else catalogue
        self.defaults = defaults or RunSettings()
        self._session = None

    def _get_session(self):
        if self._session is None:
            try:
                init_db(self.db_path, self.db_url)
                self._session = get_session(self.db_path, self.db_url)
            except Exception:
                logger.warning("Failed to open settings DB", exc_info=True)
        return self._session

    def load(self) -> StoredSettings:
        """Return stored settings, or the defaults when none are stored."""
        defaults = StoredSettings.defaults(self.catalogue, self.defaults)
        session = self._get_session()
        if session is None:
            return defaults
        try:
            row = session.get(SettingRecord, SETTINGS_KEY)
            if row is None:
                return defaults
            return StoredSettings.from_record(json.loads(row.value), self.catalogue, self.defaults)
        except Exception:
            logger.warning("Failed to load settings, using defaults", exc_info=True)
            return defaults

    def save(self, stored: StoredSettings) -> bool:
        """Persist settings. Returns False if the write failed."""
        session = self._get_session()
        if session is None:
            return False
        try:
            value = json.dumps(stored.to_record())
            row = session.get(SettingRecord, SETTINGS_KEY)
            if row is None:
                session.add(SettingRecord(key=SETTINGS_KEY, value=value))
            else:
                row.value = value
            session.commit()
            return True
        except Exception:
            logger.warning("Failed to save settings", exc_info=True)
            session.rollback()
            return False

    def reset(self) -> StoredSettings:
        """Drop stored settings and return the defaults."""
        session = self._get_session()
        if session is not None:
            try:
                session.query(SettingRecord).filter_by(key=SETTINGS_KEY).delete()
                session.commit()
            except Exception:
                logger.warning("Failed to reset settings", exc_info=True)
                session.rollback()
        return StoredSettings.defaults(self.catalogue, self.defaults)

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
