"""Target presets."""

import logging
from pathlib import Path

from proberunner.db.init import get_session, init_db
from proberunner.db.models import Preset
from proberunner.errors import InvalidTargetError, InvalidURLError
from proberunner.modules.probe import validate_target

logger = logging.getLogger(__name__)


def validate_preset_url(url: str) -> str:
    """Require the same absolute http(s) URL a run accepts as its target."""
    try:
        return validate_target(url or "")
    except InvalidTargetError as exc:
        raise InvalidURLError(
            f"Invalid URL: {url!r} (expected an absolute http(s) URL)"
        ) from exc


class PresetStore:
    """CRUD over named target URLs."""

    def __init__(self, db_path: Path, db_url: str | None = None):
        self.db_path = db_path
        self.db_url = db_url
        self._session = None

    def _get_session(self):
        if self._session is None:
            try:
                init_db(self.db_path, self.db_url)
                self._session = get_session(self.db_path, self.db_url)
            except Exception:
                logger.warning("Failed to open presets DB", exc_info=True)
        return self._session

    def list(self) -> list[Preset]:
        session = self._get_session()
        if session is None:
            return []
        try:
            return session.query(Preset).order_by(Preset.id).all()
        except Exception:
            logger.warning("Failed to list presets", exc_info=True)
            return []

    def create(self, name: str, url: str) -> Preset | None:
        """Add a preset.

        Raises:
            InvalidURLError: ``url`` is not absolute.
            ValueError: ``name`` is empty.
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Preset name must not be empty")
        url = validate_preset_url(url)
        session = self._get_session()
        if session is None:
            return None
        try:
            preset = Preset(name=name, url=url)
            session.add(preset)
            session.commit()
            return preset
        except Exception:
            logger.warning("Failed to create preset %r", name, exc_info=True)
            session.rollback()
            return None

    def delete(self, preset_id: int) -> bool:
        """Delete a preset by id. Returns False if nothing was deleted."""
        session = self._get_session()
        if session is None:
            return False
        try:
            deleted = session.query(Preset).filter_by(id=preset_id).delete()
            session.commit()
            return bool(deleted)
        except Exception:
            logger.warning("Failed to delete preset %s", preset_id, exc_info=True)
            session.rollback()
            return False

    def get_by_name(self, name: str) -> Preset | None:
        session = self._get_session()
        if session is None:
            return None
        try:
            return session.query(Preset).filter_by(name=name).first()
        except Exception:
            logger.warning("Failed to look up preset %r", name, exc_info=True)
            return None

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
