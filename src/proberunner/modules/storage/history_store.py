"""Run history, newest first, capped at ``keep`` entries."""

import json
import logging
from pathlib import Path

from proberunner.db.init import get_session, init_db
from proberunner.db.models import RunHistory
from proberunner.modules.probe import ProbeResult
from proberunner.modules.run import RunOutcome

from .models import HistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10


def _to_entry(row: RunHistory) -> HistoryEntry:
    return HistoryEntry(
        id=row.id,
        target=row.target,
        phase=row.phase,
        categories=tuple(json.loads(row.categories or "[]")),
        summary=json.loads(row.summary or "{}"),
        results=tuple(ProbeResult.from_dict(item) for item in json.loads(row.results or "[]")),
        planned=row.planned or 0,
        created_at=row.created_at,
    )


class HistoryStore:
    """Stores finished runs and prunes the oldest beyond ``keep``."""

    def __init__(
        self,
        db_path: Path,
        db_url: str | None = None,
        keep: int = DEFAULT_HISTORY_LIMIT,
    ):
        if keep < 1:
            raise ValueError("keep must be >= 1")
        self.db_path = db_path
        self.db_url = db_url
        self.keep = keep
        self._session = None

    def _get_session(self):
        if self._session is None:
            try:
                init_db(self.db_path, self.db_url)
                self._session = get_session(self.db_path, self.db_url)
            except Exception:
                logger.warning("Failed to open history DB", exc_info=True)
        return self._session

    def save(self, outcome: RunOutcome) -> int | None:
        """Record a run outcome and prune. Returns the new entry id."""
        session = self._get_session()
        if session is None:
            return None
        try:
            row = RunHistory(
                target=outcome.configuration.target,
                phase=outcome.phase.value,
                categories=json.dumps(list(outcome.configuration.categories)),
                summary=json.dumps(outcome.summary.to_dict()),
                results=json.dumps([result.to_dict() for result in outcome.results]),
                planned=outcome.planned,
            )
            session.add(row)
            session.commit()
            entry_id = row.id
        except Exception:
            logger.warning("Failed to save run history", exc_info=True)
            session.rollback()
            return None
        self.prune()
        return entry_id

    def list(self, limit: int | None = None) -> list[HistoryEntry]:
        session = self._get_session()
        if session is None:
            return []
        try:
            query = session.query(RunHistory).order_by(RunHistory.id.desc())
            if limit is not None:
                query = query.limit(limit)
            return [_to_entry(row) for row in query.all()]
        except Exception:
            logger.warning("Failed to list run history", exc_info=True)
            return []

    def get(self, entry_id: int) -> HistoryEntry | None:
        session = self._get_session()
        if session is None:
            return None
        try:
            row = session.get(RunHistory, entry_id)
            return _to_entry(row) if row is not None else None
        except Exception:
            logger.warning("Failed to read run %s", entry_id, exc_info=True)
            return None

    def prune(self) -> int:
        """Delete all but the newest ``keep`` runs. Returns rows deleted."""
        session = self._get_session()
        if session is None:
            return 0
        try:
            stale = [
                row_id
                for (row_id,) in session.query(RunHistory.id)
                .order_by(RunHistory.id.desc())
                .offset(self.keep)
                .all()
            ]
            if not stale:
                return 0
            session.query(RunHistory).filter(RunHistory.id.in_(stale)).delete(
                synchronize_session=False
            )
            session.commit()
            return len(stale)
        except Exception:
            logger.warning("Failed to prune run history", exc_info=True)
            session.rollback()
            return 0

    def close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None
