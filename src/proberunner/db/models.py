"""Database models for proberunner using SQLAlchemy."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base


def _utc_now() -> datetime:
    return datetime.now(UTC)


Base = declarative_base()


class Preset(Base):
    """A named target URL."""

    __tablename__ = "presets"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    url = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utc_now)


class SettingRecord(Base):
    """A JSON-encoded settings value keyed by name."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)  # JSON
    updated_at = Column(DateTime(timezone=True), default=_utc_now, onupdate=_utc_now)


class RunHistory(Base):
    """One finished run: configuration, summary and every probe result."""

    __tablename__ = "run_history"

    id = Column(Integer, primary_key=True)
    target = Column(String, nullable=False)
    phase = Column(String, nullable=False)  # completed, cancelled, failed
    categories = Column(Text, default="[]")  # JSON list of category ids
    summary = Column(Text, default="{}")  # JSON RunSummary.to_dict()
    results = Column(Text, default="[]")  # JSON list of ProbeResult.to_dict()
    planned = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=_utc_now)
