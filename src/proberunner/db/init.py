"""Database initialization for proberunner."""

from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from proberunner.db.models import Base


def get_engine(db_path: Path, db_url: str | None = None) -> Engine:
    """Build a SQLAlchemy engine, preferring an explicit URL when given."""
    if db_url:
        return create_engine(db_url, echo=False)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}", echo=False)


def init_db(db_path: Path, db_url: str | None = None) -> None:
    """Initialize the database with all tables."""
    engine = get_engine(db_path, db_url)
    Base.metadata.create_all(engine)


def get_session(db_path: Path, db_url: str | None = None):
    """Get a database session."""
    engine = get_engine(db_path, db_url)
    Session = sessionmaker(bind=engine)
    return Session()
