"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for the search result cache.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()

DEFAULT_DB_PATH = Path(".cache") / "linkmatch.db"


class SearchCacheEntry(Base):
    """Cached profile search results for one contact."""

    __tablename__ = "search_cache"

    cache_key = Column(String, primary_key=True)  # md5 of name-company-location
    contact_name = Column(String, nullable=False)
    profiles_json = Column(Text, nullable=False)  # JSON array of profile dicts
    created_at = Column(DateTime, nullable=False, default=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = create_engine(f"sqlite:///{db_path}")
    Session = sessionmaker(bind=engine)
    return Session()
