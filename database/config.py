# Database engine and session handling for the Seeding Dashboard

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from contextlib import contextmanager
from typing import Iterator
import logging

from config.app_config import DATABASE_URL

logger = logging.getLogger(__name__)


def build_engine(url: str = DATABASE_URL):
    """Create the engine. SQLite needs cross-thread access for FastAPI's threadpool."""
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
    )


engine = build_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """
    Request-scoped session. Routers commit explicitly; anything left
    uncommitted is rolled back when the session closes.
    Usage: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Session for work outside a request (startup seeding, CLI commands).
    Commits on success, rolls back and re-raises on failure.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db(bind=None):
    """Create any missing tables. Alembic migrations cover schema changes."""
    from database.models import Base
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Database tables ready")
