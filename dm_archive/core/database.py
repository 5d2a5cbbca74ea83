"""
Engine and request-scoped sessions for the archive table.
"""
from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from dm_archive.core.config import Settings, get_settings
from dm_archive.core.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def prepare_sqlite_file(settings: Settings) -> None:
    """Create the directory holding a file-backed SQLite archive."""
    path = settings.sqlite_path
    if path is None or path.parent.exists():
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Created archive directory", extra={"extra_data": {"path": str(path.parent)}})


@lru_cache()
def get_engine() -> Engine:
    """Engine for the configured database, created on first use."""
    settings = get_settings()
    
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        # sessions are handed across FastAPI's threadpool
        connect_args["check_same_thread"] = False
        prepare_sqlite_file(settings)
    
    engine = create_engine(
        settings.database_url,
        connect_args=connect_args,
        echo=settings.debug,
        pool_pre_ping=True,
    )
    logger.info("Database engine created", extra={"extra_data": {"database_url": settings.database_url}})
    return engine


@lru_cache()
def get_session_factory() -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """Dependency yielding one session per request."""
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create the archive table if it is missing."""
    from dm_archive.models import entry  # noqa: F401 - Import to register models
    
    Base.metadata.create_all(bind=get_engine())
    logger.info("Archive table ready")


def check_db_connection() -> bool:
    """True if the database answers ``SELECT 1``."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False
