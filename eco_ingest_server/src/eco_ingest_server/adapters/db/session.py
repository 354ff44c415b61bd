import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from eco_ingest_core.config.environments import Settings, get_settings
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker

log = logging.getLogger(__name__)

Base = declarative_base()


def connect_args_for(url: str, timeout_sec: float) -> Dict[str, Any]:
    """Bound connection setup and statement time on PostgreSQL."""
    if make_url(url).get_backend_name() != "postgresql":
        return {}
    return {
        "connect_timeout": max(1, int(timeout_sec)),
        "options": f"-c statement_timeout={int(timeout_sec * 1000)}",
    }


def create_session_factory(settings: Optional[Settings] = None) -> sessionmaker:
    """Create the session factory with current settings."""
    settings = settings or get_settings()

    log.info(f"Initializing database connection for {settings.ENVIRONMENT.value} environment")

    engine = create_engine(
        settings.DATABASE_URL,
        future=True,
        echo=False,
        pool_pre_ping=True,
        pool_timeout=settings.DB_TIMEOUT_SEC,
        connect_args=connect_args_for(settings.DATABASE_URL, settings.DB_TIMEOUT_SEC),
    )
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker:
    return create_session_factory()
