import logging
from contextlib import AbstractContextManager
from typing import Optional

from eco_ingest_core.domain.errors import PersistenceError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from eco_ingest_server.adapters.db.session import get_session_factory

log = logging.getLogger(__name__)


class SqlAlchemyUoW(AbstractContextManager):
    """Commits on a clean exit; any SQLAlchemy failure surfaces as ``PersistenceError``.

    A caller-supplied session is only flushed, committing it stays with the caller.
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        session_factory: Optional[sessionmaker] = None,
    ):
        self._external = session is not None
        if session is None:
            session = (session_factory or get_session_factory())()
        self.session: Session = session

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, _tb):
        try:
            if exc_type is None:
                if self._external:
                    self.session.flush()
                else:
                    self.session.commit()
                return
            self._rollback()
            if isinstance(exc_val, SQLAlchemyError):
                raise PersistenceError(str(exc_val)) from exc_val
        except SQLAlchemyError as exc:
            self._rollback()
            raise PersistenceError(str(exc)) from exc
        finally:
            if not self._external:
                self.session.close()

    def _rollback(self) -> None:
        try:
            self.session.rollback()
        except SQLAlchemyError:
            log.warning("Rollback failed", exc_info=True)

    def telemetry_repo(self):
        from eco_ingest_server.adapters.db.repository import PostgresTelemetryLogRepository

        return PostgresTelemetryLogRepository(self.session)
