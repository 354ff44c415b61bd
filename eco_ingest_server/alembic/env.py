"""Migration environment for the ``telemetry_logs`` schema.

The database URL and timeouts come from the same ``Settings`` the ingest
server reads, so ``ECO_INGEST_ENV`` selects the target database.
"""

from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, pool

from alembic import context

REPO_ROOT = Path(__file__).resolve().parents[2]
for src in (REPO_ROOT / "eco_ingest_core" / "src", REPO_ROOT / "eco_ingest_server" / "src"):
    if str(src) not in sys.path:
        sys.path.append(str(src))

from eco_ingest_core.config.environments import get_settings  # noqa: E402
from eco_ingest_server.adapters.db.session import connect_args_for  # noqa: E402
from eco_ingest_server.adapters.db.sqlalchemy_models import Base  # noqa: E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
settings = get_settings()


def run_migrations_offline() -> None:
    """Emit the migration as SQL without connecting."""
    context.configure(
        url=settings.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(
        settings.DATABASE_URL,
        poolclass=pool.NullPool,
        connect_args=connect_args_for(settings.DATABASE_URL, settings.DB_TIMEOUT_SEC),
        future=True,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
