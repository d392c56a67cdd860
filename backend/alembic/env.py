"""
Alembic migration environment for the hub schema.

The target database comes from app settings (sync psycopg2 URL). Pass
`-x url=...` to migrate a different database without touching .env:

    alembic -x url=postgresql://hub:pw@staging/youth_hub upgrade head
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from app.config import get_settings
from app.db import models  # noqa: F401  registers every table on Base.metadata
from app.db.base import Base

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

MIGRATION_OPTIONS = {
    "target_metadata": Base.metadata,
    "compare_type": True,
}


def migration_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("url") or get_settings().database_url_sync


if context.is_offline_mode():
    # Render SQL to stdout instead of executing it
    context.configure(
        url=migration_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()
else:
    engine = create_engine(migration_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **MIGRATION_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()
