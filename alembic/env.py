"""Alembic environment configuration.

Reads DATABASE_URL from app.core.config, the same source the running app
uses, and imports the table metadata for autogenerate.

HOW MIGRATIONS RUN
------------------
`alembic upgrade head` loads this file, connects to the database and
applies every revision under alembic/versions/ that the alembic_version
table has not recorded yet.  The first revision creates question_bank,
assessments and assessment_submissions, including the unique constraint
on the submission idempotency key.

`alembic revision --autogenerate -m "..."` compares Base.metadata (the
classes in app/db/tables.py) against the live schema and writes a new
revision with the difference.  Review the generated file before
committing it: autogenerate misses renamed columns and server defaults.

Offline mode (`alembic upgrade head --sql`) prints the SQL instead of
executing it, for DBAs who apply schema changes by hand.
"""

from __future__ import annotations

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context
from app.core.config import SETTINGS
from app.db.engine import Base

# Alembic Config object, gives access to alembic.ini values.
config = context.config

# Override the sqlalchemy.url placeholder in alembic.ini with the app config.
if SETTINGS.database_url:
    # Migrations run synchronously; swap the asyncpg driver for psycopg2.
    sync_url = SETTINGS.database_url.replace("postgresql+asyncpg", "postgresql")
    config.set_main_option("sqlalchemy.url", sync_url)

# Python logging setup from the [loggers] sections of alembic.ini.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Importing the table module registers every table on Base.metadata.
import app.db.tables  # noqa: E402, F401

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emit SQL without a live database."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply revisions over a live connection.

    NullPool: the migration process opens one connection, runs and exits,
    so there is nothing to keep pooled.
    """
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
