"""Alembic environment for the crindex state database.

Targets the ORM metadata and runs SQLite in batch mode so later column
changes can be expressed as ALTER TABLE.
"""

from __future__ import annotations

from logging.config import fileConfig

from alembic import context

from crindex.db.orm import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata

_DEFAULT_URL = "sqlite:///data/crindex.db"


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url", _DEFAULT_URL),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations through the same engine configuration the app uses."""
    from crindex.db import StateDatabase

    url = config.get_main_option("sqlalchemy.url", _DEFAULT_URL)
    state_db = StateDatabase(url.replace("sqlite:///", "", 1))
    connectable = state_db.engine

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=True,
        )

        with context.begin_transaction():
            context.run_migrations()

    state_db.close()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
