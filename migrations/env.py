# migrations/env.py

import os
import sys
from logging.config import fileConfig
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool
from alembic import context

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from backoffice.adapters.configuration.config import settings
from backoffice.adapters.outbound.persistence.database import sync_database_url
from backoffice.adapters.outbound.persistence.models import Base

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

MIGRATION_URL = sync_database_url(str(settings.DATABASE_URL))
MIGRATION_OPTIONS = {"target_metadata": Base.metadata, "compare_type": True}


def run_offline() -> None:
    """Emit SQL to stdout instead of touching the database."""
    context.configure(
        url=MIGRATION_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **MIGRATION_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    engine = create_engine(MIGRATION_URL, poolclass=NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **MIGRATION_OPTIONS)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()
