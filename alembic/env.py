import os
import sys
from logging.config import fileConfig
from sqlalchemy import pool
from alembic import context

# Ensure project root is on sys.path so `core` and `models` can be imported
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

from core.config import settings
from core.database import build_engine
from core.log_config import configure_logging
from models.base import Base

# Every mapped table must be imported for autogenerate to see it
from models import user, session, verification, profile, project, project_version, comment, rating  # noqa: F401

config = context.config
database_url = settings.SQLALCHEMY_DATABASE_URI

# Use alembic.ini logging sections when present, else the app logging setup
if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name, disable_existing_loggers=False)
else:
    configure_logging(settings.LOG_LEVEL)


def _skip_unmanaged(object, name, type_, reflected, compare_to):
    # Leave tables that exist in the database but not in our models alone
    return not (reflected and compare_to is None)


def _options(**extra):
    return dict(
        target_metadata=Base.metadata,
        compare_type=True,
        include_object=_skip_unmanaged,
        # SQLite cannot ALTER constraints in place
        render_as_batch=database_url.startswith("sqlite"),
        **extra,
    )


def run_migrations_offline() -> None:
    context.configure(**_options(url=database_url, literal_binds=True))
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = build_engine(database_url, poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(**_options(connection=connection))
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
