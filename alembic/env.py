"""
Alembic environment for the users/roles schema.

The database URL comes from application settings unless overridden on the
command line, e.g. ``alembic -x db_url=sqlite:///local.db upgrade head``.
"""

import logging
from logging.config import fileConfig

from alembic import context

from app.core.config import settings
from app.core.database import build_engine
from app.models import Base, Role, User, user_roles  # noqa: F401

config = context.config
if config.config_file_name is not None and config.get_section("formatters"):
    fileConfig(config.config_file_name)
else:
    logging.basicConfig(level=settings.LOG_LEVEL)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def database_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("db_url") or settings.DATABASE_URL


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    url = database_url()
    connectable = build_engine(url)
    logger.info("Running migrations against %s", connectable.url.render_as_string(hide_password=True))
    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            # SQLite cannot ALTER constraints in place.
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()
    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
