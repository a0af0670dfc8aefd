from logging.config import fileConfig
from sqlalchemy import engine_from_config, pool
from alembic import context
import logging

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
logger = logging.getLogger("alembic.env")

from flightledger.core.config import settings  # noqa: E402
from flightledger.db.session import normalize_database_url  # noqa: E402
from flightledger.models.base import Base  # noqa: E402
from flightledger.models import admin, airport, booking, flight, flight_owner, user  # noqa: F401,E402

target_metadata = Base.metadata

# DATABASE_URL (via settings) wins over anything in alembic.ini
DB_URL = normalize_database_url(settings.database_url)
logger.info("running migrations against %s", DB_URL.split("@")[-1])


def run_migrations_offline():
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    connectable = engine_from_config(
        {"sqlalchemy.url": DB_URL},
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
