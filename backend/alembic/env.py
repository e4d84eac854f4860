from logging.config import fileConfig

from alembic import context

from run_tracker.core.config import settings
from run_tracker.db import Base, make_engine
from run_tracker.models.run_session import RunSession  # noqa: F401
from run_tracker.models.location_point import LocationPoint  # noqa: F401
from run_tracker.models.data_point import DataPoint  # noqa: F401

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # DATABASE_URL from the environment wins over alembic.ini
    connectable = make_engine(settings.database_url)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
