"""
Alembic migration environment for Chessmate Central.

The database URL always comes from chessmate.config (DATABASE_URL or .env),
never from alembic.ini, so migrations run against the same database as the
API. Model metadata is imported for autogenerate.

    alembic upgrade head                 # apply migrations
    alembic upgrade head --sql > x.sql   # offline: write SQL instead
    alembic revision --autogenerate -m "add column"
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

# Models must be imported before Base.metadata is read
from chessmate.config import settings
from chessmate.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
database_url = settings.database_url


def run_migrations_offline() -> None:
    """Emit SQL for review without connecting."""
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single unpooled connection."""
    connectable = create_engine(database_url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
        )

        with context.begin_transaction():
            context.run_migrations()

    connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
