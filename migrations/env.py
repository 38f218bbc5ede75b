"""
Alembic environment for the supply ledger schema.

Migrations run against DATABASE_URL from the application settings.
A caller that already holds a connection (the migration tests do)
can pass it in through ``config.attributes["connection"]`` and the
migrations run on it instead.
"""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, make_url, pool

from supply_ledger.config import get_settings
from supply_ledger.models import Base

config = context.config
target_metadata = Base.metadata


def _configure(backend: str, **kwargs) -> None:
    # SQLite cannot ALTER constraints in place; batch mode rebuilds
    # the table instead.
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        render_as_batch=backend == "sqlite",
        **kwargs,
    )


def run_offline(url: str) -> None:
    """Print the SQL for review instead of executing it."""
    _configure(
        make_url(url).get_backend_name(),
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online(connection) -> None:
    _configure(connection.dialect.name, connection=connection)
    with context.begin_transaction():
        context.run_migrations()


shared_connection = config.attributes.get("connection")

if shared_connection is not None:
    run_online(shared_connection)
else:
    if config.config_file_name is not None:
        fileConfig(config.config_file_name)

    database_url = get_settings().DATABASE_URL
    if context.is_offline_mode():
        run_offline(database_url)
    else:
        engine = create_engine(database_url, poolclass=pool.NullPool)
        with engine.connect() as connection:
            run_online(connection)
