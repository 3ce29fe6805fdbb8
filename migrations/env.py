import os
import sys
import pathlib
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.shared.models.base import Base

import importlib

# Model modules only, no services
MODEL_MODULES = [
    "app.domains.auth.models",
    "app.domains.friends.models",
    "app.domains.notifications.models",
    "app.domains.reactions.models",
    "app.domains.groups.models",
    "app.domains.posts.models",
    "app.domains.comments.models",
    "app.domains.messages.models",
    "app.domains.events.models",
    "app.domains.marketplace.models",
]

for mod in MODEL_MODULES:
    importlib.import_module(mod)

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

db_url = (
    os.environ.get("ALEMBIC_SYNC_DB_URL")
    or os.environ.get("DATABASE_URL")
    or config.get_main_option("sqlalchemy.url")
)

if "+asyncpg" in db_url:
    db_url = db_url.replace("+asyncpg", "+psycopg2")
if "+aiosqlite" in db_url:
    db_url = db_url.replace("+aiosqlite", "")

config.set_main_option("sqlalchemy.url", db_url)


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        compare_server_default=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            compare_server_default=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
