from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
# This line sets up loggers basically.
fileConfig(config.config_file_name)

from meritjournal.entries.models import (
    Base as EntriesBase,
    JournalEntry,
    JournalEntryTag,
    JournalImage,
    Tag,
)

target_metadata = EntriesBase.metadata

# include_name to prevent alembic from messing with non-Merit Journal tables
MERITJOURNAL_TABLES = {
    JournalEntry.__tablename__,
    Tag.__tablename__,
    JournalEntryTag.__tablename__,
    JournalImage.__tablename__,
}


def include_name(name, type_, parent_names):
    if type_ == "table":
        return name in MERITJOURNAL_TABLES
    return True


def run_migrations_offline():
    """Run migrations in 'offline' mode.

    This configures the context with just a URL and not an Engine. Calls to
    context.execute() here emit the given string to the script output.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        version_table="meritjournal_alembic_version",
        include_name=include_name,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            version_table="meritjournal_alembic_version",
            include_name=include_name,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
