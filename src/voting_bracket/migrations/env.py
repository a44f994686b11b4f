import logging.config
import sys

from alembic import context
from sqlalchemy import pool

from voting_bracket.schema.postgres import metadata
from voting_bracket.util.postgres import get_engine

config = context.config

target_metadata = metadata

logging_config = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "generic": {
            "format": "%(levelname)-5.5s [%(name)s] %(message)s",
            "datefmt": "%H:%M:%S",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stderr,
            "level": "NOTSET",
            "formatter": "generic",
        }
    },
    "loggers": {
        "sqlalchemy.engine": {"level": "WARNING", "handlers": []},
        "alembic": {"level": "INFO", "handlers": []},
    },
    "root": {"level": "WARNING", "handlers": ["console"]},
}

logging.config.dictConfig(logging_config)


def run_migrations_online() -> None:
    connectable = get_engine(
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            dialect_opts={"paramstyle": "named"},
            include_schemas=True,
            compare_type=True,
            version_table_schema="voting",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("Only online mode supported.")
else:
    run_migrations_online()
