import contextlib
import os
import traceback

import sqlalchemy
import sqlalchemy.engine.url
import sqlalchemy.orm.session

from voting_bracket.util.logging import get_logger

logger = get_logger(__name__)


def get_engine(prefix="POSTGRES_", **kwargs):
    logger.info("Getting engine", prefix=prefix)
    url = sqlalchemy.engine.url.URL.create(
        host=os.environ[f"{prefix}HOST"],
        port=int(os.environ[f"{prefix}PORT"]),
        username=os.environ[f"{prefix}USER"],
        password=os.environ[f"{prefix}PASSWORD"],
        database=os.environ[f"{prefix}DB"],
        drivername=os.environ.get(f"{prefix}DRIVERNAME", "postgresql+psycopg2"),
    )

    kwargs.setdefault("pool_pre_ping", True)
    kwargs.setdefault("echo", os.environ.get("SHOW_VERBOSE_SQL") == "true")

    kwargs.setdefault("connect_args", {})
    kwargs["connect_args"]["sslmode"] = kwargs["connect_args"].pop(
        "sslmode", os.environ.get(f"{prefix}SSLMODE", "require")
    )
    return sqlalchemy.create_engine(url, **kwargs)


def make_sessionmaker(engine):
    # Rows handed back by the tournament components outlive their unit of work
    return sqlalchemy.orm.session.sessionmaker(bind=engine, expire_on_commit=False)


@contextlib.contextmanager
def managed_session(sessionmaker):
    session = sessionmaker()
    try:
        yield session
        logger.debug("Committing session")
        session.commit()
        logger.debug("Session committed")
    except Exception:
        logger.error("Rolling back session", error=traceback.format_exc())
        session.rollback()
        logger.info("Session rolled back")
        raise
    finally:
        logger.debug("Closing session")
        session.close()

