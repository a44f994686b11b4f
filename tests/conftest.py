import os

import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

# App settings are read at import time
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")

import voting_bracket.schema.postgres as schema  # noqa: E402
from voting_bracket.util.postgres import make_sessionmaker  # noqa: E402


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        execution_options={"schema_translate_map": {"voting": None}},
    )
    schema.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sessionmaker(engine):
    return make_sessionmaker(engine)


@pytest.fixture
def user_id(engine):
    with engine.begin() as conn:
        conn.execute(
            insert(schema.voting.user).values(
                tg_id=1001, username="alice", full_name="Alice Example"
            )
        )
    return 1001


@pytest.fixture
def candidates(engine):
    """Three active candidates A, B, C at the default rating; returns their ids."""
    ids = {}
    with engine.begin() as conn:
        for name in ("A", "B", "C"):
            result = conn.execute(
                insert(schema.voting.candidate).values(
                    name=name, image_path=f"{name.lower()}.jpg"
                )
            )
            ids[name] = result.inserted_primary_key[0]
    return ids
