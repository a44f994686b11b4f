from functools import lru_cache

from voting_bracket.util.celery import make_worker_celery_app
from voting_bracket.util.logging import configure_logging
from voting_bracket.util.postgres import get_engine, make_sessionmaker

from .config import settings

configure_logging(humanize=settings.HUMANIZE_LOGS, level=settings.LOG_LEVEL)

app = make_worker_celery_app(
    dict(
        include=["voting_bracket.apps.worker.tasks.maintenance"],
        beat_schedule={
            "cleanup-stale-sessions": {
                "task": "cleanup_stale_sessions",
                "schedule": settings.CLEANUP_INTERVAL_SECONDS,
            },
        },
    )
)


@lru_cache
def get_sessionmaker():
    return make_sessionmaker(get_engine())
