from voting_bracket.tournament.maintenance import (
    cleanup_stale_sessions as cleanup_stale_sessions_in_db,
)
from voting_bracket.tournament.maintenance import (
    recalculate_ratings as recalculate_ratings_in_db,
)
from voting_bracket.util.logging import get_logger
from voting_bracket.util.postgres import managed_session
from voting_bracket.util.redis import RedisDatabase, get_redis_client

from ..app import app, get_sessionmaker
from ..config import settings

logger = get_logger(__name__)

RECALCULATION_IN_PROGRESS_KEY = "rating_recalculation_in_progress"


@app.task(name="cleanup_stale_sessions")
def cleanup_stale_sessions(hours_old=None):
    if hours_old is None:
        hours_old = settings.TOURNAMENT.stale_session_hours
    logger.info("Cleaning up stale tournament sessions", hours_old=hours_old)

    with managed_session(get_sessionmaker()) as db:
        deleted = cleanup_stale_sessions_in_db(db, hours_old=hours_old)

    return {"deleted": deleted}


@app.task(name="recalculate_ratings")
def recalculate_ratings():
    redis = get_redis_client(RedisDatabase.MAINTENANCE)
    try:
        if not redis.set(RECALCULATION_IN_PROGRESS_KEY, "1", nx=True, ex=3600):
            logger.info("Rating recalculation already in progress, skipping")
            return {"skipped": True}

        try:
            logger.info("Starting rating recalculation")
            with managed_session(get_sessionmaker()) as db:
                ratings = recalculate_ratings_in_db(
                    db,
                    k_factor=settings.TOURNAMENT.k_factor,
                    default_rating=settings.TOURNAMENT.default_rating,
                )
        finally:
            logger.info("Deleting rating recalculation in progress key")
            redis.delete(RECALCULATION_IN_PROGRESS_KEY)

        return {"candidates": len(ratings)}
    finally:
        redis.close()
