import datetime
from typing import Dict

from sqlalchemy import delete, func, select, update

from voting_bracket.constants import DEFAULT_ELO_RATING
from voting_bracket.models.candidate import Candidate
from voting_bracket.models.tournament import SessionVote, TournamentSession, Vote
from voting_bracket.util.elo import DEFAULT_K_FACTOR, rate
from voting_bracket.util.logging import get_logger

logger = get_logger(__name__)


def lock_candidate_ids(db):
    # Completions block on these row locks until the rebuild commits
    return list(
        db.scalars(select(Candidate.id).order_by(Candidate.id).with_for_update())
    )


def cleanup_stale_sessions(db, hours_old=24, now=None) -> int:
    """Delete unfinished sessions (and their buffered votes) older than ``hours_old``.

    Completed sessions are never touched. ``now`` defaults to the database
    clock, the same clock that fills ``created``.
    """
    now = now or db.scalar(select(func.now()))
    cutoff = now - datetime.timedelta(hours=hours_old)

    stale_ids = list(
        db.scalars(
            select(TournamentSession.id).where(
                TournamentSession.is_completed.is_(False),
                TournamentSession.created < cutoff,
            )
        )
    )

    if not stale_ids:
        logger.info("No stale tournament sessions", cutoff=cutoff.isoformat())
        return 0

    db.execute(delete(SessionVote).where(SessionVote.session_id.in_(stale_ids)))
    db.execute(
        delete(TournamentSession).where(
            TournamentSession.id.in_(stale_ids),
            TournamentSession.is_completed.is_(False),
        )
    )

    logger.info("Deleted stale tournament sessions", count=len(stale_ids))
    return len(stale_ids)


def recalculate_ratings(
    db, k_factor=DEFAULT_K_FACTOR, default_rating=DEFAULT_ELO_RATING
) -> Dict[int, int]:
    """Rebuild every candidate's rating by replaying the whole vote ledger.

    Every candidate restarts at ``default_rating`` and votes are applied in the
    order they were recorded with a single K-factor. The ledger does not keep
    session boundaries, so the final-match bonus is not reapplied.

    Candidate rows are locked before the ledger is read, so a tournament
    completing meanwhile is either fully in the replay or applied on top of it.
    """
    ratings = {
        candidate_id: default_rating for candidate_id in lock_candidate_ids(db)
    }

    processed = 0
    for winner_id, loser_id in db.execute(
        select(Vote.winner_id, Vote.loser_id).order_by(Vote.created, Vote.id)
    ):
        winner_rating = ratings.get(winner_id, default_rating)
        loser_rating = ratings.get(loser_id, default_rating)

        ratings[winner_id], ratings[loser_id] = rate(
            winner_rating, loser_rating, k_factor
        )

        processed += 1
        if processed % 500 == 0:
            logger.info("Replayed ledger votes", processed=processed)

    for candidate_id, rating in ratings.items():
        db.execute(
            update(Candidate)
            .where(Candidate.id == candidate_id)
            .values(elo_rating=rating)
        )

    logger.info(
        "Ratings recalculated", processed=processed, candidate_count=len(ratings)
    )
    return ratings
