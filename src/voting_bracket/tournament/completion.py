"""
Completing a tournament.

Completion replays a session's buffered votes, ordered by ``vote_order`` (ties
by insertion), into the permanent ``voting.vote`` ledger and applies an ELO
update per match. The whole replay is a single transaction: either every vote
is ledgered and every rating is updated and the session is marked completed,
or nothing is written.

The final match of a tournament is rated with a larger K-factor so the
tournament winner gets a visible boost.
"""

from typing import Optional

from sqlalchemy import func, select, update

from voting_bracket.constants import DEFAULT_ELO_RATING
from voting_bracket.models.candidate import Candidate
from voting_bracket.models.tournament import SessionVote, TournamentSession, Vote
from voting_bracket.models.user import User
from voting_bracket.util.elo import DEFAULT_K_FACTOR, rate
from voting_bracket.util.logging import get_logger
from voting_bracket.util.postgres import managed_session

from .errors import CompletionFailed, EmptySession, NotFound
from .session_store import get_session_or_raise

logger = get_logger(__name__)

FINALE_K_FACTOR = 60


def get_buffered_votes(db, session_id):
    return (
        db.execute(
            select(SessionVote)
            .where(SessionVote.session_id == session_id)
            .order_by(SessionVote.vote_order.asc(), SessionVote.id.asc())
        )
        .scalars()
        .all()
    )


def get_rating_for_update(db, candidate_id, default_rating=DEFAULT_ELO_RATING):
    rating = db.scalar(
        select(Candidate.elo_rating)
        .where(Candidate.id == candidate_id)
        .with_for_update()
    )
    return default_rating if rating is None else int(rating)


def resolve_comment(session_vote, is_last, final_comment):
    if session_vote.comment:
        return session_vote.comment
    if is_last:
        return final_comment
    return session_vote.comment


class CompletionCoordinator:
    def __init__(
        self,
        sessionmaker,
        k_factor=DEFAULT_K_FACTOR,
        finale_k_factor=FINALE_K_FACTOR,
        default_rating=DEFAULT_ELO_RATING,
    ):
        self.sessionmaker = sessionmaker
        self.k_factor = k_factor
        self.finale_k_factor = finale_k_factor
        self.default_rating = default_rating

    def k_factor_for(self, index, total):
        return self.finale_k_factor if index == total - 1 else self.k_factor

    def complete(
        self, session_id: int, user_id: int, final_comment: Optional[str] = None
    ) -> bool:
        """Replay the session's buffered votes into the ledger and mark it completed.

        Returns False without writing anything when the session is already
        completed. Raises ``NotFound`` for an unknown session, ``EmptySession``
        when nothing was buffered and ``CompletionFailed`` for any other
        failure. In every failure case the transaction is rolled back and the
        session stays active.
        """
        logger.info("Completing tournament", session_id=session_id, user_id=user_id)

        try:
            with managed_session(self.sessionmaker) as db:
                # Lock the session row so two completions cannot both replay it
                session = get_session_or_raise(db, session_id, for_update=True)
                if session.is_completed:
                    logger.warning(
                        "Tournament session already completed", session_id=session_id
                    )
                    return False

                buffered_votes = get_buffered_votes(db, session_id)
                if not buffered_votes:
                    raise EmptySession(session_id)

                self._replay(db, user_id, buffered_votes, final_comment)

                db.execute(
                    update(User)
                    .where(User.tg_id == user_id)
                    .values(last_vote_at=func.now())
                )

                session.is_completed = True
                db.flush()
        except (NotFound, EmptySession):
            raise
        except Exception as e:
            logger.error(
                "Tournament completion rolled back", session_id=session_id, error=str(e)
            )
            raise CompletionFailed(session_id, e) from e

        logger.info(
            "Tournament completed",
            session_id=session_id,
            user_id=user_id,
            vote_count=len(buffered_votes),
        )
        return True

    def _replay(self, db, user_id, buffered_votes, final_comment):
        total = len(buffered_votes)

        for index, session_vote in enumerate(buffered_votes):
            is_last = index == total - 1

            db.add(
                Vote(
                    user_id=user_id,
                    winner_id=session_vote.winner_id,
                    loser_id=session_vote.loser_id,
                    comment=resolve_comment(session_vote, is_last, final_comment),
                )
            )

            winner_rating = get_rating_for_update(
                db, session_vote.winner_id, self.default_rating
            )
            loser_rating = get_rating_for_update(
                db, session_vote.loser_id, self.default_rating
            )

            k_factor = self.k_factor_for(index, total)
            new_winner_rating, new_loser_rating = rate(
                winner_rating, loser_rating, k_factor
            )

            db.execute(
                update(Candidate)
                .where(Candidate.id == session_vote.winner_id)
                .values(
                    wins=Candidate.wins + 1,
                    matches=Candidate.matches + 1,
                    elo_rating=new_winner_rating,
                )
            )
            db.execute(
                update(Candidate)
                .where(Candidate.id == session_vote.loser_id)
                .values(matches=Candidate.matches + 1, elo_rating=new_loser_rating)
            )

            logger.debug(
                "Replayed buffered vote",
                vote_order=session_vote.vote_order,
                k_factor=k_factor,
                winner_id=session_vote.winner_id,
                winner_rating=new_winner_rating,
                loser_id=session_vote.loser_id,
                loser_rating=new_loser_rating,
            )
