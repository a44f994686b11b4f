"""
Lifecycle of a user's unfinished tournament.

A user owns at most one active session at a time. Votes submitted during the
tournament are buffered against the session and only reach the permanent
ledger when the session is completed (see ``completion.py``).

Every public method is its own unit of work on the injected sessionmaker.
"""

from typing import Optional, Union

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError

from voting_bracket.constants import EMPTY_CLIENT_STATE
from voting_bracket.models.candidate import Candidate
from voting_bracket.models.tournament import SessionVote, TournamentSession
from voting_bracket.models.user import User
from voting_bracket.util.logging import get_logger
from voting_bracket.util.postgres import managed_session

from .errors import AlreadyCompleted, InvalidReference, NotFound

logger = get_logger(__name__)


def find_user_session(db, user_id, completed):
    return db.scalar(
        select(TournamentSession).where(
            TournamentSession.user_id == user_id,
            TournamentSession.is_completed == completed,
        )
    )


def get_session_or_raise(db, session_id, for_update=False):
    query = select(TournamentSession).where(TournamentSession.id == session_id)
    if for_update:
        query = query.with_for_update()

    session = db.scalar(query)
    if session is None:
        raise NotFound("tournament session", session_id)
    return session


def get_active_session_or_raise(db, session_id):
    session = get_session_or_raise(db, session_id)
    # Completed sessions are immutable
    if session.is_completed:
        raise NotFound("active tournament session", session_id)
    return session


class SessionStore:
    def __init__(self, sessionmaker):
        self.sessionmaker = sessionmaker

    def get_or_create(self, user_id: int) -> Union[TournamentSession, AlreadyCompleted]:
        try:
            with managed_session(self.sessionmaker) as db:
                return self._get_or_create(db, user_id)
        except IntegrityError:
            # Another request created the active session between our read and
            # insert; the partial unique index rejected ours, so resume theirs.
            logger.warning(
                "Concurrent session creation detected, resuming", user_id=user_id
            )
            with managed_session(self.sessionmaker) as db:
                if find_user_session(db, user_id, completed=True) is not None:
                    return AlreadyCompleted(user_id=user_id)

                session = find_user_session(db, user_id, completed=False)
                if session is None:
                    raise InvalidReference("user", user_id)
                return session

    def _get_or_create(self, db, user_id):
        if find_user_session(db, user_id, completed=True) is not None:
            logger.info("Tournament already completed", user_id=user_id)
            return AlreadyCompleted(user_id=user_id)

        session = find_user_session(db, user_id, completed=False)
        if session is not None:
            logger.info("Resuming tournament session", session_id=session.id)
            return session

        if db.get(User, user_id) is None:
            raise InvalidReference("user", user_id)

        session = TournamentSession(
            user_id=user_id,
            session_data=EMPTY_CLIENT_STATE,
            is_completed=False,
        )
        db.add(session)
        db.flush()
        logger.info("Created tournament session", session_id=session.id, user_id=user_id)
        return session

    def get(self, session_id: int) -> TournamentSession:
        with managed_session(self.sessionmaker) as db:
            return get_session_or_raise(db, session_id)

    def reset(self, user_id: int) -> None:
        with managed_session(self.sessionmaker) as db:
            session = find_user_session(db, user_id, completed=False)
            if session is None:
                logger.debug("No active session to reset", user_id=user_id)
                return

            db.execute(delete(SessionVote).where(SessionVote.session_id == session.id))
            db.execute(
                delete(TournamentSession).where(
                    TournamentSession.id == session.id,
                    TournamentSession.is_completed.is_(False),
                )
            )
            logger.info("Reset tournament session", session_id=session.id, user_id=user_id)

    def append_vote(
        self,
        session_id: int,
        winner_id: int,
        loser_id: int,
        vote_order: int,
        comment: Optional[str] = None,
    ) -> int:
        with managed_session(self.sessionmaker) as db:
            get_active_session_or_raise(db, session_id)

            known_ids = set(
                db.scalars(
                    select(Candidate.id).where(Candidate.id.in_([winner_id, loser_id]))
                )
            )
            for candidate_id in (winner_id, loser_id):
                if candidate_id not in known_ids:
                    raise InvalidReference("candidate", candidate_id)

            # vote_order is not checked for uniqueness; replay sorts by it
            session_vote = SessionVote(
                session_id=session_id,
                winner_id=winner_id,
                loser_id=loser_id,
                vote_order=vote_order,
                comment=comment,
            )
            db.add(session_vote)
            db.flush()

            logger.debug(
                "Buffered vote",
                session_id=session_id,
                session_vote_id=session_vote.id,
                vote_order=vote_order,
            )
            return session_vote.id

    def replace_client_state(self, session_id: int, blob: str) -> bool:
        with managed_session(self.sessionmaker) as db:
            session = get_active_session_or_raise(db, session_id)
            session.session_data = blob
            db.flush()
            return True

    def load_client_state(self, session_id: int) -> str:
        with managed_session(self.sessionmaker) as db:
            return get_session_or_raise(db, session_id).session_data

    def count_buffered(self, session_id: int) -> int:
        with managed_session(self.sessionmaker) as db:
            get_session_or_raise(db, session_id)
            return db.scalar(
                select(func.count(SessionVote.id)).where(
                    SessionVote.session_id == session_id
                )
            )

    def is_completed_for_user(self, user_id: int) -> bool:
        with managed_session(self.sessionmaker) as db:
            return find_user_session(db, user_id, completed=True) is not None
