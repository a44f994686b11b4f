from typing import Optional, Union

from voting_bracket.config import TournamentConfig
from voting_bracket.models.tournament import TournamentSession

from .completion import CompletionCoordinator
from .errors import AlreadyCompleted
from .session_store import SessionStore


class TournamentEngine:
    """Public tournament operations, each run against the injected sessionmaker."""

    def __init__(self, sessionmaker, config=None):
        config = config or TournamentConfig()
        self.store = SessionStore(sessionmaker)
        self.coordinator = CompletionCoordinator(
            sessionmaker,
            k_factor=config.k_factor,
            finale_k_factor=config.finale_k_factor,
            default_rating=config.default_rating,
        )

    def get_or_create_session(
        self, user_id: int
    ) -> Union[TournamentSession, AlreadyCompleted]:
        return self.store.get_or_create(user_id)

    def reset_session(self, user_id: int) -> None:
        self.store.reset(user_id)

    def append_buffered_vote(
        self,
        session_id: int,
        winner_id: int,
        loser_id: int,
        vote_order: int,
        comment: Optional[str] = None,
    ) -> int:
        return self.store.append_vote(
            session_id, winner_id, loser_id, vote_order, comment
        )

    def save_client_state(self, session_id: int, blob: str) -> bool:
        return self.store.replace_client_state(session_id, blob)

    def load_client_state(self, session_id: int) -> Optional[str]:
        return self.store.load_client_state(session_id)

    def complete_tournament(
        self, session_id: int, user_id: int, final_comment: Optional[str] = None
    ) -> bool:
        return self.coordinator.complete(session_id, user_id, final_comment)

    def get_session(self, session_id: int) -> TournamentSession:
        return self.store.get(session_id)

    def count_buffered_votes(self, session_id: int) -> int:
        return self.store.count_buffered(session_id)

    def is_tournament_completed(self, user_id: int) -> bool:
        return self.store.is_completed_for_user(user_id)
