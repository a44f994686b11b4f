from typing import Any, Dict, Optional

from .generic import Base


class StartTournamentRequest(Base):
    # Drop any unfinished session and start over
    reset: bool = False


class SaveTournamentStateRequest(Base):
    session_id: int
    state: Dict[str, Any]


class BufferedVoteRequest(Base):
    session_id: int
    winner_id: int
    loser_id: int
    vote_order: int
    comment: Optional[str] = None


class CompleteTournamentRequest(Base):
    session_id: int
    comment: Optional[str] = None
