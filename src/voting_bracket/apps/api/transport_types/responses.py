import datetime
from typing import Any, Dict, List, Optional

from .generic import Base


class TournamentSessionResponse(Base):
    session_id: int
    session_data: Optional[Dict[str, Any]] = None


class TournamentStateResponse(Base):
    session_id: int
    state: Optional[Dict[str, Any]] = None


class BufferedVoteResponse(Base):
    vote_id: int
    session_id: int


class MessageResponse(Base):
    success: bool = True
    message: str


class CandidateResponse(Base):
    id: int
    name: str
    description: Optional[str] = None
    image_path: Optional[str] = None
    wins: int
    matches: int
    elo_rating: int
    winrate: float


class TierListResponse(Base):
    tierlist: List[CandidateResponse]
    total: int


class TopWinnersResponse(Base):
    winners: List[CandidateResponse]


class CandidatePairResponse(Base):
    candidate1: CandidateResponse
    candidate2: CandidateResponse


class MatchupStatsResponse(Base):
    candidate1_wins: int
    candidate2_wins: int
    total_matches: int
    candidate1_winrate: float


class VoteHistoryEntryResponse(Base):
    id: int
    created: datetime.datetime
    comment: Optional[str] = None
    winner_id: int
    winner_name: Optional[str] = None
    winner_image: Optional[str] = None
    loser_id: int
    loser_name: Optional[str] = None
    loser_image: Optional[str] = None


class UserStatsResponse(Base):
    tg_id: int
    username: Optional[str] = None
    full_name: Optional[str] = None
    last_vote_at: Optional[datetime.datetime] = None
    total_votes: int
    active_days: int = 0


class UserTournamentResponse(Base):
    tournament_completed: bool
    session_id: Optional[int] = None
    votes_in_session: Optional[int] = None
    user: UserStatsResponse
    recent_votes: List[VoteHistoryEntryResponse] = []
