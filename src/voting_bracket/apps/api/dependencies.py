from fastapi import Depends, Request

from voting_bracket.models.user import CallerPayload
from voting_bracket.server.auth import AuthManager
from voting_bracket.tournament import TournamentEngine
from voting_bracket.tournament.users import sync_user
from voting_bracket.util.logging import get_logger
from voting_bracket.util.postgres import managed_session

from .config import settings

logger = get_logger(__name__)

am = AuthManager(
    jwt_secret=settings.JWT_SECRET_KEY,
    jwt_algorithm=settings.ALGORITHM,
)


def get_managed_session(request: Request):
    logger.debug("Getting managed session")
    with managed_session(request.app.state.sessionmaker) as db:
        yield db
    logger.debug("Exited managed session")


def get_tournament_engine(request: Request) -> TournamentEngine:
    return request.app.state.tournament_engine


def get_synced_caller(
    request: Request, caller: CallerPayload = Depends(am.get_current_caller)
) -> CallerPayload:
    # Committed on its own so the tournament operations that follow can see the user
    with managed_session(request.app.state.sessionmaker) as db:
        sync_user(db, caller)
    return caller
