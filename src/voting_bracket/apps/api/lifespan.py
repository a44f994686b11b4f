from contextlib import asynccontextmanager

from voting_bracket.tournament import TournamentEngine
from voting_bracket.util.logging import get_logger
from voting_bracket.util.postgres import get_engine, make_sessionmaker

from .config import settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app):
    engine = get_engine()
    sessionmaker = make_sessionmaker(engine)

    app.state.sessionmaker = sessionmaker
    app.state.tournament_engine = TournamentEngine(
        sessionmaker, config=settings.TOURNAMENT
    )
    logger.info("Tournament engine ready")

    yield

    engine.dispose()
