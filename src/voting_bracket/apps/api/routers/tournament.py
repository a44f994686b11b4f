import json

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select

from voting_bracket.models.candidate import Candidate
from voting_bracket.models.user import CallerPayload
from voting_bracket.tournament import AlreadyCompleted, NotFound, TournamentEngine
from voting_bracket.tournament.stats import get_user_stats, get_user_vote_history
from voting_bracket.util.logging import get_logger
from voting_bracket.util.postgres import managed_session

from ..config import settings
from ..dependencies import get_synced_caller, get_tournament_engine
from ..transport_types.requests import (
    BufferedVoteRequest,
    CompleteTournamentRequest,
    SaveTournamentStateRequest,
    StartTournamentRequest,
)
from ..transport_types.responses import (
    BufferedVoteResponse,
    MessageResponse,
    TournamentSessionResponse,
    TournamentStateResponse,
    UserTournamentResponse,
)

logger = get_logger(__name__)
tournament_router = APIRouter()


def _get_owned_session(engine: TournamentEngine, session_id: int, caller: CallerPayload):
    session = engine.get_session(session_id)
    if session.user_id != caller.user_id:
        logger.warning(
            "Session requested by non-owner",
            session_id=session_id,
            user_id=caller.user_id,
        )
        raise NotFound("tournament session", session_id)
    return session


def _validate_candidates(request: Request, *candidate_ids):
    with managed_session(request.app.state.sessionmaker) as db:
        candidates = {
            candidate.id: candidate
            for candidate in db.scalars(
                select(Candidate).where(Candidate.id.in_(candidate_ids))
            )
        }

    if any(candidate_id not in candidates for candidate_id in candidate_ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid candidate IDs",
        )

    if not all(candidate.is_active for candidate in candidates.values()):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Candidate is not active",
        )


@tournament_router.post(
    "/api/tournament/start", response_model=TournamentSessionResponse
)
def start_tournament(
    request: StartTournamentRequest,
    caller: CallerPayload = Depends(get_synced_caller),
    engine: TournamentEngine = Depends(get_tournament_engine),
):
    if request.reset:
        engine.reset_session(caller.user_id)

    session = engine.get_or_create_session(caller.user_id)
    if isinstance(session, AlreadyCompleted):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tournament already completed",
        )

    return {
        "session_id": session.id,
        "session_data": json.loads(session.session_data),
    }


@tournament_router.post("/api/tournament/state", response_model=MessageResponse)
def save_tournament_state(
    request: SaveTournamentStateRequest,
    caller: CallerPayload = Depends(get_synced_caller),
    engine: TournamentEngine = Depends(get_tournament_engine),
):
    _get_owned_session(engine, request.session_id, caller)
    engine.save_client_state(request.session_id, json.dumps(request.state))
    return {"message": "State saved"}


@tournament_router.get(
    "/api/tournament/state/{session_id}", response_model=TournamentStateResponse
)
def load_tournament_state(
    session_id: int,
    caller: CallerPayload = Depends(get_synced_caller),
    engine: TournamentEngine = Depends(get_tournament_engine),
):
    _get_owned_session(engine, session_id, caller)
    blob = engine.load_client_state(session_id)
    return {
        "session_id": session_id,
        "state": json.loads(blob) if blob else None,
    }


@tournament_router.post("/api/tournament/vote", response_model=BufferedVoteResponse)
def post_buffered_vote(
    request: BufferedVoteRequest,
    request_obj: Request,
    caller: CallerPayload = Depends(get_synced_caller),
    engine: TournamentEngine = Depends(get_tournament_engine),
):
    _get_owned_session(engine, request.session_id, caller)
    _validate_candidates(request_obj, request.winner_id, request.loser_id)

    vote_id = engine.append_buffered_vote(
        request.session_id,
        request.winner_id,
        request.loser_id,
        request.vote_order,
        request.comment,
    )
    return {"vote_id": vote_id, "session_id": request.session_id}


@tournament_router.post("/api/tournament/complete", response_model=MessageResponse)
def complete_tournament(
    request: CompleteTournamentRequest,
    caller: CallerPayload = Depends(get_synced_caller),
    engine: TournamentEngine = Depends(get_tournament_engine),
):
    _get_owned_session(engine, request.session_id, caller)

    if not engine.complete_tournament(
        request.session_id, caller.user_id, request.comment
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tournament already completed",
        )

    return {"message": "Tournament completed successfully"}


@tournament_router.get("/api/tournament/me", response_model=UserTournamentResponse)
def get_my_tournament(
    request: Request,
    caller: CallerPayload = Depends(get_synced_caller),
    engine: TournamentEngine = Depends(get_tournament_engine),
):
    if engine.is_tournament_completed(caller.user_id):
        with managed_session(request.app.state.sessionmaker) as db:
            return {
                "tournament_completed": True,
                "user": get_user_stats(db, caller.user_id),
                "recent_votes": get_user_vote_history(
                    db, caller.user_id, settings.USER_HISTORY_LIMIT
                ),
            }

    session = engine.get_or_create_session(caller.user_id)
    if isinstance(session, AlreadyCompleted):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Tournament completed concurrently, retry",
        )

    votes_in_session = engine.count_buffered_votes(session.id)
    return {
        "tournament_completed": False,
        "session_id": session.id,
        "votes_in_session": votes_in_session,
        "user": {
            "tg_id": caller.user_id,
            "username": caller.username,
            "full_name": caller.full_name,
            "total_votes": votes_in_session,
        },
    }
