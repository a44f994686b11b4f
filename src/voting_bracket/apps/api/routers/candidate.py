from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from voting_bracket.tournament.stats import (
    get_active_pair,
    get_matchup_stats,
    get_tier_list,
    get_top_winners,
)

from ..dependencies import get_managed_session
from ..transport_types.responses import (
    CandidatePairResponse,
    MatchupStatsResponse,
    TierListResponse,
    TopWinnersResponse,
)

candidate_router = APIRouter()


@candidate_router.get("/api/candidates/tierlist", response_model=TierListResponse)
def get_candidate_tier_list(db: Session = Depends(get_managed_session)):
    tier_list = get_tier_list(db)
    return {"tierlist": tier_list, "total": len(tier_list)}


@candidate_router.get("/api/candidates/pair", response_model=CandidatePairResponse)
def get_candidate_pair(db: Session = Depends(get_managed_session)):
    pair = get_active_pair(db)
    if pair is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not enough active candidates",
        )

    candidate_1, candidate_2 = pair
    return {"candidate1": candidate_1.to_dict(), "candidate2": candidate_2.to_dict()}


@candidate_router.get("/api/candidates/matchup", response_model=MatchupStatsResponse)
def get_candidate_matchup(
    candidate1: int = Query(..., gt=0),
    candidate2: int = Query(..., gt=0),
    db: Session = Depends(get_managed_session),
):
    return get_matchup_stats(db, candidate1, candidate2)


@candidate_router.get("/api/candidates/top", response_model=TopWinnersResponse)
def get_candidate_top_winners(
    limit: int = Query(10, gt=0, le=100),
    db: Session = Depends(get_managed_session),
):
    return {"winners": get_top_winners(db, limit)}
