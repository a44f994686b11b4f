"""Read-only standings and per-user statistics built from candidates and the vote ledger."""

import datetime

from sqlalchemy import Float, case, cast, distinct, func, select
from sqlalchemy.orm import selectinload

from voting_bracket.models.candidate import Candidate
from voting_bracket.models.tournament import Vote
from voting_bracket.models.user import User


def _winrate():
    return case(
        (Candidate.matches > 0, cast(Candidate.wins, Float) * 100 / Candidate.matches),
        else_=0,
    )


def get_tier_list(db):
    winrate = _winrate()

    candidates = db.scalars(
        select(Candidate)
        .where(Candidate.is_active.is_(True))
        .order_by(Candidate.elo_rating.desc(), winrate.desc(), Candidate.wins.desc())
    ).all()

    return [candidate.to_dict() for candidate in candidates]


def get_active_pair(db):
    candidates = db.scalars(
        select(Candidate)
        .where(Candidate.is_active.is_(True))
        .order_by(func.random())
        .limit(2)
    ).all()

    if len(candidates) < 2:
        return None

    return candidates[0], candidates[1]


def _count_wins(db, winner_id, loser_id):
    return db.scalar(
        select(func.count(Vote.id)).where(
            Vote.winner_id == winner_id, Vote.loser_id == loser_id
        )
    )


def get_matchup_stats(db, candidate_1_id, candidate_2_id):
    candidate_1_wins = _count_wins(db, candidate_1_id, candidate_2_id)
    candidate_2_wins = _count_wins(db, candidate_2_id, candidate_1_id)
    total = candidate_1_wins + candidate_2_wins

    return {
        "candidate1_wins": candidate_1_wins,
        "candidate2_wins": candidate_2_wins,
        "total_matches": total,
        "candidate1_winrate": round(candidate_1_wins * 100 / total, 2) if total else 0,
    }


def get_user_stats(db, user_id):
    user = db.get(User, user_id)
    if user is None:
        return None

    total_votes, active_days = db.execute(
        select(
            func.count(Vote.id),
            func.count(distinct(func.date(Vote.created))),
        ).where(Vote.user_id == user_id)
    ).one()

    result = user.to_dict()
    result.update(
        {
            "total_votes": total_votes,
            "active_days": active_days,
        }
    )
    return result


def get_user_vote_history(db, user_id, limit=10):
    votes = db.scalars(
        select(Vote)
        .options(selectinload(Vote.winner), selectinload(Vote.loser))
        .where(Vote.user_id == user_id)
        .order_by(Vote.created.desc(), Vote.id.desc())
        .limit(limit)
    ).all()

    return [vote.to_dict() for vote in votes]


def get_top_winners(db, limit=10):
    candidates = db.scalars(
        select(Candidate)
        .where(Candidate.is_active.is_(True))
        .order_by(Candidate.wins.desc(), Candidate.id)
        .limit(limit)
    ).all()

    return [candidate.to_dict() for candidate in candidates]


def _count_votes_since(db, since):
    return db.scalar(select(func.count(Vote.id)).where(Vote.created >= since))


def get_overall_stats(db, now=None, min_matches=5):
    """Site-wide totals for the admin dashboard.

    ``top_candidate`` only considers candidates with at least ``min_matches``
    matches, so one lucky win does not top the chart.
    """
    now = now or db.scalar(select(func.now()))

    top_user = db.execute(
        select(User.tg_id, User.username, User.full_name, func.count(Vote.id))
        .join(Vote, Vote.user_id == User.tg_id)
        .group_by(User.tg_id, User.username, User.full_name)
        .order_by(func.count(Vote.id).desc(), User.tg_id)
        .limit(1)
    ).first()

    top_candidate = db.scalar(
        select(Candidate)
        .where(Candidate.is_active.is_(True), Candidate.matches >= min_matches)
        .order_by(_winrate().desc(), Candidate.wins.desc())
        .limit(1)
    )

    return {
        "total_candidates": db.scalar(
            select(func.count(Candidate.id)).where(Candidate.is_active.is_(True))
        ),
        "total_users": db.scalar(select(func.count(User.tg_id))),
        "total_votes": db.scalar(select(func.count(Vote.id))),
        "votes_24h": _count_votes_since(db, now - datetime.timedelta(days=1)),
        "votes_7d": _count_votes_since(db, now - datetime.timedelta(days=7)),
        "top_user": (
            {
                "tg_id": top_user[0],
                "username": top_user[1],
                "full_name": top_user[2],
                "vote_count": top_user[3],
            }
            if top_user
            else None
        ),
        "top_candidate": top_candidate.to_dict() if top_candidate else None,
    }
