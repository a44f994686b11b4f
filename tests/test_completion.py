import pytest
from sqlalchemy import select

import voting_bracket.tournament.completion as completion_module
from voting_bracket.models.candidate import Candidate
from voting_bracket.models.tournament import TournamentSession, Vote
from voting_bracket.models.user import User
from voting_bracket.tournament import (
    AlreadyCompleted,
    CompletionCoordinator,
    CompletionFailed,
    EmptySession,
    NotFound,
    SessionStore,
)
from voting_bracket.util.elo import rate


@pytest.fixture
def store(sessionmaker):
    return SessionStore(sessionmaker)


@pytest.fixture
def coordinator(sessionmaker):
    return CompletionCoordinator(sessionmaker)


@pytest.fixture
def session_id(store, user_id):
    return store.get_or_create(user_id).id


def _ratings(sessionmaker):
    with sessionmaker() as db:
        return {
            candidate.name: (candidate.elo_rating, candidate.wins, candidate.matches)
            for candidate in db.scalars(select(Candidate))
        }


def _ledger(sessionmaker):
    with sessionmaker() as db:
        return db.scalars(select(Vote).order_by(Vote.id)).all()


def test_complete_replays_votes_in_order_with_final_match_bonus(
    store, coordinator, sessionmaker, session_id, user_id, candidates
):
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)
    store.append_vote(session_id, candidates["B"], candidates["C"], 1)

    assert coordinator.complete(session_id, user_id) is True

    ledger = _ledger(sessionmaker)
    assert [(vote.winner_id, vote.loser_id) for vote in ledger] == [
        (candidates["A"], candidates["B"]),
        (candidates["B"], candidates["C"]),
    ]
    assert all(vote.user_id == user_id for vote in ledger)

    # First match at k=32, final match at k=60
    a_rating, b_after_first = rate(1200, 1200, 32)
    b_rating, c_rating = rate(b_after_first, 1200, 60)
    assert (a_rating, b_after_first) == (1216, 1184)

    assert _ratings(sessionmaker) == {
        "A": (a_rating, 1, 1),
        "B": (b_rating, 1, 2),
        "C": (c_rating, 0, 1),
    }

    with sessionmaker() as db:
        assert db.get(TournamentSession, session_id).is_completed is True


def test_complete_orders_by_vote_order_then_insertion(
    store, coordinator, sessionmaker, session_id, user_id, candidates
):
    store.append_vote(session_id, candidates["C"], candidates["A"], 2)
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)
    store.append_vote(session_id, candidates["B"], candidates["C"], 1)
    store.append_vote(session_id, candidates["A"], candidates["C"], 1)

    coordinator.complete(session_id, user_id)

    assert [(vote.winner_id, vote.loser_id) for vote in _ledger(sessionmaker)] == [
        (candidates["A"], candidates["B"]),
        (candidates["B"], candidates["C"]),
        (candidates["A"], candidates["C"]),
        (candidates["C"], candidates["A"]),
    ]


def test_final_comment_only_fills_last_vote(
    store, coordinator, sessionmaker, session_id, user_id, candidates
):
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)
    store.append_vote(session_id, candidates["A"], candidates["C"], 1, "easy pick")
    store.append_vote(session_id, candidates["B"], candidates["C"], 2)

    coordinator.complete(session_id, user_id, final_comment="great final")

    assert [vote.comment for vote in _ledger(sessionmaker)] == [
        None,
        "easy pick",
        "great final",
    ]


def test_own_comment_wins_over_final_comment(
    store, coordinator, sessionmaker, session_id, user_id, candidates
):
    store.append_vote(session_id, candidates["A"], candidates["B"], 0, "mine")

    coordinator.complete(session_id, user_id, final_comment="ignored")

    assert [vote.comment for vote in _ledger(sessionmaker)] == ["mine"]


def test_complete_updates_user_activity(
    store, coordinator, engine, sessionmaker, session_id, user_id, candidates
):
    with engine.begin() as conn:
        conn.execute(
            User.__table__.update()
            .where(User.__table__.c.tg_id == user_id)
            .values(last_vote_at=None)
        )
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)

    coordinator.complete(session_id, user_id)

    with sessionmaker() as db:
        assert db.get(User, user_id).last_vote_at is not None


def test_complete_empty_session(coordinator, store, sessionmaker, session_id, user_id):
    with pytest.raises(EmptySession):
        coordinator.complete(session_id, user_id)

    with sessionmaker() as db:
        assert db.get(TournamentSession, session_id).is_completed is False
    assert isinstance(store.get_or_create(user_id), TournamentSession)


def test_complete_unknown_session(coordinator, user_id):
    with pytest.raises(NotFound):
        coordinator.complete(999, user_id)


def test_complete_twice_is_rejected_without_side_effects(
    store, coordinator, sessionmaker, session_id, user_id, candidates
):
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)
    coordinator.complete(session_id, user_id)
    ratings_after_first = _ratings(sessionmaker)

    assert coordinator.complete(session_id, user_id) is False

    assert len(_ledger(sessionmaker)) == 1
    assert _ratings(sessionmaker) == ratings_after_first


def test_completed_user_cannot_start_again_and_reset_is_noop(
    store, coordinator, sessionmaker, session_id, user_id, candidates
):
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)
    coordinator.complete(session_id, user_id)

    assert store.get_or_create(user_id) == AlreadyCompleted(user_id=user_id)

    store.reset(user_id)

    with sessionmaker() as db:
        sessions = db.scalars(select(TournamentSession)).all()
    assert [(session.id, session.is_completed) for session in sessions] == [
        (session_id, True)
    ]
    assert store.is_completed_for_user(user_id) is True


def test_failure_mid_replay_rolls_everything_back(
    store, coordinator, sessionmaker, monkeypatch, session_id, user_id, candidates
):
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)
    store.append_vote(session_id, candidates["B"], candidates["C"], 1)
    store.append_vote(session_id, candidates["C"], candidates["A"], 2)
    ratings_before = _ratings(sessionmaker)

    calls = []

    def failing_rate(winner_rating, loser_rating, k_factor):
        calls.append(k_factor)
        if len(calls) == 2:
            raise RuntimeError("store went away")
        return rate(winner_rating, loser_rating, k_factor)

    monkeypatch.setattr(completion_module, "rate", failing_rate)

    with pytest.raises(CompletionFailed) as exc_info:
        coordinator.complete(session_id, user_id)

    assert isinstance(exc_info.value.cause, RuntimeError)
    assert exc_info.value.__cause__ is exc_info.value.cause
    assert _ledger(sessionmaker) == []
    assert _ratings(sessionmaker) == ratings_before
    with sessionmaker() as db:
        assert db.get(TournamentSession, session_id).is_completed is False
    assert store.count_buffered(session_id) == 3

    # The session can simply be retried once the fault is gone
    monkeypatch.setattr(completion_module, "rate", rate)
    assert coordinator.complete(session_id, user_id) is True
    assert len(_ledger(sessionmaker)) == 3


@pytest.mark.parametrize(
    "vote_count, expected_k_factors",
    [
        (1, [60]),
        (2, [32, 60]),
        (4, [32, 32, 32, 60]),
    ],
)
def test_k_factor_schedule(
    store,
    coordinator,
    monkeypatch,
    session_id,
    user_id,
    candidates,
    vote_count,
    expected_k_factors,
):
    for vote_order in range(vote_count):
        store.append_vote(session_id, candidates["A"], candidates["B"], vote_order)

    k_factors = []

    def recording_rate(winner_rating, loser_rating, k_factor):
        k_factors.append(k_factor)
        return rate(winner_rating, loser_rating, k_factor)

    monkeypatch.setattr(completion_module, "rate", recording_rate)

    coordinator.complete(session_id, user_id)

    assert k_factors == expected_k_factors


def test_custom_k_factors(sessionmaker, store, session_id, user_id, candidates):
    store.append_vote(session_id, candidates["A"], candidates["B"], 0)
    store.append_vote(session_id, candidates["A"], candidates["C"], 1)

    CompletionCoordinator(sessionmaker, k_factor=16, finale_k_factor=16).complete(
        session_id, user_id
    )

    ratings = _ratings(sessionmaker)
    assert ratings["B"][0] == 1192
    assert ratings["C"][0] == rate(rate(1200, 1200, 16)[0], 1200, 16)[1]
