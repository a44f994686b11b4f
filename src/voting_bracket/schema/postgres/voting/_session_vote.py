"""
Votes buffered inside an unfinished tournament session.
Replay order is ``vote_order`` with ties broken by ``id``; neither is checked
for gaps or duplicates.
"""

from sqlalchemy import (
    TIMESTAMP,
    Column,
    ForeignKey,
    Index,
    Integer,
    Table,
    Text,
    func,
)

from .._metadata import metadata

session_vote = Table(
    "session_vote",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column(
        "session_id",
        Integer,
        ForeignKey("voting.tournament_session.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("winner_id", Integer, ForeignKey("voting.candidate.id"), nullable=False),
    Column("loser_id", Integer, ForeignKey("voting.candidate.id"), nullable=False),
    Column("vote_order", Integer, nullable=False),
    Column("comment", Text, nullable=True),
    Index("ix_session_vote_session_order", "session_id", "vote_order", "id"),
    schema="voting",
    # Ids are never handed out twice, even after a delete
    sqlite_autoincrement=True,
)
