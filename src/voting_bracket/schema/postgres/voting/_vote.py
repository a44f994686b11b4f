"""
The permanent vote ledger. Rows are only ever inserted; ratings can be rebuilt
from this table alone.
"""

from sqlalchemy import (
    TIMESTAMP,
    BigInteger,
    Column,
    ForeignKey,
    Integer,
    Table,
    Text,
    func,
)

from .._metadata import metadata

vote = Table(
    "vote",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created",
        TIMESTAMP(timezone=False),
        server_default=func.now(),
        nullable=False,
        index=True,
    ),
    Column(
        "user_id",
        BigInteger,
        ForeignKey("voting.user.tg_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "winner_id",
        Integer,
        ForeignKey("voting.candidate.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column(
        "loser_id",
        Integer,
        ForeignKey("voting.candidate.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("comment", Text, nullable=True),
    schema="voting",
    # Ids are never handed out twice, even after a delete
    sqlite_autoincrement=True,
)
