"""
A user's tournament. While ``is_completed`` is false the session only holds
buffered votes; completing it moves them into ``voting.vote``.
"""

from sqlalchemy import (
    TIMESTAMP,
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    Table,
    Text,
    func,
    text,
)

from .._metadata import metadata

tournament_session = Table(
    "tournament_session",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column(
        "updated",
        TIMESTAMP(timezone=False),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    ),
    Column(
        "user_id",
        BigInteger,
        ForeignKey("voting.user.tg_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    # Opaque client state, stored and returned verbatim
    Column("session_data", Text, nullable=False, server_default=text("'{}'")),
    Column(
        "is_completed",
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    ),
    # At most one unfinished tournament per user
    Index(
        "uq_tournament_session_active_user",
        "user_id",
        unique=True,
        postgresql_where=text("NOT is_completed"),
        sqlite_where=text("NOT is_completed"),
    ),
    schema="voting",
    # Ids are never handed out twice, even after a delete
    sqlite_autoincrement=True,
)
