"""
Candidates are the items being compared. The aggregate columns are only
written while a tournament is being completed or ratings are rebuilt.
"""

from sqlalchemy import (
    TIMESTAMP,
    Boolean,
    Column,
    Integer,
    String,
    Table,
    Text,
    func,
    text,
)

from .._metadata import metadata

candidate = Table(
    "candidate",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "created", TIMESTAMP(timezone=False), server_default=func.now(), nullable=False
    ),
    Column("name", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("image_path", String(512), nullable=True),
    Column("wins", Integer, nullable=False, default=0, server_default=text("0")),
    Column("matches", Integer, nullable=False, default=0, server_default=text("0")),
    Column(
        "elo_rating",
        Integer,
        nullable=False,
        default=1200,
        server_default=text("1200"),
        index=True,
    ),
    Column(
        "is_active",
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
        index=True,
    ),
    schema="voting",
)
