from sqlalchemy import TIMESTAMP, BigInteger, Column, String, Table, func

from .._metadata import metadata

user = Table(
    "user",
    metadata,
    # Supplied by the identity provider, never generated here
    Column("tg_id", BigInteger, primary_key=True, autoincrement=False),
    Column("username", String(64), nullable=True),
    Column("full_name", String(255), nullable=True),
    Column(
        "last_vote_at",
        TIMESTAMP(timezone=False),
        server_default=func.now(),
        nullable=True,
    ),
    schema="voting",
)
