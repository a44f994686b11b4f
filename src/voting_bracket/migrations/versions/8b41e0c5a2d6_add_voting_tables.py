"""add voting tables

Revision ID: 8b41e0c5a2d6
Revises: 3f2a9c1d7e10
Create Date: 2026-10-12 09:31:05.104226

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8b41e0c5a2d6"
down_revision: Union[str, None] = "3f2a9c1d7e10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "candidate",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "created",
            sa.TIMESTAMP(timezone=False),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("image_path", sa.String(length=512), nullable=True),
        sa.Column("wins", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("matches", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column(
            "elo_rating", sa.Integer(), server_default=sa.text("1200"), nullable=False
        ),
        sa.Column(
            "is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.PrimaryKeyConstraint("id", name="pk_candidate"),
        schema="voting",
    )
    op.create_index(
        "ix_voting_candidate_elo_rating",
        "candidate",
        ["elo_rating"],
        schema="voting",
    )
    op.create_index(
        "ix_voting_candidate_is_active",
        "candidate",
        ["is_active"],
        schema="voting",
    )

    op.create_table(
        "user",
        sa.Column("tg_id", sa.BigInteger(), autoincrement=False, nullable=False),
        sa.Column("username", sa.String(length=64), nullable=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column(
            "last_vote_at",
            sa.TIMESTAMP(timezone=False),
            server_default=sa.text("now()"),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint("tg_id", name="pk_user"),
        schema="voting",
    )

    op.create_table(
        "tournament_session",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "created",
            sa.TIMESTAMP(timezone=False),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated",
            sa.TIMESTAMP(timezone=False),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column(
            "session_data", sa.Text(), server_default=sa.text("'{}'"), nullable=False
        ),
        sa.Column(
            "is_completed",
            sa.Boolean(),
            server_default=sa.text("false"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["voting.user.tg_id"],
            name="fk_tournament_session_user_id_user",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_tournament_session"),
        schema="voting",
    )
    op.create_index(
        "ix_voting_tournament_session_user_id",
        "tournament_session",
        ["user_id"],
        schema="voting",
    )
    # At most one unfinished tournament per user
    op.create_index(
        "uq_tournament_session_active_user",
        "tournament_session",
        ["user_id"],
        unique=True,
        schema="voting",
        postgresql_where=sa.text("NOT is_completed"),
    )

    op.create_table(
        "session_vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "created",
            sa.TIMESTAMP(timezone=False),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("session_id", sa.Integer(), nullable=False),
        sa.Column("winner_id", sa.Integer(), nullable=False),
        sa.Column("loser_id", sa.Integer(), nullable=False),
        sa.Column("vote_order", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["session_id"],
            ["voting.tournament_session.id"],
            name="fk_session_vote_session_id_tournament_session",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["winner_id"],
            ["voting.candidate.id"],
            name="fk_session_vote_winner_id_candidate",
        ),
        sa.ForeignKeyConstraint(
            ["loser_id"],
            ["voting.candidate.id"],
            name="fk_session_vote_loser_id_candidate",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_session_vote"),
        schema="voting",
    )
    op.create_index(
        "ix_session_vote_session_order",
        "session_vote",
        ["session_id", "vote_order", "id"],
        schema="voting",
    )

    op.create_table(
        "vote",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "created",
            sa.TIMESTAMP(timezone=False),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.Column("winner_id", sa.Integer(), nullable=False),
        sa.Column("loser_id", sa.Integer(), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["voting.user.tg_id"],
            name="fk_vote_user_id_user",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["winner_id"],
            ["voting.candidate.id"],
            name="fk_vote_winner_id_candidate",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["loser_id"],
            ["voting.candidate.id"],
            name="fk_vote_loser_id_candidate",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_vote"),
        schema="voting",
    )
    op.create_index("ix_voting_vote_created", "vote", ["created"], schema="voting")
    op.create_index("ix_voting_vote_user_id", "vote", ["user_id"], schema="voting")
    op.create_index("ix_voting_vote_winner_id", "vote", ["winner_id"], schema="voting")


def downgrade() -> None:
    raise RuntimeError("Upgrades only")
