"""Initial Schema Creation

Revision ID: 3f2a9c1d7e10
Revises:
Create Date: 2026-10-12 09:14:22.518307

"""

from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("CREATE SCHEMA IF NOT EXISTS voting")


def downgrade() -> None:
    raise RuntimeError("Upgrades only")
