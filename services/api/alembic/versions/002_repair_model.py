"""Record the repair model on recommendation sets and plans

Revision ID: 002_repair_model
Revises: 001_initial_schema
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_repair_model"
down_revision: Union[str, None] = "001_initial_schema"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("recommendation_sets", sa.Column("repair_model", sa.String(100), nullable=True))
    op.add_column("plans", sa.Column("repair_model", sa.String(100), nullable=True))


def downgrade() -> None:
    op.drop_column("plans", "repair_model")
    op.drop_column("recommendation_sets", "repair_model")
