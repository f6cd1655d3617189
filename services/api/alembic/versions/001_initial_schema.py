"""Initial schema: profile, sessions, recommendation sets, options, feedback, saved meals, preference summary, plans

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Single pantry/utensil profile
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("pantry_text", sa.Text, nullable=False, server_default=""),
        sa.Column("utensils_text", sa.Text, nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("extra_ingredients_text", sa.Text, nullable=False, server_default=""),
        sa.Column("constraints_json", postgresql.JSONB, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "recommendation_sets",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("session_id", sa.String(36), sa.ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("prompt_version", sa.String(40), nullable=False),
        sa.Column("raw_response_json", sa.Text, nullable=False),
        sa.Column("repaired", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_recommendation_sets_session_id", "recommendation_sets", ["session_id"])

    op.create_table(
        "option_items",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("recommendation_set_id", sa.String(36), sa.ForeignKey("recommendation_sets.id", ondelete="CASCADE"), nullable=False),
        sa.Column("idx", sa.Integer, nullable=False),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("why", sa.Text, nullable=False),
        sa.Column("time_mins", sa.Float, nullable=False),
        sa.Column("difficulty", sa.String(10), nullable=False),
        sa.Column("ingredients_used_json", postgresql.JSONB, nullable=False),
        sa.Column("missing_ingredients_json", postgresql.JSONB, nullable=False),
        sa.Column("steps_json", postgresql.JSONB, nullable=False),
        sa.Column("substitutions_json", postgresql.JSONB, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("recommendation_set_id", "idx", name="uq_option_items_set_idx"),
    )
    op.create_index("ix_option_items_set_id", "option_items", ["recommendation_set_id"])

    # Feedback + bookmarks: at most one row per option
    op.create_table(
        "option_feedback",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("option_item_id", sa.String(36), sa.ForeignKey("option_items.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("decision", sa.String(10), nullable=False),
        sa.Column("reason", sa.String(30), nullable=True),
        sa.Column("reason_note", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "saved_meals",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("option_item_id", sa.String(36), sa.ForeignKey("option_items.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "preference_summaries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("summary_text", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # Plans
    op.create_table(
        "plans",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("inputs_json", postgresql.JSONB, nullable=False),
        sa.Column("reuse_strategy_json", postgresql.JSONB, nullable=True),
        sa.Column("model", sa.String(100), nullable=True),
        sa.Column("prompt_version", sa.String(40), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "plan_days",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("plan_id", sa.String(36), sa.ForeignKey("plans.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_index", sa.Integer, nullable=False),
        sa.Column("recipe_json", postgresql.JSONB, nullable=False),
        sa.Column("raw_response_json", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("plan_id", "day_index", name="uq_plan_days_plan_day"),
    )

    op.create_table(
        "shopping_lists",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("plan_id", sa.String(36), sa.ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, unique=True),
        sa.Column("list_json", postgresql.JSONB, nullable=False),
        sa.Column("raw_response_json", sa.Text, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("shopping_lists")
    op.drop_table("plan_days")
    op.drop_table("plans")
    op.drop_table("preference_summaries")
    op.drop_table("saved_meals")
    op.drop_table("option_feedback")
    op.drop_index("ix_option_items_set_id", table_name="option_items")
    op.drop_table("option_items")
    op.drop_index("ix_recommendation_sets_session_id", table_name="recommendation_sets")
    op.drop_table("recommendation_sets")
    op.drop_table("sessions")
    op.drop_table("user_profiles")
