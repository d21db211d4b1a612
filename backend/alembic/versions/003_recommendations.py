"""Add user_interactions, user_recommendations and recommendation_interactions.

Revision ID: 003
Revises: 002
Create Date: 2026-09-21

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_interactions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("material_id", sa.String(36), nullable=True),
        sa.Column("category_id", sa.String(36), nullable=True),
        sa.Column("project_id", sa.String(36), nullable=True),
        sa.Column("search_query", sa.String(255), nullable=True),
        sa.Column("metadata", sa.JSON(), nullable=True),
        sa.Column("session_id", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_interactions_user_id", "user_interactions", ["user_id"])
    op.create_index("ix_user_interactions_material_id", "user_interactions", ["material_id"])
    op.create_index("ix_user_interactions_created_at", "user_interactions", ["created_at"])

    op.create_table(
        "user_recommendations",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("material_id", sa.String(36), nullable=True),
        sa.Column("category_id", sa.String(36), nullable=True),
        sa.Column("project_type", sa.String(50), nullable=True),
        sa.Column("supplier_id", sa.String(36), nullable=True),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["supplier_id"], ["users.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_user_recommendations_user_id", "user_recommendations", ["user_id"])
    op.create_index("ix_user_recommendations_status", "user_recommendations", ["status"])

    op.create_table(
        "recommendation_interactions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("recommendation_id", sa.String(36), nullable=False),
        sa.Column("interaction_type", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["recommendation_id"], ["user_recommendations.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_recommendation_interactions_user_id", "recommendation_interactions", ["user_id"])
    op.create_index(
        "ix_recommendation_interactions_recommendation_id", "recommendation_interactions", ["recommendation_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_recommendation_interactions_recommendation_id", table_name="recommendation_interactions")
    op.drop_index("ix_recommendation_interactions_user_id", table_name="recommendation_interactions")
    op.drop_table("recommendation_interactions")
    op.drop_index("ix_user_recommendations_status", table_name="user_recommendations")
    op.drop_index("ix_user_recommendations_user_id", table_name="user_recommendations")
    op.drop_table("user_recommendations")
    op.drop_index("ix_user_interactions_created_at", table_name="user_interactions")
    op.drop_index("ix_user_interactions_material_id", table_name="user_interactions")
    op.drop_index("ix_user_interactions_user_id", table_name="user_interactions")
    op.drop_table("user_interactions")
