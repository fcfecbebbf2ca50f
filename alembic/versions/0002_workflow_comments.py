"""Workflow comment threads"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0002_workflow_comments"
down_revision = "0001_initial"
branch_labels = None
depends_on = None

WORKFLOW_STATES = ("generation", "adjustments", "approval", "ready_for_download")


def upgrade() -> None:
    op.create_table(
        "workflow_comments",
        sa.Column("pk", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(length=36), nullable=False, unique=True),
        sa.Column("tenant_id", sa.String(length=64), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "workflow_id",
            sa.String(length=36),
            sa.ForeignKey("workflows.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("parent_id", sa.String(length=36), sa.ForeignKey("workflow_comments.id"), nullable=True),
        sa.Column("author_id", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        # workflow_state already exists as a native type; store the same values as text here.
        sa.Column("state", sa.Enum(*WORKFLOW_STATES, name="workflow_state", native_enum=False), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_workflow_comments_tenant_id", "workflow_comments", ["tenant_id"])
    op.create_index("ix_workflow_comments_workflow_id", "workflow_comments", ["workflow_id"])


def downgrade() -> None:
    op.drop_index("ix_workflow_comments_workflow_id", table_name="workflow_comments")
    op.drop_index("ix_workflow_comments_tenant_id", table_name="workflow_comments")
    op.drop_table("workflow_comments")
