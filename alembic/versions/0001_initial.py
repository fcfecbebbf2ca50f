"""Initial schema: tenants, users, content workflow and deferred tasks"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

WORKFLOW_STATES = ("generation", "adjustments", "approval", "ready_for_download")


def _tenant_scoped_columns() -> list[sa.Column]:
    return [
        sa.Column("pk", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("id", sa.String(length=36), nullable=False, unique=True),
        sa.Column("tenant_id", sa.String(length=64), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "tenants",
        sa.Column("id", sa.String(length=64), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("type", sa.Enum("platform", "agency", "client", name="tenant_type"), nullable=False),
        sa.Column("brand_config", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("tenant_id", sa.String(length=64), sa.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column(
            "role",
            sa.Enum(
                "platform_admin",
                "agency_admin",
                "content_manager",
                "client_approver",
                "viewer",
                name="user_role",
            ),
            nullable=False,
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_users_tenant_id", "users", ["tenant_id"])

    op.create_table(
        "briefings",
        *_tenant_scoped_columns(),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("template_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("status", sa.Enum("active", "archived", name="briefing_status"), nullable=False),
    )
    op.create_index("ix_briefings_tenant_id", "briefings", ["tenant_id"])

    op.create_table(
        "generation_sessions",
        *_tenant_scoped_columns(),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("briefing_id", sa.String(length=36), sa.ForeignKey("briefings.id"), nullable=False),
        sa.Column("subject", sa.Text(), nullable=False),
        sa.Column("num_agents", sa.Integer(), nullable=False),
        sa.Column("num_rounds", sa.Integer(), nullable=False),
        sa.Column("platforms", sa.JSON(), nullable=False),
        sa.Column("agents", sa.JSON(), nullable=False),
        sa.Column("debate", sa.JSON(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("processing", "completed", "failed", "cancelled", name="session_status"),
            nullable=False,
        ),
        sa.Column("content", sa.JSON(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_generation_sessions_tenant_id", "generation_sessions", ["tenant_id"])

    op.create_table(
        "workflows",
        *_tenant_scoped_columns(),
        sa.Column(
            "session_id",
            sa.String(length=36),
            sa.ForeignKey("generation_sessions.id"),
            nullable=False,
            unique=True,
        ),
        sa.Column("briefing_id", sa.String(length=36), sa.ForeignKey("briefings.id"), nullable=False),
        sa.Column("state", sa.Enum(*WORKFLOW_STATES, name="workflow_state"), nullable=False),
        sa.Column("content", sa.JSON(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_workflows_tenant_id", "workflows", ["tenant_id"])

    op.create_table(
        "workflow_events",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "workflow_id",
            sa.String(length=36),
            sa.ForeignKey("workflows.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("sequence", sa.Integer(), nullable=False),
        # workflow_state already exists as a native type; store the same values as text here.
        sa.Column("state", sa.Enum(*WORKFLOW_STATES, name="workflow_state", native_enum=False), nullable=False),
        sa.Column("actor_id", sa.String(length=36), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("workflow_id", "sequence", name="uq_workflow_events_sequence"),
    )
    op.create_index("ix_workflow_events_workflow_id", "workflow_events", ["workflow_id"])

    op.create_table(
        "creative_assets",
        *_tenant_scoped_columns(),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("workflow_id", sa.String(length=36), sa.ForeignKey("workflows.id"), nullable=False),
        sa.Column("type", sa.Enum("image", "video", name="asset_type"), nullable=False),
        sa.Column("params", sa.JSON(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("processing", "generated", "completed", "failed", "cancelled", name="asset_status"),
            nullable=False,
        ),
        sa.Column("url", sa.Text(), nullable=False),
        sa.Column("filename", sa.Text(), nullable=False),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("duration_seconds", sa.Integer(), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_creative_assets_tenant_id", "creative_assets", ["tenant_id"])
    op.create_index("ix_creative_assets_workflow_id", "creative_assets", ["workflow_id"])

    op.create_table(
        "campaigns",
        *_tenant_scoped_columns(),
        sa.Column("created_by", sa.String(length=36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("briefing_id", sa.String(length=36), sa.ForeignKey("briefings.id"), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("platforms", sa.JSON(), nullable=False),
        sa.Column("status", sa.Enum("draft", "active", "completed", name="campaign_status"), nullable=False),
    )
    op.create_index("ix_campaigns_tenant_id", "campaigns", ["tenant_id"])

    op.create_table(
        "deferred_tasks",
        *_tenant_scoped_columns(),
        sa.Column("kind", sa.Enum("generation_session", "video_render", name="task_kind"), nullable=False),
        sa.Column("target_id", sa.String(length=36), nullable=False),
        sa.Column(
            "status",
            sa.Enum("pending", "completed", "failed", "cancelled", name="task_status"),
            nullable=False,
        ),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("finished_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("error", sa.Text(), nullable=True),
    )
    op.create_index("ix_deferred_tasks_tenant_id", "deferred_tasks", ["tenant_id"])
    op.create_index("ix_deferred_tasks_target_id", "deferred_tasks", ["target_id"])


def downgrade() -> None:
    op.drop_index("ix_deferred_tasks_target_id", table_name="deferred_tasks")
    op.drop_index("ix_deferred_tasks_tenant_id", table_name="deferred_tasks")
    op.drop_table("deferred_tasks")
    op.drop_index("ix_campaigns_tenant_id", table_name="campaigns")
    op.drop_table("campaigns")
    op.drop_index("ix_creative_assets_workflow_id", table_name="creative_assets")
    op.drop_index("ix_creative_assets_tenant_id", table_name="creative_assets")
    op.drop_table("creative_assets")
    op.drop_index("ix_workflow_events_workflow_id", table_name="workflow_events")
    op.drop_table("workflow_events")
    op.drop_index("ix_workflows_tenant_id", table_name="workflows")
    op.drop_table("workflows")
    op.drop_index("ix_generation_sessions_tenant_id", table_name="generation_sessions")
    op.drop_table("generation_sessions")
    op.drop_index("ix_briefings_tenant_id", table_name="briefings")
    op.drop_table("briefings")
    op.drop_index("ix_users_tenant_id", table_name="users")
    op.drop_table("users")
    op.drop_table("tenants")
    for enum_name in (
        "task_status",
        "task_kind",
        "campaign_status",
        "asset_status",
        "asset_type",
        "workflow_state",
        "session_status",
        "briefing_status",
        "user_role",
        "tenant_type",
    ):
        sa.Enum(name=enum_name).drop(op.get_bind(), checkfirst=True)
