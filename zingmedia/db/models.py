from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from zingmedia.db.base import Base
from zingmedia.db.enums import (
    AssetStatusEnum,
    AssetTypeEnum,
    BriefingStatusEnum,
    CampaignStatusEnum,
    SessionStatusEnum,
    TaskKindEnum,
    TaskStatusEnum,
    TenantTypeEnum,
    UserRoleEnum,
    WorkflowStateEnum,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class Tenant(Base):
    __tablename__ = "tenants"

    id: Mapped[str] = mapped_column(String(length=64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[TenantTypeEnum] = mapped_column(Enum(TenantTypeEnum, name="tenant_type"), nullable=False)
    brand_config: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(length=36), primary_key=True, default=new_id)
    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(length=320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRoleEnum] = mapped_column(Enum(UserRoleEnum, name="user_role"), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class TenantScopedMixin:
    """Integer ``pk`` keeps insertion order; ``id`` is the public identifier."""

    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(length=36), unique=True, nullable=False, default=new_id)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class Briefing(TenantScopedMixin, Base):
    __tablename__ = "briefings"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    template_id: Mapped[str] = mapped_column(String(length=64), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[BriefingStatusEnum] = mapped_column(
        Enum(BriefingStatusEnum, name="briefing_status"),
        nullable=False,
        default=BriefingStatusEnum.active,
    )


class GenerationSession(TenantScopedMixin, Base):
    __tablename__ = "generation_sessions"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    briefing_id: Mapped[str] = mapped_column(ForeignKey("briefings.id"), nullable=False)
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    num_agents: Mapped[int] = mapped_column(Integer, nullable=False)
    num_rounds: Mapped[int] = mapped_column(Integer, nullable=False)
    platforms: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    agents: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    debate: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[SessionStatusEnum] = mapped_column(
        Enum(SessionStatusEnum, name="session_status"),
        nullable=False,
        default=SessionStatusEnum.processing,
    )
    content: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class Workflow(TenantScopedMixin, Base):
    __tablename__ = "workflows"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    session_id: Mapped[str] = mapped_column(ForeignKey("generation_sessions.id"), unique=True, nullable=False)
    briefing_id: Mapped[str] = mapped_column(ForeignKey("briefings.id"), nullable=False)
    state: Mapped[WorkflowStateEnum] = mapped_column(
        Enum(WorkflowStateEnum, name="workflow_state"),
        nullable=False,
        default=WorkflowStateEnum.generation,
    )
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )


class WorkflowEvent(Base):
    __tablename__ = "workflow_events"
    __table_args__ = (UniqueConstraint("workflow_id", "sequence", name="uq_workflow_events_sequence"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workflow_id: Mapped[str] = mapped_column(
        ForeignKey("workflows.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    state: Mapped[WorkflowStateEnum] = mapped_column(Enum(WorkflowStateEnum, name="workflow_state"), nullable=False)
    actor_id: Mapped[str] = mapped_column(String(length=36), nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)


class WorkflowComment(TenantScopedMixin, Base):
    """Discussion on a workflow, stamped with the state it was written in."""

    __tablename__ = "workflow_comments"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    workflow_id: Mapped[str] = mapped_column(
        ForeignKey("workflows.id", ondelete="CASCADE"), nullable=False, index=True
    )
    parent_id: Mapped[Optional[str]] = mapped_column(ForeignKey("workflow_comments.id"), nullable=True)
    author_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[WorkflowStateEnum] = mapped_column(Enum(WorkflowStateEnum, name="workflow_state"), nullable=False)


class CreativeAsset(TenantScopedMixin, Base):
    __tablename__ = "creative_assets"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    workflow_id: Mapped[str] = mapped_column(ForeignKey("workflows.id"), nullable=False, index=True)
    type: Mapped[AssetTypeEnum] = mapped_column(Enum(AssetTypeEnum, name="asset_type"), nullable=False)
    params: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    status: Mapped[AssetStatusEnum] = mapped_column(Enum(AssetStatusEnum, name="asset_status"), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    filename: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_seconds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)


class Campaign(TenantScopedMixin, Base):
    __tablename__ = "campaigns"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    briefing_id: Mapped[str] = mapped_column(ForeignKey("briefings.id"), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    platforms: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[CampaignStatusEnum] = mapped_column(
        Enum(CampaignStatusEnum, name="campaign_status"),
        nullable=False,
        default=CampaignStatusEnum.draft,
    )


class DeferredTask(TenantScopedMixin, Base):
    __tablename__ = "deferred_tasks"

    tenant_id: Mapped[str] = mapped_column(ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    kind: Mapped[TaskKindEnum] = mapped_column(Enum(TaskKindEnum, name="task_kind"), nullable=False)
    target_id: Mapped[str] = mapped_column(String(length=36), nullable=False, index=True)
    status: Mapped[TaskStatusEnum] = mapped_column(
        Enum(TaskStatusEnum, name="task_status"),
        nullable=False,
        default=TaskStatusEnum.pending,
    )
    due_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    finished_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
