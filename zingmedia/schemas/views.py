"""camelCase JSON representations of persisted entities."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from zingmedia.auth.rbac import permissions_for, sorted_permission_values
from zingmedia.db.models import (
    Briefing,
    Campaign,
    CreativeAsset,
    GenerationSession,
    Tenant,
    User,
    WorkflowComment,
    WorkflowEvent,
)
from zingmedia.domain.catalog import BriefingTemplate
from zingmedia.services.assets import AssetDownload
from zingmedia.services.tasks import as_utc
from zingmedia.services.workflows import WorkflowDetail, allowed_transitions


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return as_utc(value).isoformat()


def user_public(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role.value,
        "tenantId": user.tenant_id,
        "permissions": sorted_permission_values(permissions_for(user.role)),
    }


def tenant_view(tenant: Tenant) -> dict[str, Any]:
    return {
        "id": tenant.id,
        "name": tenant.name,
        "type": tenant.type.value,
        "brandConfig": dict(tenant.brand_config or {}),
    }


def template_view(template: BriefingTemplate) -> dict[str, Any]:
    return {
        "id": template.id,
        "name": template.name,
        "description": template.description,
        "fields": [
            {"name": item.name, "label": item.label, "required": item.required, "multiple": item.multiple}
            for item in template.fields
        ],
    }


def briefing_view(briefing: Briefing) -> dict[str, Any]:
    return {
        "id": briefing.id,
        "tenantId": briefing.tenant_id,
        "createdBy": briefing.created_by,
        "templateId": briefing.template_id,
        "name": briefing.name,
        "data": briefing.data,
        "status": briefing.status.value,
        "createdAt": _iso(briefing.created_at),
    }


def session_view(generation: GenerationSession) -> dict[str, Any]:
    return {
        "id": generation.id,
        "tenantId": generation.tenant_id,
        "createdBy": generation.created_by,
        "briefingId": generation.briefing_id,
        "subject": generation.subject,
        "numAgents": generation.num_agents,
        "numRounds": generation.num_rounds,
        "platforms": generation.platforms,
        "agents": generation.agents,
        "debate": generation.debate,
        "status": generation.status.value,
        "content": generation.content,
        "error": generation.error,
        "createdAt": _iso(generation.created_at),
        "completedAt": _iso(generation.completed_at),
    }


def event_view(event: WorkflowEvent) -> dict[str, Any]:
    return {
        "sequence": event.sequence,
        "state": event.state.value,
        "actorId": event.actor_id,
        "comment": event.comment,
        "timestamp": _iso(event.created_at),
    }


def workflow_view(detail: WorkflowDetail) -> dict[str, Any]:
    workflow = detail.workflow
    return {
        "id": workflow.id,
        "tenantId": workflow.tenant_id,
        "sessionId": workflow.session_id,
        "briefingId": workflow.briefing_id,
        "state": workflow.state.value,
        "content": workflow.content,
        "history": [event_view(event) for event in detail.history],
        "allowedTransitions": [state.value for state in allowed_transitions(workflow.state)],
        "createdAt": _iso(workflow.created_at),
        "updatedAt": _iso(workflow.updated_at),
    }


def comment_view(comment: WorkflowComment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "workflowId": comment.workflow_id,
        "parentId": comment.parent_id,
        "authorId": comment.author_id,
        "content": comment.content,
        "state": comment.state.value,
        "createdAt": _iso(comment.created_at),
    }


def asset_view(asset: CreativeAsset) -> dict[str, Any]:
    return {
        "id": asset.id,
        "tenantId": asset.tenant_id,
        "createdBy": asset.created_by,
        "workflowId": asset.workflow_id,
        "type": asset.type.value,
        "params": asset.params,
        "status": asset.status.value,
        "url": asset.url,
        "filename": asset.filename,
        "thumbnailUrl": asset.thumbnail_url,
        "durationSeconds": asset.duration_seconds,
        "error": asset.error,
        "createdAt": _iso(asset.created_at),
        "completedAt": _iso(asset.completed_at),
    }


def download_view(download: AssetDownload) -> dict[str, Any]:
    return {"url": download.url, "filename": download.filename, "status": download.status.value}


def campaign_view(campaign: Campaign) -> dict[str, Any]:
    return {
        "id": campaign.id,
        "tenantId": campaign.tenant_id,
        "createdBy": campaign.created_by,
        "briefingId": campaign.briefing_id,
        "name": campaign.name,
        "platforms": campaign.platforms,
        "status": campaign.status.value,
        "createdAt": _iso(campaign.created_at),
    }
