from typing import Optional

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session
from zingmedia.schemas.content import ApprovalRequest
from zingmedia.schemas.views import workflow_view
from zingmedia.services import workflows

router = APIRouter(prefix="/approval", tags=["approval"])


@router.post("/{workflow_id}/approve")
def approve(
    workflow_id: str,
    payload: Optional[ApprovalRequest] = Body(default=None),
    identity: Identity = Depends(require_permission(Permission.APPROVE_CONTENT)),
    session: Session = Depends(get_session),
) -> dict:
    comment = payload.comment if payload else None
    return workflow_view(workflows.approve(session, identity, workflow_id, comment))


@router.post("/{workflow_id}/request-changes")
def request_changes(
    workflow_id: str,
    payload: Optional[ApprovalRequest] = Body(default=None),
    identity: Identity = Depends(require_permission(Permission.REQUEST_ADJUSTMENTS)),
    session: Session = Depends(get_session),
) -> dict:
    comment = payload.comment if payload else None
    return workflow_view(workflows.request_changes(session, identity, workflow_id, comment))
