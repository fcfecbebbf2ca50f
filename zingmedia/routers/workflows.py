from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session
from zingmedia.db.enums import WorkflowStateEnum
from zingmedia.schemas.content import CommentCreate, TransitionRequest
from zingmedia.schemas.views import comment_view, workflow_view
from zingmedia.services import workflows

router = APIRouter(prefix="/workflows", tags=["workflows"])


@router.get("")
def list_workflows(
    state: WorkflowStateEnum | None = None,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> list:
    return [workflow_view(detail) for detail in workflows.list_workflows(session, identity, state=state)]


@router.get("/{workflow_id}")
def get_workflow(
    workflow_id: str,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> dict:
    return workflow_view(workflows.get_workflow(session, identity, workflow_id))


@router.post("/{workflow_id}/transition")
def transition_workflow(
    workflow_id: str,
    payload: TransitionRequest,
    identity: Identity = Depends(require_permission(Permission.MANAGE_WORKFLOW)),
    session: Session = Depends(get_session),
) -> dict:
    detail = workflows.transition(session, identity, workflow_id, payload.newState, payload.comment)
    return workflow_view(detail)


@router.get("/{workflow_id}/comments")
def list_comments(
    workflow_id: str,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> list:
    return [comment_view(comment) for comment in workflows.list_comments(session, identity, workflow_id)]


@router.post("/{workflow_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    workflow_id: str,
    payload: CommentCreate,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> dict:
    comment = workflows.add_comment(session, identity, workflow_id, payload.content, payload.parentId)
    return comment_view(comment)
