"""Content workflow state machine.

    generation -> adjustments | approval
    adjustments -> approval
    approval -> adjustments | ready_for_download
    ready_for_download (terminal)

The table is enforced unless ``WORKFLOW_ENFORCE_TRANSITIONS`` is disabled, in
which case any target state is accepted. Every accepted transition appends
one history event; history is never rewritten.

Moving to ready_for_download is an approval and needs approve_content on
every path.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from zingmedia.auth.rbac import Identity, Permission, authorize
from zingmedia.config import settings
from zingmedia.db.enums import WorkflowStateEnum
from zingmedia.db.models import Workflow, WorkflowComment, WorkflowEvent
from zingmedia.db.repositories.workflows import WorkflowsRepository
from zingmedia.errors import CommentNotFound, Forbidden, InvalidTransition

logger = logging.getLogger(__name__)

State = WorkflowStateEnum

TRANSITIONS: dict[WorkflowStateEnum, frozenset[WorkflowStateEnum]] = {
    State.generation: frozenset({State.adjustments, State.approval}),
    State.adjustments: frozenset({State.approval}),
    State.approval: frozenset({State.adjustments, State.ready_for_download}),
    State.ready_for_download: frozenset(),
}


def allowed_transitions(state: WorkflowStateEnum, enforce: bool | None = None) -> list[WorkflowStateEnum]:
    if enforce is None:
        enforce = settings.WORKFLOW_ENFORCE_TRANSITIONS
    if not enforce:
        return list(WorkflowStateEnum)
    return [target for target in WorkflowStateEnum if target in TRANSITIONS[state]]


def validate_transition(current: WorkflowStateEnum, target: WorkflowStateEnum, enforce: bool | None = None) -> None:
    if target not in allowed_transitions(current, enforce):
        raise InvalidTransition(f"Cannot move workflow from {current.value} to {target.value}")


@dataclass
class WorkflowDetail:
    workflow: Workflow
    history: list[WorkflowEvent]


def transition(
    session: Session,
    identity: Identity,
    workflow_id: str,
    new_state: WorkflowStateEnum,
    comment: str | None = None,
) -> WorkflowDetail:
    if new_state == State.ready_for_download:
        authorize(identity, Permission.APPROVE_CONTENT)
    repo = WorkflowsRepository(session)
    workflow = repo.get_for_tenant(identity.tenant_id, workflow_id)
    previous = workflow.state
    validate_transition(previous, new_state)

    repo.append_event(workflow, new_state, identity.user_id, comment, expected_state=previous)
    logger.info(
        "Workflow transitioned",
        extra={
            "workflow_id": workflow.id,
            "tenant_id": identity.tenant_id,
            "from_state": previous.value,
            "to_state": new_state.value,
            "actor_id": identity.user_id,
        },
    )
    return WorkflowDetail(workflow=workflow, history=repo.list_events(workflow.id))


def approve(session: Session, identity: Identity, workflow_id: str, comment: str | None = None) -> WorkflowDetail:
    return transition(session, identity, workflow_id, State.ready_for_download, comment or "Approved")


def request_changes(
    session: Session, identity: Identity, workflow_id: str, comment: str | None = None
) -> WorkflowDetail:
    return transition(session, identity, workflow_id, State.adjustments, comment or "Changes requested")


def get_workflow(session: Session, identity: Identity, workflow_id: str) -> WorkflowDetail:
    repo = WorkflowsRepository(session)
    workflow = repo.get_for_tenant(identity.tenant_id, workflow_id)
    return WorkflowDetail(workflow=workflow, history=repo.list_events(workflow.id))


def list_workflows(
    session: Session, identity: Identity, state: WorkflowStateEnum | None = None
) -> list[WorkflowDetail]:
    repo = WorkflowsRepository(session)
    return [
        WorkflowDetail(workflow=workflow, history=repo.list_events(workflow.id))
        for workflow in repo.list(identity.tenant_id, state=state)
    ]


def add_comment(
    session: Session,
    identity: Identity,
    workflow_id: str,
    content: str,
    parent_id: str | None = None,
) -> WorkflowComment:
    # Authors are the people who can move the workflow or ask for changes on it.
    if not (identity.has(Permission.MANAGE_WORKFLOW) or identity.has(Permission.REQUEST_ADJUSTMENTS)):
        raise Forbidden("Missing permission: manage_workflow or request_adjustments")
    repo = WorkflowsRepository(session)
    workflow = repo.get_for_tenant(identity.tenant_id, workflow_id)
    if parent_id and repo.find_comment(workflow.id, parent_id) is None:
        raise CommentNotFound()

    comment = repo.add_comment(workflow, author_id=identity.user_id, content=content.strip(), parent_id=parent_id)
    logger.info(
        "Workflow comment added",
        extra={
            "workflow_id": workflow.id,
            "comment_id": comment.id,
            "tenant_id": identity.tenant_id,
            "state": workflow.state.value,
        },
    )
    return comment


def list_comments(session: Session, identity: Identity, workflow_id: str) -> list[WorkflowComment]:
    repo = WorkflowsRepository(session)
    workflow = repo.get_for_tenant(identity.tenant_id, workflow_id)
    return repo.list_comments(workflow.id)
