from typing import Any, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError

from zingmedia.db.enums import WorkflowStateEnum
from zingmedia.db.models import Workflow, WorkflowComment, WorkflowEvent, utcnow
from zingmedia.db.repositories.base import TenantScopedRepository
from zingmedia.errors import InvalidTransition, WorkflowNotFound

STALE_STATE_MESSAGE = "Workflow state changed while the transition was in progress; reload and retry"


class WorkflowsRepository(TenantScopedRepository[Workflow]):
    model = Workflow
    not_found_error = WorkflowNotFound

    def list(self, tenant_id: str, state: Optional[WorkflowStateEnum] = None) -> List[Workflow]:
        return self.list_for_tenant(tenant_id, state=state)

    def get_by_session(self, tenant_id: str, session_id: str) -> Optional[Workflow]:
        stmt = select(Workflow).where(Workflow.tenant_id == tenant_id, Workflow.session_id == session_id)
        return self.session.scalars(stmt).first()

    def create_with_event(
        self,
        tenant_id: str,
        *,
        session_id: str,
        briefing_id: str,
        content: dict[str, Any],
        actor_id: str,
        comment: str | None,
        commit: bool = True,
    ) -> Workflow:
        now = utcnow()
        workflow = Workflow(
            tenant_id=tenant_id,
            session_id=session_id,
            briefing_id=briefing_id,
            state=WorkflowStateEnum.generation,
            content=content,
            created_at=now,
            updated_at=now,
        )
        self.session.add(workflow)
        self.session.flush()
        self.session.add(
            WorkflowEvent(
                workflow_id=workflow.id,
                sequence=1,
                state=WorkflowStateEnum.generation,
                actor_id=actor_id,
                comment=comment,
                created_at=now,
            )
        )
        if commit:
            self.session.commit()
            self.session.refresh(workflow)
        return workflow

    def append_event(
        self,
        workflow: Workflow,
        state: WorkflowStateEnum,
        actor_id: str,
        comment: str | None,
        *,
        expected_state: WorkflowStateEnum,
    ) -> WorkflowEvent:
        """Move the workflow from ``expected_state`` to ``state`` and record it in one commit.

        The state write is conditional on ``expected_state`` so a transition
        validated against a stale read cannot land.
        """
        now = utcnow()
        result = self.session.execute(
            update(Workflow)
            .where(Workflow.id == workflow.id, Workflow.state == expected_state)
            .values(state=state, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.session.rollback()
            raise InvalidTransition(STALE_STATE_MESSAGE)

        last_sequence = self.session.scalar(
            select(func.max(WorkflowEvent.sequence)).where(WorkflowEvent.workflow_id == workflow.id)
        )
        event = WorkflowEvent(
            workflow_id=workflow.id,
            sequence=(last_sequence or 0) + 1,
            state=state,
            actor_id=actor_id,
            comment=comment,
            created_at=now,
        )
        self.session.add(event)
        try:
            self.session.commit()
        except IntegrityError:
            # Another writer took this sequence number.
            self.session.rollback()
            raise InvalidTransition(STALE_STATE_MESSAGE)
        self.session.refresh(workflow)
        self.session.refresh(event)
        return event

    def list_events(self, workflow_id: str) -> List[WorkflowEvent]:
        stmt = (
            select(WorkflowEvent)
            .where(WorkflowEvent.workflow_id == workflow_id)
            .order_by(WorkflowEvent.sequence.asc())
        )
        return list(self.session.scalars(stmt).all())

    def add_comment(
        self,
        workflow: Workflow,
        *,
        author_id: str,
        content: str,
        parent_id: str | None = None,
    ) -> WorkflowComment:
        comment = WorkflowComment(
            tenant_id=workflow.tenant_id,
            workflow_id=workflow.id,
            parent_id=parent_id,
            author_id=author_id,
            content=content,
            state=workflow.state,
        )
        return self.save(comment)

    def find_comment(self, workflow_id: str, comment_id: str) -> Optional[WorkflowComment]:
        stmt = select(WorkflowComment).where(
            WorkflowComment.workflow_id == workflow_id,
            WorkflowComment.id == comment_id,
        )
        return self.session.scalars(stmt).first()

    def list_comments(self, workflow_id: str) -> List[WorkflowComment]:
        stmt = (
            select(WorkflowComment)
            .where(WorkflowComment.workflow_id == workflow_id)
            .order_by(WorkflowComment.pk.asc())
        )
        return list(self.session.scalars(stmt).all())
