from datetime import datetime
from typing import List, Optional

from sqlalchemy import select

from zingmedia.db.enums import TaskStatusEnum
from zingmedia.db.models import DeferredTask
from zingmedia.db.repositories.base import TenantScopedRepository
from zingmedia.errors import NotFound


class DeferredTasksRepository(TenantScopedRepository[DeferredTask]):
    """Deferred tasks are looked up by id from worker threads, outside any request tenant."""

    model = DeferredTask
    not_found_error = NotFound

    def get(self, task_id: str) -> Optional[DeferredTask]:
        stmt = select(DeferredTask).where(DeferredTask.id == task_id)
        return self.session.scalars(stmt).first()

    def get_pending_for_target(self, target_id: str) -> Optional[DeferredTask]:
        stmt = select(DeferredTask).where(
            DeferredTask.target_id == target_id,
            DeferredTask.status == TaskStatusEnum.pending,
        )
        return self.session.scalars(stmt).first()

    def list_pending(self) -> List[DeferredTask]:
        stmt = (
            select(DeferredTask)
            .where(DeferredTask.status == TaskStatusEnum.pending)
            .order_by(DeferredTask.due_at.asc(), DeferredTask.pk.asc())
        )
        return list(self.session.scalars(stmt).all())

    def finish(
        self,
        task: DeferredTask,
        status: TaskStatusEnum,
        finished_at: datetime,
        error: str | None = None,
    ) -> DeferredTask:
        task.status = status
        task.finished_at = finished_at
        task.error = error
        self.session.commit()
        self.session.refresh(task)
        return task
