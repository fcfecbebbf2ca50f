"""One-shot deferred work with a recorded outcome.

Generation sessions and video renders finish some time after the request that
created them. Each such completion is persisted as a ``DeferredTask`` row and
fired once, either by an APScheduler date job or by ``run_due``. The row
records whether the work completed, failed or was cancelled, so a target can
never be left ``processing`` without a task that will eventually resolve it.

The task rows are the durable record. Scheduler jobs live in memory and are
rebuilt from pending rows by ``resume_pending`` on startup.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from apscheduler.events import EVENT_JOB_ERROR, JobExecutionEvent
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from zingmedia.db.base import SessionLocal
from zingmedia.db.enums import TaskKindEnum, TaskStatusEnum
from zingmedia.db.models import DeferredTask, utcnow
from zingmedia.db.repositories.tasks import DeferredTasksRepository

logger = logging.getLogger(__name__)

TaskHandler = Callable[[Session, DeferredTask], None]
AbortHandler = Callable[[Session, DeferredTask, TaskStatusEnum, str], None]


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def build_scheduler(max_workers: int = 4) -> BackgroundScheduler:
    scheduler = BackgroundScheduler(
        executors={"default": ThreadPoolExecutor(max_workers=max_workers)},
        job_defaults={
            "coalesce": True,
            "max_instances": 1,
            # A task that became due while the process was down still has to resolve.
            "misfire_grace_time": None,
        },
        timezone="UTC",
    )
    scheduler.add_listener(_on_job_error, EVENT_JOB_ERROR)
    return scheduler


def _on_job_error(event: JobExecutionEvent) -> None:
    logger.error(
        "Deferred task job raised",
        extra={"job_id": event.job_id, "error": str(event.exception)},
    )


@dataclass(frozen=True)
class _Registration:
    run: TaskHandler
    abort: AbortHandler


class DeferredTaskRunner:
    def __init__(
        self,
        session_factory: Callable[[], Session] = SessionLocal,
        *,
        use_timers: bool = True,
        clock: Callable[[], datetime] = utcnow,
        scheduler: BackgroundScheduler | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.use_timers = use_timers
        self.clock = clock
        self.scheduler = scheduler or (build_scheduler() if use_timers else None)
        self._handlers: dict[TaskKindEnum, _Registration] = {}
        # Serializes task execution; handlers read-modify-write shared rows.
        self._lock = threading.Lock()

    def register(self, kind: TaskKindEnum, run: TaskHandler, abort: AbortHandler) -> None:
        self._handlers[kind] = _Registration(run=run, abort=abort)

    def start(self) -> None:
        if self.scheduler is not None and not self.scheduler.running:
            self.scheduler.start()
            logger.info("Deferred task scheduler started")

    def schedule(
        self,
        session: Session,
        *,
        tenant_id: str,
        kind: TaskKindEnum,
        target_id: str,
        delay_seconds: float,
    ) -> DeferredTask:
        """Persist a pending task and commit it together with whatever the caller flushed."""
        if kind not in self._handlers:
            raise ValueError(f"No handler registered for task kind {kind.value}")
        delay = max(float(delay_seconds), 0.0)
        task = DeferredTasksRepository(session).create(
            tenant_id,
            kind=kind,
            target_id=target_id,
            status=TaskStatusEnum.pending,
            due_at=self.clock() + timedelta(seconds=delay),
        )
        logger.debug(
            "Deferred task scheduled",
            extra={"task_id": task.id, "kind": kind.value, "target_id": target_id, "delay_seconds": delay},
        )
        self._arm(task.id, task.due_at)
        return task

    def _arm(self, task_id: str, due_at: datetime) -> None:
        if self.scheduler is None:
            return
        self.scheduler.add_job(
            self.fire,
            trigger="date",
            run_date=as_utc(due_at),
            args=[task_id],
            id=task_id,
            replace_existing=True,
        )

    def _disarm(self, task_id: str) -> None:
        if self.scheduler is None:
            return
        try:
            self.scheduler.remove_job(task_id)
        except JobLookupError:
            # Already fired or never armed.
            pass

    def fire(self, task_id: str) -> TaskStatusEnum | None:
        """Run a pending task. Returns its final status, or None if it was not pending."""
        with self._lock:
            session = self._session_factory()
            try:
                return self._execute(session, task_id)
            finally:
                session.close()

    def _execute(self, session: Session, task_id: str) -> TaskStatusEnum | None:
        repo = DeferredTasksRepository(session)
        task = repo.get(task_id)
        if task is None or task.status != TaskStatusEnum.pending:
            return None

        registration = self._handlers.get(task.kind)
        if registration is None:
            logger.error("No handler for deferred task", extra={"task_id": task_id, "kind": task.kind.value})
            repo.finish(task, TaskStatusEnum.failed, self.clock(), "No handler registered")
            return TaskStatusEnum.failed

        try:
            registration.run(session, task)
        except Exception as exc:
            session.rollback()
            logger.exception(
                "Deferred task failed",
                extra={"task_id": task_id, "kind": task.kind.value, "target_id": task.target_id},
            )
            task = repo.get(task_id)
            self._abort(session, registration, task, TaskStatusEnum.failed, str(exc) or exc.__class__.__name__)
            return TaskStatusEnum.failed

        repo.finish(task, TaskStatusEnum.completed, self.clock())
        logger.info(
            "Deferred task completed",
            extra={"task_id": task_id, "kind": task.kind.value, "target_id": task.target_id},
        )
        return TaskStatusEnum.completed

    def _abort(
        self,
        session: Session,
        registration: _Registration,
        task: DeferredTask,
        status: TaskStatusEnum,
        reason: str,
    ) -> None:
        try:
            registration.abort(session, task, status, reason)
        except Exception:
            session.rollback()
            logger.exception("Deferred task abort handler failed", extra={"task_id": task.id})
        DeferredTasksRepository(session).finish(task, status, self.clock(), reason)

    def cancel(self, session: Session, task_id: str) -> bool:
        """Cancel a pending task. Returns False when the task already resolved."""
        self._disarm(task_id)
        with self._lock:
            task = DeferredTasksRepository(session).get(task_id)
            if task is None or task.status != TaskStatusEnum.pending:
                return False
            registration = self._handlers[task.kind]
            self._abort(session, registration, task, TaskStatusEnum.cancelled, "Cancelled")
        logger.info("Deferred task cancelled", extra={"task_id": task_id})
        return True

    def due_task_ids(self, now: datetime | None = None) -> list[str]:
        moment = as_utc(now or self.clock())
        session = self._session_factory()
        try:
            pending = DeferredTasksRepository(session).list_pending()
            return [task.id for task in pending if as_utc(task.due_at) <= moment]
        finally:
            session.close()

    def run_due(self, now: datetime | None = None) -> list[str]:
        """Fire every pending task whose due time has passed. Returns the ids that resolved."""
        fired: list[str] = []
        for task_id in self.due_task_ids(now):
            if self.fire(task_id) is not None:
                fired.append(task_id)
        return fired

    def resume_pending(self) -> int:
        """Re-add scheduler jobs for tasks persisted before a restart."""
        session = self._session_factory()
        try:
            pending = DeferredTasksRepository(session).list_pending()
            for task in pending:
                self._arm(task.id, task.due_at)
        finally:
            session.close()
        if pending:
            logger.info("Resumed pending deferred tasks", extra={"count": len(pending)})
        return len(pending)

    def shutdown(self, wait: bool = False) -> None:
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info("Deferred task scheduler stopped")
