from collections.abc import Generator

from fastapi import Request

from zingmedia.db.base import SessionLocal
from zingmedia.services.tasks import DeferredTaskRunner


def get_session() -> Generator:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_task_runner(request: Request) -> DeferredTaskRunner:
    return request.app.state.task_runner
