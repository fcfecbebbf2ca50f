import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT_DIR))

os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["DEFERRED_TASKS_USE_TIMERS"] = "false"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("SEED_DEMO_DATA", "true")
os.environ.setdefault("DEMO_PASSWORD", "password")
os.environ.setdefault("WORKFLOW_ENFORCE_TRANSITIONS", "true")

from fastapi.testclient import TestClient  # noqa: E402

from zingmedia.auth.rbac import Identity, permissions_for  # noqa: E402
from zingmedia.config import settings  # noqa: E402
from zingmedia.db import models  # noqa: E402,F401
from zingmedia.db.base import Base, SessionLocal, engine  # noqa: E402
from zingmedia.db.repositories.identity import UsersRepository  # noqa: E402
from zingmedia.main import create_app  # noqa: E402
from zingmedia.seed import seed_demo_data  # noqa: E402
from zingmedia.services import assets as assets_service  # noqa: E402
from zingmedia.services import generation as generation_service  # noqa: E402
from zingmedia.services.tasks import DeferredTaskRunner  # noqa: E402

CONTENT_MANAGER = "social@example.com"
AGENCY_ADMIN = "agency@example.com"
PLATFORM_ADMIN = "admin@zingmedia.com"
CLIENT_APPROVER = "approver@client.com"
CLIENT_VIEWER = "viewer@client.com"

SOCIAL_BRIEFING = {
    "templateId": "social-campaign",
    "name": "Summer launch",
    "data": {
        "objective": "Grow engagement",
        "audience": "young professionals",
        "tone": "playful",
        "platforms": ["instagram", "tiktok"],
        "keywords": ["summer", "coffee"],
    },
}


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as session:
        seed_demo_data(session)
    yield


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def task_runner(clock) -> DeferredTaskRunner:
    runner = DeferredTaskRunner(SessionLocal, use_timers=False, clock=clock)
    generation_service.register_task_handlers(runner)
    assets_service.register_task_handlers(runner)
    return runner


@pytest.fixture()
def api_client(task_runner):
    app = create_app(task_runner=task_runner)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def login(api_client):
    def _login(email: str, password: str | None = None) -> dict[str, str]:
        resp = api_client.post("/auth/login", json={"email": email, "password": password or settings.DEMO_PASSWORD})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login


@pytest.fixture()
def identity_for(db_session):
    def _identity_for(email: str) -> Identity:
        user = UsersRepository(db_session).get_by_email(email)
        assert user is not None
        return Identity(
            user_id=user.id,
            email=user.email,
            role=user.role,
            tenant_id=user.tenant_id,
            permissions=permissions_for(user.role),
        )

    return _identity_for


@pytest.fixture()
def create_briefing(api_client):
    def _create_briefing(headers: dict[str, str], payload: dict | None = None) -> dict:
        resp = api_client.post("/briefings", headers=headers, json=payload or SOCIAL_BRIEFING)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _create_briefing


@pytest.fixture()
def make_workflow(api_client, login, create_briefing, task_runner, clock):
    """Run a generation session to completion and return its workflow."""

    def _make_workflow(email: str = CONTENT_MANAGER) -> dict:
        headers = login(email)
        briefing = create_briefing(headers)
        started = api_client.post(
            "/content/generate-with-agents",
            headers=headers,
            json={"briefingId": briefing["id"], "subject": "Cold brew season", "numAgents": 3, "numRounds": 2},
        )
        assert started.status_code == 202, started.text
        clock.advance(settings.GENERATION_DELAY_SECONDS)
        task_runner.run_due()
        workflows = api_client.get("/workflows", headers=headers).json()
        matching = [item for item in workflows if item["sessionId"] == started.json()["id"]]
        assert len(matching) == 1
        return matching[0]

    return _make_workflow
