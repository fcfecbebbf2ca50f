import pytest
from sqlalchemy import func, select

from conftest import SOCIAL_BRIEFING
from zingmedia.config import settings
from zingmedia.db.base import SessionLocal
from zingmedia.db.models import DeferredTask, GenerationSession, Workflow
from zingmedia.domain.catalog import AGENT_SPECIALISTS, practice_for
from zingmedia.services import briefings, generation
from zingmedia.services.tasks import DeferredTaskRunner


def _start(api_client, headers, briefing_id, **overrides):
    payload = {"briefingId": briefing_id, "subject": "Cold brew season", "numAgents": 3, "numRounds": 2}
    payload.update(overrides)
    return api_client.post("/content/generate-with-agents", headers=headers, json=payload)


def test_build_roster_caps_at_available_specialists():
    assert len(generation.build_roster(3)) == 3
    assert len(generation.build_roster(10)) == len(AGENT_SPECIALISTS)
    assert generation.build_roster(1)[0]["key"] == AGENT_SPECIALISTS[0].key


def test_resolve_platforms_falls_back_to_briefing_then_default():
    assert generation.resolve_platforms(["TikTok"], {"platforms": ["linkedin"]}) == ["tiktok"]
    assert generation.resolve_platforms(None, {"platforms": ["linkedin"]}) == ["linkedin"]
    assert generation.resolve_platforms(None, {}) == ["instagram"]


def test_synthesis_is_deterministic_and_respects_platform_rules():
    data = {"objective": "Grow", "audience": "runners", "tone": "bold", "keywords": ["trail", "speed"]}

    first = generation.synthesize_content("Trail shoes", data, ["tiktok"])
    second = generation.synthesize_content("Trail shoes", data, ["tiktok"])

    practice = practice_for("tiktok")
    assert first == second
    assert first["hook"] == practice.hooks[0]
    assert first["cta"] == practice.ctas[0]
    assert "runners" in first["text"]
    assert len(first["text"]) <= practice.max_chars
    assert practice.hashtags_min <= len(first["hashtags"]) <= practice.hashtags_max
    assert len(set(first["hashtags"])) == len(first["hashtags"])
    assert all(tag.startswith("#") for tag in first["hashtags"])


def test_debate_has_one_contribution_per_agent_per_round():
    roster = generation.build_roster(4)

    debate = generation.build_debate(roster, 3, "Trail shoes", {})

    assert [item["round"] for item in debate] == [1, 2, 3]
    assert all(len(item["contributions"]) == 4 for item in debate)


def test_session_completes_after_delay_with_exactly_one_workflow(
    api_client, login, create_briefing, task_runner, clock, db_session, identity_for
):
    headers = login("social@example.com")
    briefing = create_briefing(headers)

    started = _start(api_client, headers, briefing["id"])
    assert started.status_code == 202
    session_id = started.json()["id"]
    assert started.json()["status"] == "processing"
    assert started.json()["platforms"] == ["instagram", "tiktok"]
    assert len(started.json()["agents"]) == 3

    clock.advance(settings.GENERATION_DELAY_SECONDS - 1)
    assert task_runner.run_due() == []
    polled = api_client.get(f"/sessions/{session_id}", headers=headers)
    assert polled.json()["status"] == "processing"
    assert polled.json()["content"] is None

    clock.advance(1)
    assert len(task_runner.run_due()) == 1
    completed = api_client.get(f"/sessions/{session_id}", headers=headers).json()
    assert completed["status"] == "completed"
    assert completed["completedAt"] is not None
    assert completed["content"]["text"]
    assert len(completed["debate"]) == 2

    clock.advance(60)
    assert task_runner.run_due() == []
    workflows = db_session.scalars(select(Workflow).where(Workflow.session_id == session_id)).all()
    assert len(workflows) == 1
    assert workflows[0].tenant_id == "agency-demo"

    workflow = api_client.get(f"/workflows/{workflows[0].id}", headers=headers).json()
    assert workflow["state"] == "generation"
    assert workflow["content"]["text"] == completed["content"]["text"]
    assert len(workflow["history"]) == 1
    assert workflow["history"][0]["actorId"] == identity_for("social@example.com").user_id


def test_missing_briefing_is_required_and_creates_nothing(api_client, login, db_session):
    headers = login("social@example.com")

    resp = api_client.post(
        "/content/generate-with-agents",
        headers=headers,
        json={"briefingId": None, "subject": "Anything"},
    )

    assert resp.status_code == 422
    assert resp.json()["code"] == "briefing_required"
    assert db_session.scalar(select(func.count()).select_from(GenerationSession)) == 0
    assert db_session.scalar(select(func.count()).select_from(DeferredTask)) == 0


def test_foreign_briefing_is_not_found(api_client, login, create_briefing, db_session):
    agency = login("social@example.com")
    briefing = create_briefing(agency)
    admin = login("admin@zingmedia.com")

    resp = _start(api_client, admin, briefing["id"])

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Briefing not found"
    assert db_session.scalar(select(func.count()).select_from(GenerationSession)) == 0


def test_agent_and_round_bounds_are_validated(api_client, login, create_briefing):
    headers = login("social@example.com")
    briefing = create_briefing(headers)

    assert _start(api_client, headers, briefing["id"], numAgents=6).status_code == 422
    assert _start(api_client, headers, briefing["id"], numRounds=0).status_code == 422


def test_sessions_are_listed_per_tenant(api_client, login, create_briefing):
    agency = login("social@example.com")
    briefing = create_briefing(agency)
    started = _start(api_client, agency, briefing["id"]).json()

    agency_sessions = api_client.get("/sessions", headers=agency).json()
    client_sessions = api_client.get("/sessions", headers=login("viewer@client.com")).json()
    foreign = api_client.get(f"/sessions/{started['id']}", headers=login("viewer@client.com"))

    assert [item["id"] for item in agency_sessions] == [started["id"]]
    assert client_sessions == []
    assert foreign.status_code == 404


def test_cancelled_session_never_completes(api_client, login, create_briefing, task_runner, clock, db_session):
    headers = login("social@example.com")
    briefing = create_briefing(headers)
    session_id = _start(api_client, headers, briefing["id"]).json()["id"]

    cancelled = api_client.post(f"/sessions/{session_id}/cancel", headers=headers)
    clock.advance(settings.GENERATION_DELAY_SECONDS * 2)
    fired = task_runner.run_due()
    again = api_client.post(f"/sessions/{session_id}/cancel", headers=headers)

    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert fired == []
    assert api_client.get(f"/sessions/{session_id}", headers=headers).json()["status"] == "cancelled"
    assert again.status_code == 409
    assert db_session.scalar(select(func.count()).select_from(Workflow)) == 0


def test_failed_completion_marks_session_failed(
    api_client, login, create_briefing, task_runner, clock, db_session, monkeypatch
):
    headers = login("social@example.com")
    briefing = create_briefing(headers)
    session_id = _start(api_client, headers, briefing["id"]).json()["id"]

    def _explode(*_args, **_kwargs):
        raise RuntimeError("synthesis exploded")

    monkeypatch.setattr(generation, "synthesize_content", _explode)
    clock.advance(settings.GENERATION_DELAY_SECONDS)
    task_runner.run_due()

    polled = api_client.get(f"/sessions/{session_id}", headers=headers).json()
    task = db_session.scalars(select(DeferredTask).where(DeferredTask.target_id == session_id)).one()
    assert polled["status"] == "failed"
    assert polled["error"] == "synthesis exploded"
    assert task.status.value == "failed"
    assert db_session.scalar(select(func.count()).select_from(Workflow)) == 0


def test_failed_scheduling_leaves_no_session_behind(db_session, identity_for, clock):
    identity = identity_for("social@example.com")
    briefing = briefings.create_briefing(
        db_session,
        identity,
        template_id=SOCIAL_BRIEFING["templateId"],
        name=SOCIAL_BRIEFING["name"],
        data=SOCIAL_BRIEFING["data"],
    )
    # No handlers registered, so scheduling fails after the session row was flushed.
    runner = DeferredTaskRunner(SessionLocal, use_timers=False, clock=clock)

    with pytest.raises(ValueError):
        generation.start_generation(
            db_session,
            identity,
            runner,
            briefing_id=briefing.id,
            subject="Cold brew season",
            num_agents=3,
            num_rounds=2,
        )
    db_session.rollback()

    assert db_session.scalar(select(func.count()).select_from(GenerationSession)) == 0
    assert db_session.scalar(select(func.count()).select_from(DeferredTask)) == 0


def test_blank_subject_is_rejected(api_client, login, create_briefing, db_session):
    headers = login("social@example.com")
    briefing = create_briefing(headers)

    resp = _start(api_client, headers, briefing["id"], subject="   ")
    trimmed = _start(api_client, headers, briefing["id"], subject="  Cold brew  ")

    assert resp.status_code == 422
    assert trimmed.status_code == 202
    assert trimmed.json()["subject"] == "Cold brew"
    assert db_session.scalar(select(func.count()).select_from(GenerationSession)) == 1
