import pytest
from sqlalchemy import func, select

from zingmedia.config import settings
from zingmedia.db.base import SessionLocal
from zingmedia.db.models import CreativeAsset, DeferredTask
from zingmedia.services import assets as assets_service
from zingmedia.services.assets import MAX_VIDEO_SECONDS, MIN_VIDEO_SECONDS, estimate_video_duration
from zingmedia.services.tasks import DeferredTaskRunner


def _generate_video(api_client, headers, workflow_id, script="Meet our new cold brew. " * 10):
    return api_client.post(
        "/creatives/generate-video",
        headers=headers,
        json={"workflowId": workflow_id, "script": script, "avatarType": "professional"},
    )


def test_video_duration_is_clamped():
    assert estimate_video_duration("short") == MIN_VIDEO_SECONDS
    assert estimate_video_duration("word " * 1000) == MAX_VIDEO_SECONDS
    assert estimate_video_duration("word " * 100) == 40


def test_generate_image_is_immediately_available(api_client, login, make_workflow):
    headers = login("social@example.com")
    workflow = make_workflow()

    resp = api_client.post(
        "/creatives/generate-image",
        headers=headers,
        json={"workflowId": workflow["id"], "platform": "tiktok", "prompt": "Iced coffee on a beach"},
    )

    assert resp.status_code == 201
    asset = resp.json()
    assert asset["type"] == "image"
    assert asset["status"] == "generated"
    assert asset["params"]["aspectRatio"] == "9:16"
    assert asset["url"].startswith(f"{settings.MEDIA_BASE_URL}/agency-demo/images/")
    assert asset["filename"].endswith(".png")
    assert asset["workflowId"] == workflow["id"]


def test_image_platform_defaults_to_workflow_platform(api_client, login, make_workflow):
    headers = login("social@example.com")
    workflow = make_workflow()

    resp = api_client.post(
        "/creatives/generate-image",
        headers=headers,
        json={"workflowId": workflow["id"], "prompt": "Latte art"},
    )

    assert resp.json()["params"]["platform"] == workflow["content"]["platforms"][0]


def test_two_videos_complete_independently(api_client, login, make_workflow, task_runner, clock):
    headers = login("social@example.com")
    workflow = make_workflow()

    first = _generate_video(api_client, headers, workflow["id"]).json()
    clock.advance(settings.VIDEO_RENDER_DELAY_SECONDS / 2)
    second = _generate_video(api_client, headers, workflow["id"]).json()

    assert first["status"] == second["status"] == "processing"
    assert first["url"] != second["url"]

    clock.advance(settings.VIDEO_RENDER_DELAY_SECONDS / 2)
    assert len(task_runner.run_due()) == 1
    first_now = api_client.get(f"/assets/{first['id']}", headers=headers).json()
    second_now = api_client.get(f"/assets/{second['id']}", headers=headers).json()
    assert first_now["status"] == "completed"
    assert second_now["status"] == "processing"

    clock.advance(settings.VIDEO_RENDER_DELAY_SECONDS / 2)
    assert len(task_runner.run_due()) == 1
    second_now = api_client.get(f"/assets/{second['id']}", headers=headers).json()
    assert second_now["status"] == "completed"
    assert first_now["url"] != second_now["url"]
    assert first_now["thumbnailUrl"] != second_now["thumbnailUrl"]
    assert MIN_VIDEO_SECONDS <= second_now["durationSeconds"] <= MAX_VIDEO_SECONDS


def test_download_does_not_wait_for_render(api_client, login, make_workflow, task_runner, clock):
    headers = login("social@example.com")
    workflow = make_workflow()
    video = _generate_video(api_client, headers, workflow["id"]).json()

    pending = api_client.get(f"/assets/{video['id']}/download", headers=headers)
    clock.advance(settings.VIDEO_RENDER_DELAY_SECONDS)
    task_runner.run_due()
    ready = api_client.get(f"/assets/{video['id']}/download", headers=headers)

    assert pending.status_code == 200
    assert pending.json() == {"url": video["url"], "filename": video["filename"], "status": "processing"}
    assert ready.json()["status"] == "completed"
    assert ready.json()["url"] == video["url"]


def test_assets_are_tenant_scoped(api_client, login, make_workflow):
    headers = login("social@example.com")
    workflow = make_workflow()
    image = api_client.post(
        "/creatives/generate-image",
        headers=headers,
        json={"workflowId": workflow["id"], "prompt": "Latte art"},
    ).json()
    admin = login("admin@zingmedia.com")

    assert api_client.get("/assets", headers=admin).json() == []
    assert api_client.get(f"/assets/{image['id']}/download", headers=admin).status_code == 404
    foreign_workflow = api_client.post(
        "/creatives/generate-video",
        headers=admin,
        json={"workflowId": workflow["id"], "script": "hi"},
    )
    assert foreign_workflow.status_code == 404
    assert foreign_workflow.json()["detail"] == "Workflow not found"


def test_assets_can_be_filtered(api_client, login, make_workflow):
    headers = login("social@example.com")
    first = make_workflow()
    second = make_workflow()
    api_client.post("/creatives/generate-image", headers=headers, json={"workflowId": first["id"], "prompt": "a"})
    _generate_video(api_client, headers, second["id"])

    by_workflow = api_client.get("/assets", headers=headers, params={"workflowId": first["id"]}).json()
    videos = api_client.get("/assets", headers=headers, params={"type": "video"}).json()

    assert [item["type"] for item in by_workflow] == ["image"]
    assert [item["workflowId"] for item in videos] == [second["id"]]


def test_viewer_cannot_generate_creatives(api_client, login):
    headers = login("viewer@client.com")

    resp = api_client.post("/creatives/generate-image", headers=headers, json={"workflowId": "x", "prompt": "y"})

    assert resp.status_code == 403


def test_failed_render_scheduling_leaves_no_asset_behind(make_workflow, db_session, identity_for, clock):
    workflow = make_workflow()
    pending_before = db_session.scalar(select(func.count()).select_from(DeferredTask))
    runner = DeferredTaskRunner(SessionLocal, use_timers=False, clock=clock)

    with pytest.raises(ValueError):
        assets_service.generate_video(
            db_session,
            identity_for("social@example.com"),
            runner,
            workflow_id=workflow["id"],
            script="Meet our new cold brew.",
            avatar_type="professional",
        )
    db_session.rollback()

    assert db_session.scalar(select(func.count()).select_from(CreativeAsset)) == 0
    assert db_session.scalar(select(func.count()).select_from(DeferredTask)) == pending_before


def test_blank_script_is_rejected(api_client, login, make_workflow):
    headers = login("social@example.com")
    workflow = make_workflow()

    resp = _generate_video(api_client, headers, workflow["id"], script="   ")

    assert resp.status_code == 422
