from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from zingmedia.auth.rbac import Identity
from zingmedia.config import settings
from zingmedia.db.enums import AssetStatusEnum, AssetTypeEnum, TaskKindEnum, TaskStatusEnum
from zingmedia.db.models import CreativeAsset, DeferredTask, new_id, utcnow
from zingmedia.db.repositories.assets import AssetsRepository
from zingmedia.db.repositories.workflows import WorkflowsRepository
from zingmedia.domain.catalog import DEFAULT_PLATFORM, SUPPORTED_PLATFORMS, practice_for
from zingmedia.services.tasks import DeferredTaskRunner

logger = logging.getLogger(__name__)

MIN_VIDEO_SECONDS = 15
MAX_VIDEO_SECONDS = 90
WORDS_PER_SECOND = 2.5

_ABORT_STATUS = {
    TaskStatusEnum.failed: AssetStatusEnum.failed,
    TaskStatusEnum.cancelled: AssetStatusEnum.cancelled,
}


@dataclass
class AssetDownload:
    url: str
    filename: str
    status: AssetStatusEnum


def _media_url(tenant_id: str, folder: str, filename: str) -> str:
    return f"{settings.MEDIA_BASE_URL}/{tenant_id}/{folder}/{filename}"


def estimate_video_duration(script: str) -> int:
    words = len(script.split())
    seconds = round(words / WORDS_PER_SECOND)
    return min(max(seconds, MIN_VIDEO_SECONDS), MAX_VIDEO_SECONDS)


def generate_image(
    session: Session,
    identity: Identity,
    *,
    workflow_id: str,
    platform: str | None,
    prompt: str,
) -> CreativeAsset:
    workflow = WorkflowsRepository(session).get_for_tenant(identity.tenant_id, workflow_id)
    workflow_platforms = (workflow.content or {}).get("platforms") or [DEFAULT_PLATFORM]
    resolved_platform = (platform or workflow_platforms[0]).lower()
    if resolved_platform not in SUPPORTED_PLATFORMS:
        resolved_platform = DEFAULT_PLATFORM

    asset_id = new_id()
    filename = f"{resolved_platform}-{asset_id}.png"
    asset = AssetsRepository(session).create(
        identity.tenant_id,
        id=asset_id,
        created_by=identity.user_id,
        workflow_id=workflow.id,
        type=AssetTypeEnum.image,
        params={
            "platform": resolved_platform,
            "prompt": prompt.strip(),
            "aspectRatio": practice_for(resolved_platform).aspect_ratio,
        },
        status=AssetStatusEnum.generated,
        url=_media_url(identity.tenant_id, "images", filename),
        filename=filename,
        completed_at=utcnow(),
    )
    logger.info(
        "Image asset generated",
        extra={"asset_id": asset.id, "workflow_id": workflow.id, "tenant_id": identity.tenant_id},
    )
    return asset


def generate_video(
    session: Session,
    identity: Identity,
    runner: DeferredTaskRunner,
    *,
    workflow_id: str,
    script: str,
    avatar_type: str,
) -> CreativeAsset:
    workflow = WorkflowsRepository(session).get_for_tenant(identity.tenant_id, workflow_id)

    asset_id = new_id()
    filename = f"video-{asset_id}.mp4"
    asset = AssetsRepository(session).create(
        identity.tenant_id,
        commit=False,
        id=asset_id,
        created_by=identity.user_id,
        workflow_id=workflow.id,
        type=AssetTypeEnum.video,
        params={"script": script.strip(), "avatarType": avatar_type},
        status=AssetStatusEnum.processing,
        url=_media_url(identity.tenant_id, "videos", filename),
        filename=filename,
    )
    runner.schedule(
        session,
        tenant_id=identity.tenant_id,
        kind=TaskKindEnum.video_render,
        target_id=asset.id,
        delay_seconds=settings.VIDEO_RENDER_DELAY_SECONDS,
    )
    logger.info(
        "Video render started",
        extra={"asset_id": asset.id, "workflow_id": workflow.id, "tenant_id": identity.tenant_id},
    )
    return asset


def complete_video(session: Session, task: DeferredTask) -> None:
    asset = AssetsRepository(session).find_for_tenant(task.tenant_id, task.target_id)
    if asset is None or asset.status != AssetStatusEnum.processing:
        return
    asset.duration_seconds = estimate_video_duration((asset.params or {}).get("script", ""))
    asset.thumbnail_url = _media_url(task.tenant_id, "videos", f"video-{asset.id}.jpg")
    asset.status = AssetStatusEnum.completed
    asset.completed_at = utcnow()
    session.commit()
    logger.info("Video render completed", extra={"asset_id": asset.id, "tenant_id": task.tenant_id})


def abort_video(session: Session, task: DeferredTask, status: TaskStatusEnum, reason: str) -> None:
    asset = AssetsRepository(session).find_for_tenant(task.tenant_id, task.target_id)
    if asset is None or asset.status != AssetStatusEnum.processing:
        return
    asset.status = _ABORT_STATUS.get(status, AssetStatusEnum.failed)
    asset.error = reason
    session.commit()


def register_task_handlers(runner: DeferredTaskRunner) -> None:
    runner.register(TaskKindEnum.video_render, complete_video, abort_video)


def download_asset(session: Session, identity: Identity, asset_id: str) -> AssetDownload:
    asset = AssetsRepository(session).get_for_tenant(identity.tenant_id, asset_id)
    # Never waits for a pending render; the reserved URL is returned as-is.
    return AssetDownload(url=asset.url, filename=asset.filename, status=asset.status)


def get_asset(session: Session, identity: Identity, asset_id: str) -> CreativeAsset:
    return AssetsRepository(session).get_for_tenant(identity.tenant_id, asset_id)


def list_assets(
    session: Session,
    identity: Identity,
    workflow_id: str | None = None,
    asset_type: AssetTypeEnum | None = None,
) -> list[CreativeAsset]:
    return AssetsRepository(session).list(identity.tenant_id, workflow_id=workflow_id, asset_type=asset_type)
