from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session, get_task_runner
from zingmedia.schemas.content import GenerateImageRequest, GenerateVideoRequest
from zingmedia.schemas.views import asset_view
from zingmedia.services import assets
from zingmedia.services.tasks import DeferredTaskRunner

router = APIRouter(prefix="/creatives", tags=["creatives"])


@router.post("/generate-image", status_code=status.HTTP_201_CREATED)
def generate_image(
    payload: GenerateImageRequest,
    identity: Identity = Depends(require_permission(Permission.GENERATE_CREATIVES)),
    session: Session = Depends(get_session),
) -> dict:
    asset = assets.generate_image(
        session,
        identity,
        workflow_id=payload.workflowId,
        platform=payload.platform,
        prompt=payload.prompt,
    )
    return asset_view(asset)


@router.post("/generate-video", status_code=status.HTTP_202_ACCEPTED)
def generate_video(
    payload: GenerateVideoRequest,
    identity: Identity = Depends(require_permission(Permission.GENERATE_CREATIVES)),
    session: Session = Depends(get_session),
    runner: DeferredTaskRunner = Depends(get_task_runner),
) -> dict:
    asset = assets.generate_video(
        session,
        identity,
        runner,
        workflow_id=payload.workflowId,
        script=payload.script,
        avatar_type=payload.avatarType,
    )
    return asset_view(asset)
