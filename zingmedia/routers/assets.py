from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session
from zingmedia.db.enums import AssetTypeEnum
from zingmedia.schemas.views import asset_view, download_view
from zingmedia.services import assets

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("")
def list_assets(
    workflowId: str | None = None,
    type: AssetTypeEnum | None = None,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> list:
    return [asset_view(asset) for asset in assets.list_assets(session, identity, workflowId, type)]


@router.get("/{asset_id}")
def get_asset(
    asset_id: str,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> dict:
    return asset_view(assets.get_asset(session, identity, asset_id))


@router.get("/{asset_id}/download")
def download_asset(
    asset_id: str,
    identity: Identity = Depends(require_permission(Permission.DOWNLOAD_ASSETS)),
    session: Session = Depends(get_session),
) -> dict:
    return download_view(assets.download_asset(session, identity, asset_id))
