from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session
from zingmedia.schemas.content import CampaignCreate
from zingmedia.schemas.views import campaign_view
from zingmedia.services import campaigns

router = APIRouter(prefix="/campaigns", tags=["campaigns"])


@router.get("")
def list_campaigns(
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> list:
    return [campaign_view(campaign) for campaign in campaigns.list_campaigns(session, identity)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_campaign(
    payload: CampaignCreate,
    identity: Identity = Depends(require_permission(Permission.MANAGE_CAMPAIGNS)),
    session: Session = Depends(get_session),
) -> dict:
    campaign = campaigns.create_campaign(
        session,
        identity,
        name=payload.name,
        briefing_id=payload.briefingId,
        platforms=payload.platforms,
    )
    return campaign_view(campaign)


@router.get("/{campaign_id}")
def get_campaign(
    campaign_id: str,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> dict:
    return campaign_view(campaigns.get_campaign(session, identity, campaign_id))
