from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from zingmedia.auth.rbac import Identity
from zingmedia.db.enums import CampaignStatusEnum
from zingmedia.db.models import Campaign
from zingmedia.db.repositories.briefings import BriefingsRepository
from zingmedia.db.repositories.campaigns import CampaignsRepository
from zingmedia.domain.catalog import SUPPORTED_PLATFORMS
from zingmedia.errors import InvalidBriefing

logger = logging.getLogger(__name__)


def create_campaign(
    session: Session,
    identity: Identity,
    *,
    name: str,
    briefing_id: str,
    platforms: list[str] | None = None,
) -> Campaign:
    briefing = BriefingsRepository(session).get_for_tenant(identity.tenant_id, briefing_id)
    if platforms:
        resolved = [platform.strip().lower() for platform in platforms if platform.strip()]
    else:
        resolved = list((briefing.data or {}).get("platforms") or [])
    unsupported = [platform for platform in resolved if platform not in SUPPORTED_PLATFORMS]
    if unsupported:
        raise InvalidBriefing(f"Unsupported platforms: {', '.join(unsupported)}")

    campaign = CampaignsRepository(session).create(
        identity.tenant_id,
        created_by=identity.user_id,
        briefing_id=briefing.id,
        name=name.strip(),
        platforms=list(dict.fromkeys(resolved)),
        status=CampaignStatusEnum.draft,
    )
    logger.info(
        "Campaign created",
        extra={"campaign_id": campaign.id, "briefing_id": briefing.id, "tenant_id": identity.tenant_id},
    )
    return campaign


def list_campaigns(session: Session, identity: Identity) -> list[Campaign]:
    return CampaignsRepository(session).list_for_tenant(identity.tenant_id)


def get_campaign(session: Session, identity: Identity, campaign_id: str) -> Campaign:
    return CampaignsRepository(session).get_for_tenant(identity.tenant_id, campaign_id)
