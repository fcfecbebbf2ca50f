from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from zingmedia.auth.rbac import Identity
from zingmedia.db.enums import BriefingStatusEnum
from zingmedia.db.models import Briefing
from zingmedia.db.repositories.briefings import BriefingsRepository
from zingmedia.domain.catalog import BRIEFING_TEMPLATES, SUPPORTED_PLATFORMS, BriefingTemplate, get_template
from zingmedia.errors import InvalidBriefing, TemplateNotFound

logger = logging.getLogger(__name__)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def _normalize_data(template: BriefingTemplate, data: dict[str, Any]) -> dict[str, Any]:
    normalized = dict(data)
    for item in template.fields:
        value = normalized.get(item.name)
        if item.multiple and isinstance(value, str):
            normalized[item.name] = [part.strip() for part in value.split(",") if part.strip()]
    platforms = normalized.get("platforms")
    if isinstance(platforms, list):
        normalized["platforms"] = [str(platform).strip().lower() for platform in platforms if str(platform).strip()]
    return normalized


def validate_briefing_data(template: BriefingTemplate, data: dict[str, Any]) -> dict[str, Any]:
    normalized = _normalize_data(template, data)
    missing = [name for name in template.required_fields if _is_blank(normalized.get(name))]
    if missing:
        raise InvalidBriefing(f"Missing required fields: {', '.join(missing)}")
    unsupported = [p for p in normalized.get("platforms") or [] if p not in SUPPORTED_PLATFORMS]
    if unsupported:
        raise InvalidBriefing(f"Unsupported platforms: {', '.join(unsupported)}")
    return normalized


def list_templates() -> list[BriefingTemplate]:
    return list(BRIEFING_TEMPLATES.values())


def create_briefing(
    session: Session,
    identity: Identity,
    *,
    template_id: str,
    name: str,
    data: dict[str, Any],
) -> Briefing:
    template = get_template(template_id)
    if template is None:
        raise TemplateNotFound(f"Briefing template not found: {template_id}")
    normalized = validate_briefing_data(template, data)

    briefing = BriefingsRepository(session).create(
        identity.tenant_id,
        created_by=identity.user_id,
        template_id=template.id,
        name=name.strip(),
        data=normalized,
        status=BriefingStatusEnum.active,
    )
    logger.info(
        "Briefing created",
        extra={"briefing_id": briefing.id, "tenant_id": identity.tenant_id, "template_id": template.id},
    )
    return briefing


def list_briefings(session: Session, identity: Identity) -> list[Briefing]:
    return BriefingsRepository(session).list_for_tenant(identity.tenant_id)


def get_briefing(session: Session, identity: Identity, briefing_id: str) -> Briefing:
    return BriefingsRepository(session).get_for_tenant(identity.tenant_id, briefing_id)
