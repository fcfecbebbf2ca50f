from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session
from zingmedia.schemas.content import BriefingCreate
from zingmedia.schemas.views import briefing_view, template_view
from zingmedia.services import briefings

router = APIRouter(prefix="/briefings", tags=["briefings"])


@router.get("/templates")
def list_templates(
    _identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
) -> list:
    return [template_view(template) for template in briefings.list_templates()]


@router.get("")
def list_briefings(
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> list:
    return [briefing_view(briefing) for briefing in briefings.list_briefings(session, identity)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_briefing(
    payload: BriefingCreate,
    identity: Identity = Depends(require_permission(Permission.CREATE_BRIEFING)),
    session: Session = Depends(get_session),
) -> dict:
    briefing = briefings.create_briefing(
        session,
        identity,
        template_id=payload.templateId,
        name=payload.name,
        data=payload.data,
    )
    return briefing_view(briefing)


@router.get("/{briefing_id}")
def get_briefing(
    briefing_id: str,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> dict:
    return briefing_view(briefings.get_briefing(session, identity, briefing_id))
