from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session, get_task_runner
from zingmedia.schemas.content import GenerateWithAgentsRequest
from zingmedia.schemas.views import session_view
from zingmedia.services import generation
from zingmedia.services.tasks import DeferredTaskRunner

router = APIRouter(prefix="/content", tags=["content"])
sessions_router = APIRouter(prefix="/sessions", tags=["content"])


@router.post("/generate-with-agents", status_code=status.HTTP_202_ACCEPTED)
def generate_with_agents(
    payload: GenerateWithAgentsRequest,
    identity: Identity = Depends(require_permission(Permission.GENERATE_CONTENT)),
    session: Session = Depends(get_session),
    runner: DeferredTaskRunner = Depends(get_task_runner),
) -> dict:
    started = generation.start_generation(
        session,
        identity,
        runner,
        briefing_id=payload.briefingId,
        subject=payload.subject,
        num_agents=payload.numAgents,
        num_rounds=payload.numRounds,
        platforms=payload.platforms,
    )
    return session_view(started)


@sessions_router.get("")
def list_sessions(
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> list:
    return [session_view(item) for item in generation.list_sessions(session, identity)]


@sessions_router.get("/{session_id}")
def get_session_status(
    session_id: str,
    identity: Identity = Depends(require_permission(Permission.VIEW_CONTENT)),
    session: Session = Depends(get_session),
) -> dict:
    return session_view(generation.get_session_status(session, identity, session_id))


@sessions_router.post("/{session_id}/cancel")
def cancel_session(
    session_id: str,
    identity: Identity = Depends(require_permission(Permission.GENERATE_CONTENT)),
    session: Session = Depends(get_session),
    runner: DeferredTaskRunner = Depends(get_task_runner),
) -> dict:
    return session_view(generation.cancel_generation(session, identity, runner, session_id))
