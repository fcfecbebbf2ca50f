from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from zingmedia.auth import service as auth_service
from zingmedia.db.deps import get_session
from zingmedia.schemas.auth import LoginRequest
from zingmedia.schemas.views import user_public

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
def login(payload: LoginRequest, session: Session = Depends(get_session)) -> dict:
    result = auth_service.login(session, payload.email, payload.password)
    return {"token": result.token, "user": user_public(result.user)}
