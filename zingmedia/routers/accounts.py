from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from zingmedia.auth.dependencies import get_current_identity, require_permission
from zingmedia.auth.rbac import Identity, Permission
from zingmedia.db.deps import get_session
from zingmedia.schemas.accounts import BrandingUpdate, UserCreate
from zingmedia.schemas.views import tenant_view, user_public
from zingmedia.services import accounts

router = APIRouter(tags=["accounts"])


@router.get("/user/profile")
def get_profile(
    identity: Identity = Depends(get_current_identity),
    session: Session = Depends(get_session),
) -> dict:
    profile = accounts.get_profile(session, identity)
    return {"user": user_public(profile.user), "tenant": tenant_view(profile.tenant)}


@router.put("/tenant/branding")
def update_branding(
    payload: BrandingUpdate,
    identity: Identity = Depends(require_permission(Permission.CONFIGURE_BRANDING)),
    session: Session = Depends(get_session),
) -> dict:
    tenant = accounts.update_branding(session, identity, payload.model_dump(exclude_unset=True))
    return tenant_view(tenant)


@router.get("/users")
def list_users(
    identity: Identity = Depends(require_permission(Permission.MANAGE_USERS)),
    session: Session = Depends(get_session),
) -> list:
    return [user_public(user) for user in accounts.list_users(session, identity)]


@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    identity: Identity = Depends(require_permission(Permission.MANAGE_USERS)),
    session: Session = Depends(get_session),
) -> dict:
    user = accounts.provision_user(
        session,
        identity,
        email=payload.email,
        password=payload.password,
        name=payload.name,
        role=payload.role,
        tenant_id=payload.tenantId,
    )
    return user_public(user)


@router.get("/admin/overview")
def platform_overview(
    _identity: Identity = Depends(require_permission(Permission.ALL)),
    session: Session = Depends(get_session),
) -> dict:
    return {"tenants": accounts.platform_overview(session)}
