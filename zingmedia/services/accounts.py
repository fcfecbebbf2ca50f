from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from zingmedia.auth.passwords import hash_password
from zingmedia.auth.rbac import Identity, Role
from zingmedia.db.models import Tenant, User
from zingmedia.db.repositories import (
    AssetsRepository,
    BriefingsRepository,
    CampaignsRepository,
    GenerationSessionsRepository,
    TenantsRepository,
    UsersRepository,
    WorkflowsRepository,
)
from zingmedia.errors import Conflict, Forbidden, NotFound, TenantNotFound

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    user: User
    tenant: Tenant


def get_profile(session: Session, identity: Identity) -> Profile:
    user = UsersRepository(session).get(identity.user_id)
    if user is None or user.tenant_id != identity.tenant_id:
        raise NotFound("User not found")
    tenant = TenantsRepository(session).get(user.tenant_id)
    if tenant is None:
        raise TenantNotFound()
    return Profile(user=user, tenant=tenant)


def update_branding(session: Session, identity: Identity, changes: dict[str, Any]) -> Tenant:
    updates = {key: value for key, value in changes.items() if value is not None}
    tenant = TenantsRepository(session).update_brand_config(identity.tenant_id, updates)
    if tenant is None:
        raise TenantNotFound()
    logger.info(
        "Tenant branding updated",
        extra={"tenant_id": tenant.id, "user_id": identity.user_id, "fields": sorted(updates)},
    )
    return tenant


def list_users(session: Session, identity: Identity) -> list[User]:
    return UsersRepository(session).list_for_tenant(identity.tenant_id)


def provision_user(
    session: Session,
    identity: Identity,
    *,
    email: str,
    password: str,
    name: str,
    role: Role,
    tenant_id: str | None = None,
) -> User:
    target_tenant = tenant_id or identity.tenant_id
    if target_tenant != identity.tenant_id and not identity.is_platform_admin:
        raise Forbidden("Only platform admins can provision users in other tenants")
    if role == Role.platform_admin and not identity.is_platform_admin:
        raise Forbidden("Only platform admins can create platform admins")
    if TenantsRepository(session).get(target_tenant) is None:
        raise TenantNotFound()

    users = UsersRepository(session)
    if users.get_by_email(email) is not None:
        raise Conflict("A user with this email already exists")

    user = users.create(
        tenant_id=target_tenant,
        email=email,
        password_hash=hash_password(password),
        name=name.strip(),
        role=role,
    )
    logger.info(
        "User provisioned",
        extra={"user_id": user.id, "tenant_id": target_tenant, "role": role.value, "actor_id": identity.user_id},
    )
    return user


def platform_overview(session: Session) -> list[dict[str, Any]]:
    """Per-tenant entity counts. The only view that reads across tenants."""
    counts = {
        "users": UsersRepository(session).count_by_tenant(),
        "briefings": BriefingsRepository(session).count_by_tenant(),
        "sessions": GenerationSessionsRepository(session).count_by_tenant(),
        "workflows": WorkflowsRepository(session).count_by_tenant(),
        "assets": AssetsRepository(session).count_by_tenant(),
        "campaigns": CampaignsRepository(session).count_by_tenant(),
    }
    overview = []
    for tenant in TenantsRepository(session).list():
        row: dict[str, Any] = {"tenantId": tenant.id, "name": tenant.name, "type": tenant.type.value}
        for label, by_tenant in counts.items():
            row[label] = by_tenant.get(tenant.id, 0)
        overview.append(row)
    return overview
