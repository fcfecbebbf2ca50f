"""Demo tenants and accounts.

Seeding is idempotent: tenants are matched by id and users by email, so
running it on every start never duplicates rows or resets passwords.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from zingmedia.auth.passwords import hash_password
from zingmedia.config import settings
from zingmedia.db.enums import TenantTypeEnum, UserRoleEnum
from zingmedia.db.repositories.identity import TenantsRepository, UsersRepository

logger = logging.getLogger(__name__)

PLATFORM_TENANT_ID = "platform-tenant"
AGENCY_TENANT_ID = "agency-demo"
CLIENT_TENANT_ID = "client-demo"


@dataclass(frozen=True)
class DemoTenant:
    id: str
    name: str
    type: TenantTypeEnum
    brand_config: dict


@dataclass(frozen=True)
class DemoUser:
    email: str
    name: str
    role: UserRoleEnum
    tenant_id: str


DEMO_TENANTS = (
    DemoTenant(
        id=PLATFORM_TENANT_ID,
        name="ZingMedia Platform",
        type=TenantTypeEnum.platform,
        brand_config={"primaryColor": "#6D28D9", "secondaryColor": "#F59E0B", "companyName": "ZingMedia"},
    ),
    DemoTenant(
        id=AGENCY_TENANT_ID,
        name="Demo Agency",
        type=TenantTypeEnum.agency,
        brand_config={"primaryColor": "#2563EB", "secondaryColor": "#10B981", "companyName": "Demo Agency"},
    ),
    DemoTenant(
        id=CLIENT_TENANT_ID,
        name="Demo Client",
        type=TenantTypeEnum.client,
        brand_config={"primaryColor": "#DC2626", "secondaryColor": "#111827", "companyName": "Demo Client"},
    ),
)

DEMO_USERS = (
    DemoUser("admin@zingmedia.com", "Platform Admin", UserRoleEnum.platform_admin, PLATFORM_TENANT_ID),
    DemoUser("agency@example.com", "Agency Admin", UserRoleEnum.agency_admin, AGENCY_TENANT_ID),
    DemoUser("social@example.com", "Social Media Manager", UserRoleEnum.content_manager, AGENCY_TENANT_ID),
    DemoUser("approver@client.com", "Client Approver", UserRoleEnum.client_approver, CLIENT_TENANT_ID),
    DemoUser("viewer@client.com", "Client Viewer", UserRoleEnum.viewer, CLIENT_TENANT_ID),
)


def seed_demo_data(session: Session, password: str | None = None) -> int:
    """Create missing demo tenants and users. Returns how many rows were added."""
    tenants = TenantsRepository(session)
    users = UsersRepository(session)
    created = 0

    for demo in DEMO_TENANTS:
        if tenants.get(demo.id) is None:
            tenants.create(demo.id, demo.name, demo.type, dict(demo.brand_config))
            created += 1

    password_hash = None
    for demo in DEMO_USERS:
        if users.get_by_email(demo.email) is not None:
            continue
        if password_hash is None:
            password_hash = hash_password(password or settings.DEMO_PASSWORD)
        users.create(
            tenant_id=demo.tenant_id,
            email=demo.email,
            password_hash=password_hash,
            name=demo.name,
            role=demo.role,
        )
        created += 1

    if created:
        logger.info("Seeded demo data", extra={"rows": created})
    return created
