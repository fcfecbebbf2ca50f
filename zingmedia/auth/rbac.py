"""Role and permission catalog.

Roles are a closed set and each maps to a fixed permission set built once at
import time. Users never carry individual grants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from zingmedia.db.enums import UserRoleEnum
from zingmedia.errors import Forbidden

Role = UserRoleEnum


class Permission(str, Enum):
    ALL = "*"
    VIEW_CONTENT = "view_content"
    CREATE_BRIEFING = "create_briefing"
    GENERATE_CONTENT = "generate_content"
    MANAGE_WORKFLOW = "manage_workflow"
    APPROVE_CONTENT = "approve_content"
    REQUEST_ADJUSTMENTS = "request_adjustments"
    GENERATE_CREATIVES = "generate_creatives"
    DOWNLOAD_ASSETS = "download_assets"
    MANAGE_CAMPAIGNS = "manage_campaigns"
    MANAGE_USERS = "manage_users"
    CONFIGURE_BRANDING = "configure_branding"
    VIEW_ANALYTICS = "view_analytics"


ROLE_PERMISSIONS: MappingProxyType[Role, frozenset[Permission]] = MappingProxyType(
    {
        Role.platform_admin: frozenset({Permission.ALL}),
        Role.agency_admin: frozenset(
            {
                Permission.VIEW_CONTENT,
                Permission.CREATE_BRIEFING,
                Permission.MANAGE_CAMPAIGNS,
                Permission.MANAGE_USERS,
                Permission.CONFIGURE_BRANDING,
                Permission.VIEW_ANALYTICS,
            }
        ),
        Role.content_manager: frozenset(
            {
                Permission.VIEW_CONTENT,
                Permission.CREATE_BRIEFING,
                Permission.GENERATE_CONTENT,
                Permission.MANAGE_WORKFLOW,
                Permission.GENERATE_CREATIVES,
                Permission.DOWNLOAD_ASSETS,
                Permission.MANAGE_CAMPAIGNS,
            }
        ),
        Role.client_approver: frozenset(
            {
                Permission.VIEW_CONTENT,
                Permission.APPROVE_CONTENT,
                Permission.REQUEST_ADJUSTMENTS,
            }
        ),
        Role.viewer: frozenset({Permission.VIEW_CONTENT}),
    }
)


def permissions_for(role: Role) -> frozenset[Permission]:
    return ROLE_PERMISSIONS[role]


def grants(permissions: frozenset[Permission], required: Permission) -> bool:
    return Permission.ALL in permissions or required in permissions


def sorted_permission_values(permissions: frozenset[Permission]) -> list[str]:
    return sorted(permission.value for permission in permissions)


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str
    role: Role
    tenant_id: str
    permissions: frozenset[Permission] = field(default_factory=frozenset)

    def has(self, required: Permission) -> bool:
        return grants(self.permissions, required)

    @property
    def is_platform_admin(self) -> bool:
        return Permission.ALL in self.permissions


def authorize(identity: Identity, required: Permission) -> Identity:
    if not identity.has(required):
        raise Forbidden(f"Missing permission: {required.value}")
    return identity
