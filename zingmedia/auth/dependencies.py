import logging
from collections.abc import Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from zingmedia.auth.rbac import Identity, Permission, authorize
from zingmedia.auth.tokens import verify_token
from zingmedia.errors import Forbidden, MissingToken

bearer_scheme = HTTPBearer(auto_error=False)
logger = logging.getLogger("auth.deps")


def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Identity:
    if credentials is None or not credentials.credentials:
        raise MissingToken()
    return verify_token(credentials.credentials)


def require_permission(permission: Permission) -> Callable[..., Identity]:
    """Dependency guarding an endpoint with ``permission``.

    FastAPI resolves dependencies before it hands path or body values to the
    endpoint, so a caller without the permission is rejected before any
    tenant lookup can reveal whether the target exists.
    """

    def _guard(identity: Identity = Depends(get_current_identity)) -> Identity:
        try:
            return authorize(identity, permission)
        except Forbidden:
            logger.warning(
                "Permission denied",
                extra={
                    "user_id": identity.user_id,
                    "role": identity.role.value,
                    "required": permission.value,
                },
            )
            raise

    _guard.__name__ = f"require_{permission.name.lower()}"
    return _guard
