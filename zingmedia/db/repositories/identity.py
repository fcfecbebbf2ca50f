from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from zingmedia.db.enums import TenantTypeEnum, UserRoleEnum
from zingmedia.db.models import Tenant, User


class TenantsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, tenant_id: str) -> Optional[Tenant]:
        return self.session.get(Tenant, tenant_id)

    def list(self) -> List[Tenant]:
        stmt = select(Tenant).order_by(Tenant.created_at.asc(), Tenant.id.asc())
        return list(self.session.scalars(stmt).all())

    def create(self, tenant_id: str, name: str, type: TenantTypeEnum, brand_config: dict) -> Tenant:
        tenant = Tenant(id=tenant_id, name=name, type=type, brand_config=brand_config)
        self.session.add(tenant)
        self.session.commit()
        self.session.refresh(tenant)
        return tenant

    def update_brand_config(self, tenant_id: str, brand_config: dict) -> Optional[Tenant]:
        tenant = self.get(tenant_id)
        if not tenant:
            return None
        # JSON columns only track reassignment.
        tenant.brand_config = {**(tenant.brand_config or {}), **brand_config}
        self.session.commit()
        self.session.refresh(tenant)
        return tenant


class UsersRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.strip().lower())
        return self.session.scalars(stmt).first()

    def list_for_tenant(self, tenant_id: str) -> List[User]:
        stmt = select(User).where(User.tenant_id == tenant_id).order_by(User.created_at.asc(), User.email.asc())
        return list(self.session.scalars(stmt).all())

    def create(
        self,
        *,
        tenant_id: str,
        email: str,
        password_hash: str,
        name: str,
        role: UserRoleEnum,
        user_id: str | None = None,
    ) -> User:
        user = User(
            tenant_id=tenant_id,
            email=email.strip().lower(),
            password_hash=password_hash,
            name=name,
            role=role,
        )
        if user_id:
            user.id = user_id
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def count_by_tenant(self) -> dict[str, int]:
        stmt = select(User.tenant_id, func.count()).group_by(User.tenant_id)
        return {tenant_id: count for tenant_id, count in self.session.execute(stmt).all()}
