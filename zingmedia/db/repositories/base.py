from __future__ import annotations

from typing import Any, ClassVar, Generic, List, TypeVar

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from zingmedia.errors import NotFound

ModelT = TypeVar("ModelT")


class Repository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def save(self, obj, commit: bool = True):
        self.session.add(obj)
        if commit:
            self.session.commit()
            self.session.refresh(obj)
        else:
            self.session.flush()
        return obj


class TenantScopedRepository(Repository, Generic[ModelT]):
    """Storage for entities that carry a ``tenant_id``.

    Lookups always filter on the caller's tenant, so an id owned by another
    tenant is indistinguishable from an id that does not exist: both raise
    ``not_found_error`` with the same message.
    """

    model: ClassVar[type]
    not_found_error: ClassVar[type[NotFound]] = NotFound

    def create(self, tenant_id: str, *, commit: bool = True, **fields: Any) -> ModelT:
        obj = self.model(tenant_id=tenant_id, **fields)
        return self.save(obj, commit=commit)

    def list_for_tenant(self, tenant_id: str, **filters: Any) -> List[ModelT]:
        stmt = select(self.model).where(self.model.tenant_id == tenant_id)
        for column, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(self.model, column) == value)
        stmt = stmt.order_by(self.model.pk.asc())
        return list(self.session.scalars(stmt).all())

    def find_for_tenant(self, tenant_id: str, entity_id: str) -> ModelT | None:
        if not entity_id:
            return None
        stmt = select(self.model).where(self.model.tenant_id == tenant_id, self.model.id == entity_id)
        return self.session.scalars(stmt).first()

    def get_for_tenant(self, tenant_id: str, entity_id: str) -> ModelT:
        obj = self.find_for_tenant(tenant_id, entity_id)
        if obj is None:
            raise self.not_found_error()
        return obj

    def update(self, tenant_id: str, entity_id: str, **changes: Any) -> ModelT:
        obj = self.get_for_tenant(tenant_id, entity_id)
        for key, value in changes.items():
            setattr(obj, key, value)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def count_by_tenant(self) -> dict[str, int]:
        stmt = select(self.model.tenant_id, func.count()).group_by(self.model.tenant_id)
        return {tenant_id: count for tenant_id, count in self.session.execute(stmt).all()}
