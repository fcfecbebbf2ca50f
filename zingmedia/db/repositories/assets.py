from typing import List, Optional

from zingmedia.db.enums import AssetTypeEnum
from zingmedia.db.models import CreativeAsset
from zingmedia.db.repositories.base import TenantScopedRepository
from zingmedia.errors import AssetNotFound


class AssetsRepository(TenantScopedRepository[CreativeAsset]):
    model = CreativeAsset
    not_found_error = AssetNotFound

    def list(
        self,
        tenant_id: str,
        workflow_id: Optional[str] = None,
        asset_type: Optional[AssetTypeEnum] = None,
    ) -> List[CreativeAsset]:
        return self.list_for_tenant(tenant_id, workflow_id=workflow_id, type=asset_type)
