from zingmedia.db.models import Campaign
from zingmedia.db.repositories.base import TenantScopedRepository
from zingmedia.errors import CampaignNotFound


class CampaignsRepository(TenantScopedRepository[Campaign]):
    model = Campaign
    not_found_error = CampaignNotFound
