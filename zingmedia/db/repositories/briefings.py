from zingmedia.db.models import Briefing
from zingmedia.db.repositories.base import TenantScopedRepository
from zingmedia.errors import BriefingNotFound


class BriefingsRepository(TenantScopedRepository[Briefing]):
    model = Briefing
    not_found_error = BriefingNotFound
