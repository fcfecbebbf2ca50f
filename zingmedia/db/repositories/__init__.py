from zingmedia.db.repositories.assets import AssetsRepository
from zingmedia.db.repositories.briefings import BriefingsRepository
from zingmedia.db.repositories.campaigns import CampaignsRepository
from zingmedia.db.repositories.identity import TenantsRepository, UsersRepository
from zingmedia.db.repositories.sessions import GenerationSessionsRepository
from zingmedia.db.repositories.tasks import DeferredTasksRepository
from zingmedia.db.repositories.workflows import WorkflowsRepository

__all__ = [
    "AssetsRepository",
    "BriefingsRepository",
    "CampaignsRepository",
    "DeferredTasksRepository",
    "GenerationSessionsRepository",
    "TenantsRepository",
    "UsersRepository",
    "WorkflowsRepository",
]
