from zingmedia.db.models import GenerationSession
from zingmedia.db.repositories.base import TenantScopedRepository
from zingmedia.errors import SessionNotFound


class GenerationSessionsRepository(TenantScopedRepository[GenerationSession]):
    model = GenerationSession
    not_found_error = SessionNotFound
