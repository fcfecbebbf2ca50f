"""Simulated multi-agent content generation.

A session is created ``processing`` and completed later by a deferred task
that runs the agent debate, synthesizes the post and opens its workflow.
Synthesis is deterministic: the same briefing and subject always produce the
same text and hashtags.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable

from sqlalchemy.orm import Session

from zingmedia.auth.rbac import Identity
from zingmedia.config import settings
from zingmedia.db.enums import BriefingStatusEnum, SessionStatusEnum, TaskKindEnum, TaskStatusEnum
from zingmedia.db.models import DeferredTask, GenerationSession, utcnow
from zingmedia.db.repositories.briefings import BriefingsRepository
from zingmedia.db.repositories.sessions import GenerationSessionsRepository
from zingmedia.db.repositories.tasks import DeferredTasksRepository
from zingmedia.db.repositories.workflows import WorkflowsRepository
from zingmedia.domain.catalog import AGENT_SPECIALISTS, DEFAULT_PLATFORM, SUPPORTED_PLATFORMS, practice_for
from zingmedia.errors import BriefingRequired, InvalidTransition
from zingmedia.services.tasks import DeferredTaskRunner

logger = logging.getLogger(__name__)

MAX_AGENTS = 5
MAX_ROUNDS = 3
FALLBACK_HASHTAGS = ("socialmedia", "marketing", "contentcreation", "digitalmarketing", "branding", "growth")
_NON_WORD = re.compile(r"[\W_]+", re.UNICODE)

_ABORT_STATUS = {
    TaskStatusEnum.failed: SessionStatusEnum.failed,
    TaskStatusEnum.cancelled: SessionStatusEnum.cancelled,
}


def build_roster(num_agents: int) -> list[dict[str, str]]:
    size = min(max(num_agents, 1), len(AGENT_SPECIALISTS))
    return [agent.as_dict() for agent in AGENT_SPECIALISTS[:size]]


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(part).strip() for part in value if str(part).strip()]


def resolve_platforms(requested: Iterable[str] | None, briefing_data: dict[str, Any]) -> list[str]:
    for candidates in (requested, briefing_data.get("platforms")):
        platforms = [p.lower() for p in _as_list(candidates) if p.lower() in SUPPORTED_PLATFORMS]
        if platforms:
            return list(dict.fromkeys(platforms))
    return [DEFAULT_PLATFORM]


def build_debate(
    roster: list[dict[str, str]],
    num_rounds: int,
    subject: str,
    briefing_data: dict[str, Any],
) -> list[dict[str, Any]]:
    audience = briefing_data.get("audience") or "the target audience"
    tone = briefing_data.get("tone") or "engaging"
    rounds: list[dict[str, Any]] = []
    for round_number in range(1, num_rounds + 1):
        contributions = []
        for agent in roster:
            if round_number == 1:
                message = f"{agent['name']} proposes leading with {agent['specialty'].lower()} for '{subject}'."
            elif round_number < num_rounds:
                message = f"{agent['name']} challenges the draft so it lands with {audience}."
            else:
                message = f"{agent['name']} signs off on a {tone} final version."
            contributions.append({"agent": agent["key"], "name": agent["name"], "message": message})
        rounds.append({"round": round_number, "contributions": contributions})
    return rounds


def to_hashtag(value: str) -> str | None:
    compact = _NON_WORD.sub("", value.lower())
    if not compact:
        return None
    return f"#{compact[:30]}"


def build_hashtags(subject: str, keywords: list[str], platform: str) -> list[str]:
    practice = practice_for(platform)
    candidates = [subject, *keywords, platform, *FALLBACK_HASHTAGS]
    hashtags: list[str] = []
    for candidate in candidates:
        tag = to_hashtag(candidate)
        if tag and tag not in hashtags:
            hashtags.append(tag)
        if len(hashtags) >= practice.hashtags_max:
            break
    return hashtags


def synthesize_content(subject: str, briefing_data: dict[str, Any], platforms: list[str]) -> dict[str, Any]:
    primary = platforms[0] if platforms else DEFAULT_PLATFORM
    practice = practice_for(primary)
    audience = briefing_data.get("audience") or "your audience"
    tone = briefing_data.get("tone") or "engaging"
    objective = briefing_data.get("objective")
    keywords = _as_list(briefing_data.get("keywords"))

    hook = practice.hooks[0]
    cta = practice.ctas[0]
    paragraphs = [f"{hook} {subject}", f"Written for {audience} in a {tone} voice."]
    if objective:
        paragraphs.append(f"Our goal: {objective}.")
    if keywords:
        paragraphs.append(f"Key themes: {', '.join(keywords)}.")
    paragraphs.append(f"{cta}!")
    text = "\n\n".join(paragraphs)[: practice.max_chars]

    return {
        "text": text,
        "hashtags": build_hashtags(subject, keywords, primary),
        "platforms": platforms,
        "hook": hook,
        "cta": cta,
    }


def start_generation(
    session: Session,
    identity: Identity,
    runner: DeferredTaskRunner,
    *,
    briefing_id: str | None,
    subject: str,
    num_agents: int,
    num_rounds: int,
    platforms: list[str] | None = None,
) -> GenerationSession:
    if not briefing_id or not briefing_id.strip():
        raise BriefingRequired()
    briefing = BriefingsRepository(session).get_for_tenant(identity.tenant_id, briefing_id)
    if briefing.status != BriefingStatusEnum.active:
        raise BriefingRequired("Briefing is not active")

    roster = build_roster(num_agents)
    generation = GenerationSessionsRepository(session).create(
        identity.tenant_id,
        commit=False,
        created_by=identity.user_id,
        briefing_id=briefing.id,
        subject=subject.strip(),
        num_agents=num_agents,
        num_rounds=num_rounds,
        platforms=resolve_platforms(platforms, briefing.data or {}),
        agents=roster,
        debate=[],
        status=SessionStatusEnum.processing,
    )
    runner.schedule(
        session,
        tenant_id=identity.tenant_id,
        kind=TaskKindEnum.generation_session,
        target_id=generation.id,
        delay_seconds=settings.GENERATION_DELAY_SECONDS,
    )
    logger.info(
        "Generation session started",
        extra={
            "session_id": generation.id,
            "tenant_id": identity.tenant_id,
            "briefing_id": briefing.id,
            "agents": len(roster),
            "rounds": num_rounds,
        },
    )
    return generation


def complete_generation(session: Session, task: DeferredTask) -> None:
    sessions_repo = GenerationSessionsRepository(session)
    generation = sessions_repo.find_for_tenant(task.tenant_id, task.target_id)
    if generation is None or generation.status != SessionStatusEnum.processing:
        return

    briefing = BriefingsRepository(session).get_for_tenant(task.tenant_id, generation.briefing_id)
    briefing_data = briefing.data or {}
    content = synthesize_content(generation.subject, briefing_data, list(generation.platforms or []))

    generation.debate = build_debate(list(generation.agents or []), generation.num_rounds, generation.subject, briefing_data)
    generation.content = content
    generation.status = SessionStatusEnum.completed
    generation.completed_at = utcnow()

    workflow = WorkflowsRepository(session).create_with_event(
        task.tenant_id,
        session_id=generation.id,
        briefing_id=generation.briefing_id,
        content={"text": content["text"], "hashtags": content["hashtags"], "platforms": content["platforms"]},
        actor_id=generation.created_by,
        comment=f"Content generated by {len(generation.agents or [])} agents over {generation.num_rounds} rounds",
        commit=False,
    )
    session.commit()
    logger.info(
        "Generation session completed",
        extra={"session_id": generation.id, "workflow_id": workflow.id, "tenant_id": task.tenant_id},
    )


def abort_generation(session: Session, task: DeferredTask, status: TaskStatusEnum, reason: str) -> None:
    generation = GenerationSessionsRepository(session).find_for_tenant(task.tenant_id, task.target_id)
    if generation is None or generation.status != SessionStatusEnum.processing:
        return
    generation.status = _ABORT_STATUS.get(status, SessionStatusEnum.failed)
    generation.error = reason
    session.commit()


def register_task_handlers(runner: DeferredTaskRunner) -> None:
    runner.register(TaskKindEnum.generation_session, complete_generation, abort_generation)


def get_session_status(session: Session, identity: Identity, session_id: str) -> GenerationSession:
    return GenerationSessionsRepository(session).get_for_tenant(identity.tenant_id, session_id)


def list_sessions(session: Session, identity: Identity) -> list[GenerationSession]:
    return GenerationSessionsRepository(session).list_for_tenant(identity.tenant_id)


def cancel_generation(
    session: Session,
    identity: Identity,
    runner: DeferredTaskRunner,
    session_id: str,
) -> GenerationSession:
    repo = GenerationSessionsRepository(session)
    generation = repo.get_for_tenant(identity.tenant_id, session_id)
    if generation.status != SessionStatusEnum.processing:
        raise InvalidTransition(f"Session is already {generation.status.value}")
    task = DeferredTasksRepository(session).get_pending_for_target(generation.id)
    if task is None or not runner.cancel(session, task.id):
        raise InvalidTransition("Session is no longer processing")
    session.refresh(generation)
    logger.info("Generation session cancelled", extra={"session_id": generation.id, "user_id": identity.user_id})
    return generation
