from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from zingmedia.db.enums import WorkflowStateEnum
from zingmedia.services.generation import MAX_AGENTS, MAX_ROUNDS


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


class BriefingCreate(BaseModel):
    templateId: str
    name: str = Field(min_length=1)
    data: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return _strip_required(value)


class GenerateWithAgentsRequest(BaseModel):
    # Optional so a missing briefing surfaces as briefing_required rather than a schema error.
    briefingId: Optional[str] = None
    subject: str = Field(min_length=1)
    numAgents: int = Field(default=3, ge=1, le=MAX_AGENTS)
    numRounds: int = Field(default=2, ge=1, le=MAX_ROUNDS)
    platforms: Optional[List[str]] = None

    @field_validator("subject")
    @classmethod
    def _normalize_subject(cls, value: str) -> str:
        return _strip_required(value)


class TransitionRequest(BaseModel):
    newState: WorkflowStateEnum
    comment: Optional[str] = None


class ApprovalRequest(BaseModel):
    comment: Optional[str] = None


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    parentId: Optional[str] = None

    @field_validator("content")
    @classmethod
    def _normalize_content(cls, value: str) -> str:
        return _strip_required(value)


class GenerateImageRequest(BaseModel):
    workflowId: str
    prompt: str = Field(min_length=1)
    platform: Optional[str] = None

    @field_validator("prompt")
    @classmethod
    def _normalize_prompt(cls, value: str) -> str:
        return _strip_required(value)


class GenerateVideoRequest(BaseModel):
    workflowId: str
    script: str = Field(min_length=1)
    avatarType: str = "professional"

    @field_validator("script")
    @classmethod
    def _normalize_script(cls, value: str) -> str:
        return _strip_required(value)


class CampaignCreate(BaseModel):
    name: str = Field(min_length=1)
    briefingId: str
    platforms: Optional[List[str]] = None

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        return _strip_required(value)
