"""Static content catalog: specialist agents, platform best practices and briefing templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

SUPPORTED_PLATFORMS = ("instagram", "facebook", "tiktok", "linkedin")
DEFAULT_PLATFORM = "instagram"


@dataclass(frozen=True)
class AgentSpecialist:
    key: str
    name: str
    authority: str
    specialty: str

    def as_dict(self) -> dict[str, str]:
        return {"key": self.key, "name": self.name, "authority": self.authority, "specialty": self.specialty}


# Roster order is the order agents join a session.
AGENT_SPECIALISTS: tuple[AgentSpecialist, ...] = (
    AgentSpecialist(
        key="prompt_engineering",
        name="Alex Chen",
        authority="Former OpenAI prompt engineer",
        specialty="Prompt optimisation and output quality",
    ),
    AgentSpecialist(
        key="editorial",
        name="Maria Santos",
        authority="Former magazine editor, 15 years in editorial",
        specialty="Editorial structure, clarity and impact",
    ),
    AgentSpecialist(
        key="storytelling",
        name="Carlos Narrative",
        authority="Award-winning screenwriter for digital formats",
        specialty="Engaging narratives and emotional connection",
    ),
    AgentSpecialist(
        key="video_short_form",
        name="Ana Reels",
        authority="Creator with 2M+ followers",
        specialty="Reels, TikTok and Stories hooks",
    ),
    AgentSpecialist(
        key="creative",
        name="Bruno Creative",
        authority="Award-winning creative director",
        specialty="Visual direction and aesthetics",
    ),
    AgentSpecialist(
        key="social_media",
        name="Lucia Social",
        authority="Social media lead for major brands",
        specialty="Platform best practices and engagement",
    ),
)


@dataclass(frozen=True)
class PlatformPractice:
    platform: str
    aspect_ratio: str
    max_chars: int
    hashtags_min: int
    hashtags_max: int
    hooks: tuple[str, ...]
    ctas: tuple[str, ...]
    video_duration: tuple[int, int] = (15, 90)


BEST_PRACTICES: dict[str, PlatformPractice] = {
    "instagram": PlatformPractice(
        platform="instagram",
        aspect_ratio="1:1",
        max_chars=2200,
        hashtags_min=5,
        hashtags_max=30,
        hooks=("Did you know...", "Quick tip:", "Secret revealed:"),
        ctas=("Save this post", "Share it in your stories", "Tag a friend"),
        video_duration=(15, 90),
    ),
    "facebook": PlatformPractice(
        platform="facebook",
        aspect_ratio="16:9",
        max_chars=63206,
        hashtags_min=1,
        hashtags_max=5,
        hooks=("Let's talk about", "Here is a story:", "Quick question:"),
        ctas=("Learn more", "Get in touch", "Visit our website"),
        video_duration=(15, 120),
    ),
    "tiktok": PlatformPractice(
        platform="tiktok",
        aspect_ratio="9:16",
        max_chars=2200,
        hashtags_min=3,
        hashtags_max=8,
        hooks=("POV:", "Tutorial:", "Storytime:"),
        ctas=("Follow for more", "Part 2 in the comments", "Want more like this?"),
        video_duration=(15, 180),
    ),
    "linkedin": PlatformPractice(
        platform="linkedin",
        aspect_ratio="1.91:1",
        max_chars=3000,
        hashtags_min=3,
        hashtags_max=5,
        hooks=("Here is what I learned:", "An insight worth sharing:", "Most teams miss this:"),
        ctas=("Connect with me", "Share your experience", "What do you think?"),
        video_duration=(30, 600),
    ),
}


def practice_for(platform: str | None) -> PlatformPractice:
    return BEST_PRACTICES.get((platform or "").lower(), BEST_PRACTICES[DEFAULT_PLATFORM])


@dataclass(frozen=True)
class TemplateField:
    name: str
    label: str
    required: bool = False
    multiple: bool = False


@dataclass(frozen=True)
class BriefingTemplate:
    id: str
    name: str
    description: str
    fields: tuple[TemplateField, ...] = field(default_factory=tuple)

    @property
    def required_fields(self) -> list[str]:
        return [item.name for item in self.fields if item.required]


_COMMON_FIELDS = (
    TemplateField("objective", "Objective", required=True),
    TemplateField("audience", "Target audience", required=True),
    TemplateField("tone", "Tone of voice", required=True),
    TemplateField("platforms", "Target platforms", required=True, multiple=True),
    TemplateField("keywords", "Keywords", multiple=True),
)

BRIEFING_TEMPLATES: dict[str, BriefingTemplate] = {
    template.id: template
    for template in (
        BriefingTemplate(
            id="social-campaign",
            name="Social media campaign",
            description="Recurring social content for a brand or campaign.",
            fields=_COMMON_FIELDS,
        ),
        BriefingTemplate(
            id="product-launch",
            name="Product launch",
            description="Content announcing a new product or feature.",
            fields=_COMMON_FIELDS
            + (
                TemplateField("product", "Product name", required=True),
                TemplateField("launchDate", "Launch date"),
            ),
        ),
        BriefingTemplate(
            id="brand-awareness",
            name="Brand awareness",
            description="Top-of-funnel content building brand recognition.",
            fields=(
                TemplateField("objective", "Objective", required=True),
                TemplateField("audience", "Target audience", required=True),
                TemplateField("tone", "Tone of voice"),
                TemplateField("platforms", "Target platforms", multiple=True),
                TemplateField("keywords", "Keywords", multiple=True),
                TemplateField("brandValues", "Brand values", multiple=True),
            ),
        ),
    )
}


def get_template(template_id: str) -> Optional[BriefingTemplate]:
    return BRIEFING_TEMPLATES.get(template_id)
