"""Idea generation service.

Turns a generation request into tagged idea candidates:

1. validate the request (content type and industry are required) before
   anything leaves the process;
2. serve identical requests from the response cache when possible;
3. render the prompt and call the text generator exactly once;
4. normalise the raw completion with ``core.idea_parser``;
5. tag every candidate with the request's content type, industry, tone and
   audience, and optionally persist them as unsaved drafts.

Provider failures propagate as ``GenerationUnavailable``; nothing is
persisted in that case.
"""
from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ideaboard.core.cache import ResponseCache
from ideaboard.core.config import Settings, get_settings
from ideaboard.core.errors import IdeaValidationError
from ideaboard.core.idea_parser import normalize_keywords, parse_ideas_result
from ideaboard.core.modelhub import TextGenerator
from ideaboard.models.idea import ContentType, Engagement, Idea, IdeaStatus
from ideaboard.repositories import idea as idea_repo
from ideaboard.schemas.generation import GenerateIdeasRequest, IdeaCandidate

logger = logging.getLogger(__name__)

__all__ = [
    "GenerationOutcome",
    "build_generation_prompt",
    "generation_cache_key",
    "generate_ideas",
]

STRUCTURE_INSTRUCTIONS = """For each idea, provide:
1. An engaging title
2. A brief description (2-3 sentences)
3. 3-5 relevant keywords
4. Target audience specifics
5. Estimated engagement potential (high, medium, or low)

Format each idea as a JSON object with the following properties: title, description, keywords (array), targetAudience, estimatedEngagement. Return all ideas as a JSON array."""


@dataclass
class GenerationOutcome:
    candidates: list[IdeaCandidate]
    cached: bool = False
    drafts: list[Idea] = field(default_factory=list)


def _clean(value: Optional[str]) -> Optional[str]:
    text = (value or "").strip()
    return text or None


def build_generation_prompt(
    *,
    content_type: ContentType,
    industry: str,
    count: int,
    audience: Optional[str] = None,
    tone: Optional[str] = None,
    topic: Optional[str] = None,
    keywords: Iterable[str] = (),
) -> str:
    """Render the instruction sent to the provider.

    Deterministic for a given set of parameters; empty optional parameters
    are left out entirely.
    """
    subject = f"Generate {count} creative {content_type.value} content ideas for a {industry} business"
    if audience:
        subject += f" targeting {audience}"
    if tone:
        subject += f" with a {tone} tone"
    lines = [subject + "."]
    if topic:
        lines.append(f"Focus the ideas on this topic: {topic}.")
    hints = normalize_keywords(keywords)
    if hints:
        lines.append(f"Work these keywords in where relevant: {', '.join(hints)}.")
    lines.append("")
    lines.append(STRUCTURE_INSTRUCTIONS)
    return "\n".join(lines)


def generation_cache_key(
    *,
    content_type: ContentType,
    industry: str,
    count: int,
    audience: Optional[str] = None,
    tone: Optional[str] = None,
    topic: Optional[str] = None,
    keywords: Iterable[str] = (),
) -> str:
    return json.dumps(
        [content_type.value, industry, audience or "", tone or "", count, topic or "", normalize_keywords(keywords)],
        ensure_ascii=False,
    )


def _validate(request: GenerateIdeasRequest, settings: Settings) -> tuple[ContentType, str, int]:
    industry = _clean(request.industry)
    missing = [name for name, value in (("content_type", request.content_type), ("industry", industry)) if not value]
    if missing:
        raise IdeaValidationError(f"Missing required field(s): {', '.join(missing)}", field=missing[0])
    count = request.count if request.count is not None else settings.generation_default_count
    if count < 1 or count > settings.generation_max_count:
        raise IdeaValidationError(
            f"count must be between 1 and {settings.generation_max_count}", field="count"
        )
    return request.content_type, industry, count  # type: ignore[return-value]


async def generate_ideas(
    session: AsyncSession,
    requester_id: uuid.UUID,
    request: GenerateIdeasRequest,
    *,
    generator: TextGenerator,
    cache: Optional[ResponseCache] = None,
    settings: Optional[Settings] = None,
) -> GenerationOutcome:
    settings = settings or get_settings()
    content_type, industry, count = _validate(request, settings)
    audience = _clean(request.audience)
    tone = _clean(request.tone)
    topic = _clean(request.topic)
    params = dict(
        content_type=content_type,
        industry=industry,
        count=count,
        audience=audience,
        tone=tone,
        topic=topic,
        keywords=request.keywords,
    )

    if not settings.generation_cache_enabled:
        cache = None
    key = generation_cache_key(**params)
    cached = cache.get(key) if cache is not None else None

    if cached is not None:
        logger.info("generation served from cache", extra={"content_type": content_type.value, "count": count})
        candidates = [c.model_copy(deep=True) for c in cached]
        outcome = GenerationOutcome(candidates=candidates, cached=True)
    else:
        prompt = build_generation_prompt(**params)
        raw = await generator.generate(prompt, settings.generation_max_tokens, settings.generation_temperature)
        parsed = parse_ideas_result(raw, count)
        candidates = [
            IdeaCandidate(
                title=p.title,
                description=p.description,
                keywords=p.keywords,
                target_audience=p.target_audience,
                estimated_engagement=Engagement(p.estimated_engagement),
                content_type=content_type,
                industry=industry,
                tone=tone,
                audience=audience,
            )
            for p in parsed.ideas
        ]
        logger.info(
            "ideas generated",
            extra={"tier": parsed.tier.value, "ideas": len(candidates), "requested": count},
        )
        # placeholder output is not worth remembering
        if cache is not None and parsed.ok:
            cache.set(key, [c.model_copy(deep=True) for c in candidates], settings.generation_cache_ttl_seconds)
        outcome = GenerationOutcome(candidates=candidates)

    if request.save_drafts:
        for candidate in outcome.candidates:
            draft = await idea_repo.create(
                session,
                owner_id=requester_id,
                title=candidate.title[:200],
                description=candidate.description,
                content_type=candidate.content_type,
                keywords=candidate.keywords,
                target_audience=candidate.target_audience,
                estimated_engagement=candidate.estimated_engagement,
                tone=candidate.tone,
                industry=candidate.industry,
                status=IdeaStatus.DRAFT,
                is_saved=False,
                is_scheduled=False,
                scheduled_date=None,
            )
            outcome.drafts.append(draft)
    return outcome
