"""ABOUTME: Domain logic behind the topics, wisdom and discourse entrypoints.
ABOUTME: Builds prompts, calls the completion provider and shapes replies."""

from __future__ import annotations

import logging
from typing import AsyncIterator, List, Optional

from wisdom_agent.completion_client import CompletionClient, Message
from wisdom_agent.config import Settings
from wisdom_agent.models import (
    DiscourseChunk,
    DiscourseRequest,
    TopicsResponse,
    WisdomRequest,
    WisdomResponse,
)

logger = logging.getLogger(__name__)

TOPICS = (
    "life",
    "success",
    "happiness",
    "relationships",
    "career",
    "creativity",
    "resilience",
    "purpose",
)
FALLBACK_WISDOM = (
    "The greatest wisdom is knowing that wisdom cannot always be summoned on demand."
)

WISDOM_SYSTEM_PROMPT_TEMPLATE = (
    "You are a wise sage who dispenses wisdom in a {style} style.\n"
    "Keep responses concise but profound (2-3 sentences).\n"
    "Be original - don't use common quotes."
)
WISDOM_USER_PROMPT_TEMPLATE = "Share wisdom about: {topic}"
DISCOURSE_SYSTEM_PROMPT_TEMPLATE = (
    "You are a wise philosopher giving a discourse on {topic}.\n"
    "Address each question thoughtfully but concisely.\n"
    "Speak with gravitas but accessibility."
)
DISCOURSE_USER_PROMPT_TEMPLATE = "Topic: {topic}\n\nQuestions to address:\n{questions}"


def _number_questions(questions: List[str]) -> str:
    return "\n".join(f"{idx}. {question}" for idx, question in enumerate(questions, start=1))


def build_wisdom_messages(request: WisdomRequest) -> list[Message]:
    return [
        {"role": "system", "content": WISDOM_SYSTEM_PROMPT_TEMPLATE.format(style=request.style)},
        {"role": "user", "content": WISDOM_USER_PROMPT_TEMPLATE.format(topic=request.topic)},
    ]


def build_discourse_messages(request: DiscourseRequest) -> list[Message]:
    return [
        {"role": "system", "content": DISCOURSE_SYSTEM_PROMPT_TEMPLATE.format(topic=request.topic)},
        {
            "role": "user",
            "content": DISCOURSE_USER_PROMPT_TEMPLATE.format(
                topic=request.topic,
                questions=_number_questions(request.questions),
            ),
        },
    ]


class WisdomService:
    """Implements the three agent entrypoints against the completion provider."""

    def __init__(self, settings: Settings, client: Optional[CompletionClient] = None) -> None:
        self.settings = settings
        self.client = client or CompletionClient(settings)

    def topics(self) -> TopicsResponse:
        return TopicsResponse(topics=list(TOPICS), price_usd=self.settings.wisdom_price_usd)

    async def wisdom(self, request: WisdomRequest) -> WisdomResponse:
        logger.info("Generating wisdom on %r in %s style", request.topic, request.style)
        content = await self.client.complete(
            build_wisdom_messages(request),
            max_tokens=self.settings.wisdom_max_tokens,
        )
        if not content:
            logger.info("Provider returned no content, using fallback wisdom")
            content = FALLBACK_WISDOM
        return WisdomResponse(wisdom=content, topic=request.topic, style=request.style)

    async def discourse(self, request: DiscourseRequest) -> AsyncIterator[DiscourseChunk]:
        """Stream a discourse, one chunk per non-empty provider fragment."""
        logger.info(
            "Starting discourse on %r with %d question(s)",
            request.topic,
            len(request.questions),
        )
        fragments = self.client.stream(
            build_discourse_messages(request),
            max_tokens=self.settings.discourse_max_tokens,
        )
        emitted = 0
        try:
            async for content in fragments:
                if content:
                    emitted += 1
                    yield DiscourseChunk(chunk=content)
        finally:
            await fragments.aclose()
            logger.info("Discourse on %r ended after %d chunk(s)", request.topic, emitted)

    async def aclose(self) -> None:
        await self.client.aclose()
