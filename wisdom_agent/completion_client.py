"""ABOUTME: Async client for an OpenAI-compatible chat completions API.
ABOUTME: Handles single-shot calls and server-sent fragment streams."""

from __future__ import annotations

import json
import logging
from typing import AsyncIterator, Optional

import httpx

from wisdom_agent.config import Settings

logger = logging.getLogger(__name__)

Message = dict[str, str]

STREAM_DATA_PREFIX = "data:"
STREAM_DONE_MARKER = "[DONE]"


class CompletionError(Exception):
    """Raised when the completion provider call fails."""


def _raise_for_provider_error(body: object) -> None:
    if not isinstance(body, dict):
        raise CompletionError(f"Unexpected provider payload: {body!r}")
    error = body.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else error
        raise CompletionError(f"Completion provider error: {message}")


def _first_choice(body: dict) -> dict:
    choices = body.get("choices") or []
    if not choices:
        return {}
    return choices[0] or {}


class CompletionClient:
    """Async helper that talks to the completion provider."""

    def __init__(self, settings: Settings) -> None:
        self.url = settings.completions_url
        self.api_key = settings.openai_api_key
        self.model = settings.completion_model
        self.timeout = settings.request_timeout_seconds
        self._client: Optional[httpx.AsyncClient] = None

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_payload(
        self,
        messages: list[Message],
        max_tokens: int,
        stream: bool = False,
    ) -> dict:
        payload: dict = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if stream:
            payload["stream"] = True
        return payload

    async def complete(self, messages: list[Message], max_tokens: int) -> Optional[str]:
        """Run one non-streaming completion and return the first choice's content."""
        payload = self._build_payload(messages, max_tokens)
        try:
            client = await self._get_client()
            response = await client.post(self.url, headers=self._get_headers(), json=payload)
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Completion request failed: %s", exc)
            raise CompletionError(f"Completion request failed: {exc}") from exc

        _raise_for_provider_error(body)
        message = _first_choice(body).get("message") or {}
        return message.get("content")

    async def stream(
        self,
        messages: list[Message],
        max_tokens: int,
    ) -> AsyncIterator[Optional[str]]:
        """Yield the delta content of each streamed fragment, in arrival order.

        Fragments without text (role-only or metadata deltas) are yielded as
        ``None`` or ``""``; filtering is left to the caller. The upstream
        connection is released when the generator finishes or is closed.
        """
        payload = self._build_payload(messages, max_tokens, stream=True)
        client = await self._get_client()
        try:
            async with client.stream(
                "POST", self.url, headers=self._get_headers(), json=payload
            ) as response:
                if response.is_error:
                    await response.aread()
                    raise CompletionError(
                        f"Completion stream failed with status {response.status_code}"
                    )
                async for line in response.aiter_lines():
                    if not line.startswith(STREAM_DATA_PREFIX):
                        continue
                    data = line[len(STREAM_DATA_PREFIX):].strip()
                    if data == STREAM_DONE_MARKER:
                        break
                    try:
                        fragment = json.loads(data)
                    except json.JSONDecodeError as exc:
                        raise CompletionError(f"Malformed stream fragment: {data!r}") from exc
                    _raise_for_provider_error(fragment)
                    delta = _first_choice(fragment).get("delta") or {}
                    yield delta.get("content")
        except httpx.HTTPError as exc:
            logger.warning("Completion stream failed: %s", exc)
            raise CompletionError(f"Completion stream failed: {exc}") from exc
