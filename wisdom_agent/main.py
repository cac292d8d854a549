"""ABOUTME: FastAPI entrypoint for the Wisdom Agent service.
ABOUTME: Exposes free topic listing plus paid wisdom and streamed discourse."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import StreamingResponse

from wisdom_agent.completion_client import CompletionError
from wisdom_agent.config import Settings, configure_logging, get_settings
from wisdom_agent.entrypoints import build_entrypoints, install_payments
from wisdom_agent.models import (
    AgentManifest,
    DiscourseChunk,
    DiscourseRequest,
    TopicsResponse,
    WisdomRequest,
    WisdomResponse,
)
from wisdom_agent.service import WisdomService

logger = logging.getLogger(__name__)

AGENT_NAME = "Wisdom Agent"
AGENT_VERSION = "1.0.0"
AGENT_DESCRIPTION = "An AI agent that dispenses wisdom for a small fee via x402"


def get_wisdom_service(request: Request) -> WisdomService:
    return request.app.state.wisdom_service


def _format_event(chunk: DiscourseChunk) -> str:
    return f"data: {chunk.model_dump_json()}\n\n"


async def _event_stream(
    first: Optional[DiscourseChunk],
    chunks: AsyncGenerator[DiscourseChunk, None],
) -> AsyncIterator[str]:
    try:
        if first is None:
            return
        yield _format_event(first)
        async for chunk in chunks:
            yield _format_event(chunk)
    finally:
        await chunks.aclose()


def _log_banner(settings: Settings) -> None:
    logger.info(
        "%s %s listening on %s:%s\n"
        "  GET  /topics    - List topics (free)\n"
        "  POST /wisdom    - Get wisdom ($%.2f)\n"
        "  POST /discourse - Extended discourse ($%.2f)",
        AGENT_NAME,
        AGENT_VERSION,
        settings.host,
        settings.port,
        settings.wisdom_price_usd,
        settings.discourse_price_usd,
    )


def create_app(
    settings: Optional[Settings] = None,
    service: Optional[WisdomService] = None,
) -> FastAPI:
    settings = settings or get_settings()
    service = service or WisdomService(settings)
    entrypoints = build_entrypoints(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _log_banner(settings)
        yield
        await service.aclose()

    app = FastAPI(title=AGENT_NAME, version=AGENT_VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.wisdom_service = service
    install_payments(app, settings, entrypoints)

    manifest = AgentManifest(
        name=AGENT_NAME,
        version=AGENT_VERSION,
        description=AGENT_DESCRIPTION,
        entrypoints=[entrypoint.describe() for entrypoint in entrypoints],
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/entrypoints", response_model=AgentManifest)
    @app.get("/.well-known/agent.json", response_model=AgentManifest)
    async def agent_manifest() -> AgentManifest:
        return manifest

    @app.get("/topics", response_model=TopicsResponse)
    async def topics(
        service: WisdomService = Depends(get_wisdom_service),
    ) -> TopicsResponse:
        return service.topics()

    @app.post("/wisdom", response_model=WisdomResponse)
    async def wisdom(
        payload: WisdomRequest,
        service: WisdomService = Depends(get_wisdom_service),
    ) -> WisdomResponse:
        try:
            return await service.wisdom(payload)
        except CompletionError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    @app.post("/discourse")
    async def discourse(
        payload: DiscourseRequest,
        service: WisdomService = Depends(get_wisdom_service),
    ) -> StreamingResponse:
        chunks = service.discourse(payload)
        # Pull the first chunk here so connect-time failures become a 502
        # instead of an empty 200 stream.
        try:
            first = await anext(chunks)
        except StopAsyncIteration:
            first = None
        except CompletionError as exc:
            await chunks.aclose()
            raise HTTPException(status_code=502, detail=str(exc)) from exc

        return StreamingResponse(
            _event_stream(first, chunks),
            media_type="text/event-stream",
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    return app


def run() -> None:
    settings = get_settings()
    configure_logging(settings)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
