"""ABOUTME: Declarations of the agent's entrypoints and their prices.
ABOUTME: Installs x402 payment middleware in front of each paid route."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Type

from fastapi import FastAPI
from pydantic import BaseModel
from x402.fastapi.middleware import require_payment

from wisdom_agent.config import Settings
from wisdom_agent.models import (
    DiscourseChunk,
    DiscourseRequest,
    EntrypointDescriptor,
    PaymentRequirement,
    TopicsResponse,
    WisdomRequest,
    WisdomResponse,
)

logger = logging.getLogger(__name__)


class _EmptyInput(BaseModel):
    pass


@dataclass(frozen=True)
class Entrypoint:
    key: str
    path: str
    method: str
    description: str
    input_model: Type[BaseModel]
    output_model: Type[BaseModel]
    streaming: bool = False
    payment: Optional[PaymentRequirement] = None

    def describe(self) -> EntrypointDescriptor:
        return EntrypointDescriptor(
            key=self.key,
            path=self.path,
            method=self.method,
            description=self.description,
            streaming=self.streaming,
            payment=self.payment,
            input_schema=self.input_model.model_json_schema(),
            output_schema=self.output_model.model_json_schema(by_alias=True),
        )


def build_entrypoints(settings: Settings) -> List[Entrypoint]:
    wisdom_price = settings.wisdom_price_usd
    discourse_price = settings.discourse_price_usd
    return [
        Entrypoint(
            key="topics",
            path="/topics",
            method="GET",
            description="List available wisdom topics (free)",
            input_model=_EmptyInput,
            output_model=TopicsResponse,
        ),
        Entrypoint(
            key="wisdom",
            path="/wisdom",
            method="POST",
            description=f"Get AI-generated wisdom on a topic (${wisdom_price})",
            input_model=WisdomRequest,
            output_model=WisdomResponse,
            payment=PaymentRequirement(amount=wisdom_price),
        ),
        Entrypoint(
            key="discourse",
            path="/discourse",
            method="POST",
            description=f"Get an extended wisdom discourse via streaming (${discourse_price})",
            input_model=DiscourseRequest,
            output_model=DiscourseChunk,
            streaming=True,
            payment=PaymentRequirement(amount=discourse_price),
        ),
    ]


MIN_PRICE_USD = 0.000001


def _format_price(amount: float) -> str:
    # USDC settles in 6 decimals
    if amount < MIN_PRICE_USD:
        raise ValueError(
            f"Price ${amount} is below the smallest payable amount ${MIN_PRICE_USD:.6f}"
        )
    return f"${amount:.6f}"


def install_payments(app: FastAPI, settings: Settings, entrypoints: List[Entrypoint]) -> None:
    """Register one x402 middleware per paid entrypoint path."""
    if not settings.payments_enabled:
        logger.warning("Payments are disabled; paid entrypoints are served for free")
        return
    if not settings.payments_receivable_address:
        raise ValueError("PAYMENTS_RECEIVABLE_ADDRESS is required when payments are enabled")

    for entrypoint in entrypoints:
        if entrypoint.payment is None or not entrypoint.payment.required:
            continue
        app.middleware("http")(
            require_payment(
                path=entrypoint.path,
                price=_format_price(entrypoint.payment.amount),
                pay_to_address=settings.payments_receivable_address,
                network=settings.network,
                description=entrypoint.description,
                mime_type="text/event-stream" if entrypoint.streaming else "application/json",
                output_schema=entrypoint.output_model.model_json_schema(by_alias=True),
                facilitator_config={"url": settings.facilitator_url},
            )
        )
        logger.info(
            "Payment required on %s: %s %s",
            entrypoint.path,
            entrypoint.payment.amount,
            entrypoint.payment.currency,
        )
