"""ABOUTME: Pydantic models for Wisdom Agent API contracts.
ABOUTME: Provides request, response, payment and manifest schemas."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

WisdomStyle = Literal["philosophical", "practical", "poetic", "humorous"]


def _require_text(value: str, field_name: str) -> str:
    if not value.strip():
        raise ValueError(f"{field_name} must not be empty")
    return value


class TopicsResponse(BaseModel):
    """Catalog of topics and the unit price of a wisdom call."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    topics: List[str]
    price_usd: float = Field(..., alias="priceUsd")


class WisdomRequest(BaseModel):
    """Incoming payload for a single wisdom call."""

    model_config = ConfigDict(extra="forbid")

    topic: str = Field(..., description="The topic you want wisdom about")
    style: WisdomStyle = Field(
        default="philosophical", description="The style of wisdom delivery"
    )

    @field_validator("topic")
    @classmethod
    def _validate_topic(cls, value: str) -> str:
        return _require_text(value, "Topic")


class WisdomResponse(BaseModel):
    """Generated wisdom with the topic and resolved style echoed back."""

    model_config = ConfigDict(extra="forbid")

    wisdom: str
    topic: str
    style: str


class DiscourseRequest(BaseModel):
    """Incoming payload for a streamed discourse."""

    model_config = ConfigDict(extra="forbid")

    topic: str
    questions: List[str] = Field(
        ..., max_length=3, description="Up to 3 questions to explore"
    )

    @field_validator("topic")
    @classmethod
    def _validate_topic(cls, value: str) -> str:
        return _require_text(value, "Topic")


class DiscourseChunk(BaseModel):
    """One text fragment of a discourse stream."""

    model_config = ConfigDict(extra="forbid")

    chunk: str


class PaymentRequirement(BaseModel):
    """Price an entrypoint declares; verification belongs to the x402 middleware."""

    model_config = ConfigDict(extra="forbid")

    required: bool = True
    amount: float
    currency: str = "USD"


class EntrypointDescriptor(BaseModel):
    """Public description of one entrypoint, its schemas and its price."""

    model_config = ConfigDict(extra="forbid")

    key: str
    path: str
    method: str
    description: str
    streaming: bool = False
    payment: Optional[PaymentRequirement] = None
    input_schema: Dict[str, Any] = Field(default_factory=dict)
    output_schema: Dict[str, Any] = Field(default_factory=dict)


class AgentManifest(BaseModel):
    """Self-description served to agents discovering this service."""

    model_config = ConfigDict(extra="forbid")

    name: str
    version: str
    description: str
    entrypoints: List[EntrypointDescriptor]
