"""ABOUTME: Tests for Pydantic API models.
ABOUTME: Ensures validation and serialization rules."""

import pytest
from pydantic import ValidationError

from wisdom_agent import models


def test_wisdom_request_defaults_to_philosophical():
    payload = models.WisdomRequest(topic="life")
    assert payload.style == "philosophical"


def test_wisdom_request_keeps_topic_verbatim():
    payload = models.WisdomRequest(topic="  inner peace ")
    assert payload.topic == "  inner peace "


def test_wisdom_request_requires_text():
    with pytest.raises(ValidationError):
        models.WisdomRequest(topic="   ")


def test_wisdom_request_rejects_unknown_style():
    with pytest.raises(ValidationError):
        models.WisdomRequest(topic="life", style="sarcastic")


def test_wisdom_request_rejects_extra_fields():
    with pytest.raises(ValidationError):
        models.WisdomRequest(topic="life", mood="sunny")


def test_discourse_request_accepts_three_questions():
    payload = models.DiscourseRequest(topic="career", questions=["a", "b", "c"])
    assert payload.questions == ["a", "b", "c"]


def test_discourse_request_accepts_no_questions():
    payload = models.DiscourseRequest(topic="career", questions=[])
    assert payload.questions == []


def test_discourse_request_rejects_fourth_question():
    with pytest.raises(ValidationError):
        models.DiscourseRequest(topic="career", questions=["a", "b", "c", "d"])


def test_topics_response_serializes_camel_case_price():
    response = models.TopicsResponse(topics=["life"], price_usd=0.01)
    assert response.model_dump(by_alias=True) == {"topics": ["life"], "priceUsd": 0.01}
