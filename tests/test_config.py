"""ABOUTME: Tests for Wisdom Agent configuration settings.
ABOUTME: Validates pricing defaults, parsing fallbacks and immutability."""

from unittest.mock import patch
import os

import pytest
from pydantic import ValidationError

from wisdom_agent.config import DEFAULT_WISDOM_PRICE_USD, Settings


@pytest.fixture()
def base_env() -> dict:
    return {
        "OPENAI_API_KEY": "sk-test",
        "PAYMENTS_RECEIVABLE_ADDRESS": "0x209693Bc6afc0C5328bA36FaF03C514EF312287C",
    }


def _load_settings(env: dict) -> Settings:
    with patch.dict(os.environ, env, clear=True):
        return Settings(_env_file=None)


def test_settings_load_required_fields(base_env):
    settings = _load_settings(base_env)

    assert settings.openai_api_key == "sk-test"
    assert settings.payments_receivable_address.startswith("0x2096")
    assert settings.port == 3000
    assert settings.completion_model == "gpt-4o-mini"
    assert settings.completions_url == "https://api.openai.com/v1/chat/completions"


def test_settings_require_api_key():
    with pytest.raises(ValidationError):
        _load_settings({})


def test_price_defaults_when_unset(base_env):
    settings = _load_settings(base_env)

    assert settings.wisdom_price_usd == DEFAULT_WISDOM_PRICE_USD


def test_price_reads_environment(base_env):
    settings = _load_settings({**base_env, "WISDOM_PRICE_USD": "0.25"})

    assert settings.wisdom_price_usd == pytest.approx(0.25)


@pytest.mark.parametrize("raw", ["not-a-number", "", "nan", "-1", "0", "inf", "-inf"])
def test_price_falls_back_when_unparseable(base_env, raw):
    settings = _load_settings({**base_env, "WISDOM_PRICE_USD": raw})

    assert settings.wisdom_price_usd == DEFAULT_WISDOM_PRICE_USD


@pytest.mark.parametrize("raw", ["0.01", "0.07", "1.5"])
def test_discourse_price_is_double(base_env, raw):
    settings = _load_settings({**base_env, "WISDOM_PRICE_USD": raw})

    assert settings.discourse_price_usd == settings.wisdom_price_usd * 2


def test_settings_are_frozen(base_env):
    settings = _load_settings(base_env)

    with pytest.raises(ValidationError):
        settings.wisdom_price_usd = 5.0


def test_base_url_trailing_slash_is_ignored(base_env):
    settings = _load_settings({**base_env, "OPENAI_BASE_URL": "http://localhost:8080/v1/"})

    assert settings.completions_url == "http://localhost:8080/v1/chat/completions"
