"""Tests for service adapters and error classification in roundtable/providers."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import openai
import pytest
from google.genai import errors as genai_errors

from config.config_loader import ServiceConfig
from roundtable.providers.anthropic import AnthropicService
from roundtable.providers.base import (
    FatalServiceError,
    GenerationServiceError,
    RetriesExhaustedError,
    RetryableServiceError,
    classify_status,
)
from roundtable.providers.gemini import GeminiService
from roundtable.providers.openai_provider import OpenAIService


def test_classify_503_is_retryable():
    err = classify_status("gemini", 503, "UNAVAILABLE")
    assert isinstance(err, RetryableServiceError)
    assert "[gemini]" in str(err)


@pytest.mark.parametrize("status", [400, 401, 404, 429, 500, None])
def test_classify_other_statuses_are_fatal(status):
    assert isinstance(classify_status("gemini", status, "nope"), FatalServiceError)


def test_classify_custom_overload_codes():
    err = classify_status("claude", 529, "overloaded_error", frozenset({503, 529}))
    assert isinstance(err, RetryableServiceError)


def test_retries_exhausted_is_retryable_class():
    last = RetryableServiceError("mock", "503")
    err = RetriesExhaustedError("mock", 3, last)
    assert isinstance(err, RetryableServiceError)
    assert isinstance(err, GenerationServiceError)
    assert "3 attempts" in str(err)
    assert err.last_error is last


def test_missing_api_key_raises(sample_service_config, monkeypatch):
    monkeypatch.delenv("TEST_OPENAI_KEY", raising=False)
    with pytest.raises(FatalServiceError, match="Missing API key"):
        OpenAIService(sample_service_config)


def _status_error(code: int) -> openai.APIStatusError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    response = httpx.Response(code, request=request)
    return openai.APIStatusError(f"Error code: {code}", response=response, body=None)


@pytest.fixture
def openai_service(sample_service_config, monkeypatch) -> OpenAIService:
    monkeypatch.setenv("TEST_OPENAI_KEY", "sk-test")
    service = OpenAIService(sample_service_config)
    service._client = MagicMock()
    return service


async def test_openai_503_maps_to_retryable(openai_service):
    openai_service._client.chat.completions.create = AsyncMock(side_effect=_status_error(503))
    with pytest.raises(RetryableServiceError):
        await openai_service.generate("prompt")


async def test_openai_400_maps_to_fatal(openai_service):
    openai_service._client.chat.completions.create = AsyncMock(side_effect=_status_error(400))
    with pytest.raises(FatalServiceError):
        await openai_service.generate("prompt")


async def test_openai_connection_failure_is_fatal(openai_service):
    openai_service._client.chat.completions.create = AsyncMock(side_effect=RuntimeError("socket closed"))
    with pytest.raises(FatalServiceError, match="socket closed"):
        await openai_service.generate("prompt")


async def test_openai_success_returns_text(openai_service):
    completion = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content="Hello there."))],
        usage=SimpleNamespace(total_tokens=12),
    )
    openai_service._client.chat.completions.create = AsyncMock(return_value=completion)

    response = await openai_service.generate("prompt")

    assert response.generated_text == "Hello there."
    assert response.token_count == 12
    assert response.provider == "openai"
    assert response.model == "gpt-4o"


async def test_openai_empty_choices_gives_none(openai_service):
    completion = SimpleNamespace(choices=[], usage=None)
    openai_service._client.chat.completions.create = AsyncMock(return_value=completion)
    response = await openai_service.generate("prompt")
    assert response.generated_text is None
    assert response.token_count is None


async def test_openai_529_is_not_overload(openai_service):
    """529 is Anthropic's overload status only."""
    openai_service._client.chat.completions.create = AsyncMock(side_effect=_status_error(529))
    with pytest.raises(FatalServiceError):
        await openai_service.generate("prompt")


# --- Gemini ---

def _gemini_config() -> ServiceConfig:
    return ServiceConfig(
        name="gemini", sdk="google-genai", model="gemini-2.5-flash",
        api_key_env="TEST_GEMINI_KEY", max_tokens=1024,
    )


def _gemini_error(code: int) -> genai_errors.APIError:
    return genai_errors.APIError(
        code, {"error": {"code": code, "message": "The model is overloaded.", "status": "UNAVAILABLE"}}
    )


@pytest.fixture
def gemini_service(monkeypatch) -> GeminiService:
    monkeypatch.setenv("TEST_GEMINI_KEY", "test-key")
    service = GeminiService(_gemini_config())
    service._client = MagicMock()
    return service


async def test_gemini_503_maps_to_retryable(gemini_service):
    gemini_service._client.aio.models.generate_content = AsyncMock(side_effect=_gemini_error(503))
    with pytest.raises(RetryableServiceError, match=r"\[gemini\]"):
        await gemini_service.generate("prompt")


@pytest.mark.parametrize("code", [400, 429, 529])
async def test_gemini_other_codes_map_to_fatal(gemini_service, code):
    gemini_service._client.aio.models.generate_content = AsyncMock(side_effect=_gemini_error(code))
    with pytest.raises(FatalServiceError):
        await gemini_service.generate("prompt")


async def test_gemini_success_returns_text(gemini_service):
    response = SimpleNamespace(text="Four score.", usage_metadata=SimpleNamespace(total_token_count=7))
    gemini_service._client.aio.models.generate_content = AsyncMock(return_value=response)

    result = await gemini_service.generate("prompt")

    assert result.generated_text == "Four score."
    assert result.token_count == 7
    assert result.model == "gemini-2.5-flash"


async def test_gemini_empty_text_gives_none(gemini_service):
    response = SimpleNamespace(text=None, usage_metadata=None)
    gemini_service._client.aio.models.generate_content = AsyncMock(return_value=response)
    result = await gemini_service.generate("prompt")
    assert result.generated_text is None
    assert result.token_count is None


def test_gemini_missing_api_key_raises(monkeypatch):
    monkeypatch.delenv("TEST_GEMINI_KEY", raising=False)
    with pytest.raises(FatalServiceError, match="Missing API key"):
        GeminiService(_gemini_config())


# --- Anthropic ---

def _anthropic_error(code: int) -> anthropic.APIStatusError:
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    response = httpx.Response(code, request=request)
    return anthropic.APIStatusError(f"Error code: {code}", response=response, body=None)


@pytest.fixture
def anthropic_service(monkeypatch) -> AnthropicService:
    monkeypatch.setenv("TEST_CLAUDE_KEY", "sk-ant-test")
    config = ServiceConfig(
        name="claude", sdk="anthropic", model="claude-sonnet-4-20250514",
        api_key_env="TEST_CLAUDE_KEY", max_tokens=1024,
    )
    service = AnthropicService(config)
    service._client = MagicMock()
    return service


@pytest.mark.parametrize("code", [503, 529])
async def test_anthropic_overload_codes_map_to_retryable(anthropic_service, code):
    anthropic_service._client.messages.create = AsyncMock(side_effect=_anthropic_error(code))
    with pytest.raises(RetryableServiceError):
        await anthropic_service.generate("prompt")


async def test_anthropic_400_maps_to_fatal(anthropic_service):
    anthropic_service._client.messages.create = AsyncMock(side_effect=_anthropic_error(400))
    with pytest.raises(FatalServiceError):
        await anthropic_service.generate("prompt")


async def test_anthropic_joins_text_blocks(anthropic_service):
    message = SimpleNamespace(
        content=[
            SimpleNamespace(type="text", text="Ask not."),
            SimpleNamespace(type="tool_use", text=None),
            SimpleNamespace(type="text", text="Ask what you can do."),
        ],
        usage=SimpleNamespace(input_tokens=5, output_tokens=9),
    )
    anthropic_service._client.messages.create = AsyncMock(return_value=message)

    result = await anthropic_service.generate("prompt")

    assert result.generated_text == "Ask not.\nAsk what you can do."
    assert result.token_count == 14


async def test_anthropic_empty_content_gives_none(anthropic_service):
    message = SimpleNamespace(content=[], usage=None)
    anthropic_service._client.messages.create = AsyncMock(return_value=message)
    result = await anthropic_service.generate("prompt")
    assert result.generated_text is None
