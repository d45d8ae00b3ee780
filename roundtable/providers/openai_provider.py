"""OpenAI generation service using openai SDK.

Also serves OpenAI-compatible endpoints (xAI Grok and similar) when the
config carries a ``base_url``.
"""

import logging
import os
import time

import openai
from openai import AsyncOpenAI

from config.config_loader import ServiceConfig
from roundtable.models import ServiceResponse
from roundtable.providers.base import FatalServiceError, GenerationService, classify_status

logger = logging.getLogger(__name__)


class OpenAIService(GenerationService):
    """OpenAI service via openai SDK."""

    def __init__(self, config: ServiceConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise FatalServiceError(config.name, f"Missing API key: {config.api_key_env}")
        if config.base_url:
            self._client = AsyncOpenAI(api_key=api_key, base_url=config.base_url)
        else:
            self._client = AsyncOpenAI(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def generate(self, prompt: str) -> ServiceResponse:
        start = time.monotonic()
        try:
            response = await self._client.chat.completions.create(
                model=self._config.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self._config.max_tokens,
            )
        except openai.APIStatusError as exc:
            raise classify_status(self._config.name, exc.status_code, str(exc)) from exc
        except Exception as exc:
            raise FatalServiceError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        content = choice.message.content if choice else None

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.total_tokens

        logger.info("OpenAI call: %.2fs, %s tokens", latency, token_count)

        return ServiceResponse(
            provider=self._config.name,
            model=self._config.model,
            generated_text=content or None,
            latency_sec=latency,
            token_count=token_count,
        )
