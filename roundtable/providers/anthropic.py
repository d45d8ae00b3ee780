"""Anthropic Claude generation service using anthropic SDK with native async."""

import logging
import os
import time

import anthropic as anthropic_sdk

from config.config_loader import ServiceConfig
from roundtable.models import ServiceResponse
from roundtable.providers.base import (
    OVERLOAD_STATUS_CODES,
    FatalServiceError,
    GenerationService,
    classify_status,
)

logger = logging.getLogger(__name__)

# Anthropic reports overload as 529 in addition to 503
_ANTHROPIC_OVERLOAD_CODES = OVERLOAD_STATUS_CODES | {529}


class AnthropicService(GenerationService):
    """Anthropic Claude service via anthropic SDK."""

    def __init__(self, config: ServiceConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise FatalServiceError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = anthropic_sdk.AsyncAnthropic(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def generate(self, prompt: str) -> ServiceResponse:
        start = time.monotonic()
        try:
            response = await self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic_sdk.APIStatusError as exc:
            raise classify_status(
                self._config.name, exc.status_code, str(exc), _ANTHROPIC_OVERLOAD_CODES
            ) from exc
        except Exception as exc:
            raise FatalServiceError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        text_blocks = [b.text for b in (response.content or []) if b.type == "text"]
        content = "\n".join(text_blocks)

        token_count: int | None = None
        if response.usage:
            token_count = response.usage.input_tokens + response.usage.output_tokens

        logger.info("Anthropic call: %.2fs, %s tokens", latency, token_count)

        return ServiceResponse(
            provider=self._config.name,
            model=self._config.model,
            generated_text=content or None,
            latency_sec=latency,
            token_count=token_count,
        )
