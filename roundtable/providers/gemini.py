"""Gemini generation service using google-genai SDK with native async."""

import logging
import os
import time

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types

from config.config_loader import ServiceConfig
from roundtable.models import ServiceResponse
from roundtable.providers.base import FatalServiceError, GenerationService, classify_status

logger = logging.getLogger(__name__)


class GeminiService(GenerationService):
    """Google Gemini service via google-genai SDK."""

    def __init__(self, config: ServiceConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env, "").strip()
        if not api_key:
            raise FatalServiceError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = genai.Client(api_key=api_key)

    def name(self) -> str:
        return self._config.name

    def model_string(self) -> str:
        return self._config.model

    async def generate(self, prompt: str) -> ServiceResponse:
        start = time.monotonic()
        try:
            response = await self._client.aio.models.generate_content(
                model=self._config.model,
                contents=prompt,
                config=genai_types.GenerateContentConfig(
                    max_output_tokens=self._config.max_tokens,
                ),
            )
        except genai_errors.APIError as exc:
            raise classify_status(self._config.name, exc.code, str(exc)) from exc
        except Exception as exc:
            raise FatalServiceError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        token_count: int | None = None
        if response.usage_metadata:
            token_count = response.usage_metadata.total_token_count

        logger.info("Gemini call: %.2fs, %s tokens", latency, token_count)

        return ServiceResponse(
            provider=self._config.name,
            model=self._config.model,
            generated_text=response.text or None,
            latency_sec=latency,
            token_count=token_count,
        )
