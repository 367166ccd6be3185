"""
Translation with Claude through ``anthropic.AsyncAnthropic``.

Concurrent translations share one semaphore so a burst of re-triggered
entries stays under the account's rate limit.
"""

import asyncio
import logging

from anthropic import (
    APIConnectionError,
    APITimeoutError,
    AsyncAnthropic,
    RateLimitError,
)

from pravas.core.config import get_settings
from pravas.core.exceptions import TranslationError
from pravas.services.providers import retry_transient, sdk_errors
from pravas.services.translation.base import BaseTranslator, translation_system_prompt

logger = logging.getLogger(__name__)


class ClaudeTranslator(BaseTranslator):
    """Claude Messages API translator."""

    name = "claude"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.3,
        max_concurrent: int = 5,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.claude_api_key
        self._model = model or settings.claude_model
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self._client = AsyncAnthropic(api_key=self._api_key)

    @retry_transient
    async def _call_api(self, text: str, system: str, temperature: float) -> str:
        async with self._semaphore:
            with sdk_errors(
                "Claude",
                timeout=(APITimeoutError,),
                connection=(APIConnectionError, RateLimitError),
            ):
                message = await self._client.messages.create(
                    model=self._model,
                    max_tokens=self._max_tokens,
                    temperature=temperature,
                    system=system,
                    messages=[{"role": "user", "content": text}],
                )
        return message.content[0].text

    async def translate(self, text: str, source_lang: str, target_lang: str, **kwargs) -> str:
        logger.debug("Translating %d chars %s->%s with %s", len(text), source_lang, target_lang, self._model)
        try:
            result = await self._call_api(
                text,
                system=translation_system_prompt(source_lang, target_lang),
                temperature=kwargs.get("temperature", self._temperature),
            )
        except Exception as exc:
            raise TranslationError(detail=f"Claude translation failed: {exc}") from exc
        return result.strip()
