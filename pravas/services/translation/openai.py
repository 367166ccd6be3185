"""
Translation with an OpenAI chat model (``gpt-4o`` by default).
"""

import logging

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError

from pravas.core.config import get_settings
from pravas.core.exceptions import TranslationError
from pravas.services.providers import retry_transient, sdk_errors
from pravas.services.translation.base import BaseTranslator, translation_system_prompt

logger = logging.getLogger(__name__)


class OpenAITranslator(BaseTranslator):
    """Chat-completions translator.

    Args:
        api_key: OpenAI key; defaults to ``Settings.openai_api_key``.
        model: Chat model; defaults to ``Settings.openai_translation_model``.
        temperature: Sampling temperature; kept low for faithful output.
        client: Pre-built ``AsyncOpenAI`` (tests pass a mock).
    """

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        temperature: float = 0.3,
        client: AsyncOpenAI | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_translation_model
        self._temperature = temperature
        self._client = client or AsyncOpenAI(api_key=self._api_key)

    @retry_transient
    async def _call_api(self, messages: list[dict[str, str]], temperature: float) -> str:
        with sdk_errors(
            "OpenAI chat",
            timeout=(APITimeoutError,),
            connection=(APIConnectionError, RateLimitError),
        ):
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=messages,
                temperature=temperature,
            )
        content = response.choices[0].message.content
        if not content:
            raise RuntimeError("OpenAI returned an empty translation")
        return content

    async def translate(self, text: str, source_lang: str, target_lang: str, **kwargs) -> str:
        logger.debug("Translating %d chars %s->%s with %s", len(text), source_lang, target_lang, self._model)
        messages = [
            {"role": "system", "content": translation_system_prompt(source_lang, target_lang)},
            {"role": "user", "content": text},
        ]
        try:
            result = await self._call_api(messages, kwargs.get("temperature", self._temperature))
        except Exception as exc:
            raise TranslationError(detail=f"OpenAI translation failed: {exc}") from exc
        return result.strip()
