"""
Translation with a local model served by Ollama.

Useful offline or when memos should not leave the machine; quality on
Marathi depends heavily on the model pulled.
"""

import logging

from ollama import AsyncClient

from pravas.core.config import get_settings
from pravas.core.exceptions import TranslationError
from pravas.services.providers import retry_transient, sdk_errors
from pravas.services.translation.base import BaseTranslator, translation_system_prompt

logger = logging.getLogger(__name__)


class OllamaTranslator(BaseTranslator):
    """``ollama.AsyncClient.chat`` translator.

    Args:
        base_url: Ollama server; defaults to ``Settings.ollama_base_url``.
        model: Model tag; defaults to ``Settings.ollama_model``.
        temperature: Sampling temperature.
    """

    name = "ollama"

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.3,
    ) -> None:
        settings = get_settings()
        self._base_url = base_url or settings.ollama_base_url
        self._model = model or settings.ollama_model
        self._temperature = temperature
        self._client = AsyncClient(host=self._base_url)

    @retry_transient
    async def _call_api(self, messages: list[dict[str, str]], temperature: float) -> str:
        # the client raises builtin ConnectionError/TimeoutError for transport failures
        with sdk_errors(
            f"Ollama ({self._base_url})",
            timeout=(TimeoutError,),
            connection=(ConnectionError,),
        ):
            response = await self._client.chat(
                model=self._model,
                messages=messages,
                options={"temperature": temperature},
            )
        return response.message.content

    async def translate(self, text: str, source_lang: str, target_lang: str, **kwargs) -> str:
        logger.debug("Translating %d chars %s->%s with %s", len(text), source_lang, target_lang, self._model)
        messages = [
            {"role": "system", "content": translation_system_prompt(source_lang, target_lang)},
            {"role": "user", "content": text},
        ]
        try:
            result = await self._call_api(messages, kwargs.get("temperature", self._temperature))
        except Exception as exc:
            raise TranslationError(detail=f"Ollama translation failed: {exc}") from exc
        return result.strip()
