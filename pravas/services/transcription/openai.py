"""
Hosted Whisper (``whisper-1``) through the OpenAI audio API.

The recording is uploaded as a named file so the API can infer the
container from its extension; the language is forced rather than detected
because short Marathi memos are easily mistaken for Hindi.
"""

import logging

from openai import APIConnectionError, APITimeoutError, AsyncOpenAI, RateLimitError

from pravas.core.config import get_settings
from pravas.core.exceptions import TranscriptionError
from pravas.core.utils import extension_for_mime
from pravas.services.providers import retry_transient, sdk_errors
from pravas.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)


class OpenAISTT(BaseSTT):
    """Speech-to-text via ``client.audio.transcriptions.create``.

    Args:
        api_key: OpenAI key; defaults to ``Settings.openai_api_key``.
        model: Transcription model; defaults to ``Settings.openai_stt_model``.
        client: Pre-built ``AsyncOpenAI`` (shared with the translator, or a test double).
    """

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        settings = get_settings()
        self._api_key = api_key or settings.openai_api_key
        self._model = model or settings.openai_stt_model
        self._client = client or AsyncOpenAI(api_key=self._api_key)

    @retry_transient
    async def _call_api(self, audio: bytes, language: str, mime_type: str) -> str:
        upload = (f"audio{extension_for_mime(mime_type)}", audio, mime_type)
        with sdk_errors(
            "OpenAI transcription",
            timeout=(APITimeoutError,),
            connection=(APIConnectionError, RateLimitError),
        ):
            response = await self._client.audio.transcriptions.create(
                model=self._model,
                file=upload,
                language=language,
            )
        return response.text

    async def transcribe(self, audio: bytes, language: str, **kwargs) -> str:
        mime_type = kwargs.get("mime_type", "audio/webm")
        logger.debug("Uploading %d bytes (%s) to %s", len(audio), mime_type, self._model)
        try:
            text = await self._call_api(audio, language, mime_type)
        except Exception as exc:
            raise TranscriptionError(detail=f"OpenAI transcription failed: {exc}") from exc
        return text.strip()
