"""Offline speech-to-text with faster-whisper.

Models are expensive to load, so they are cached per
(size, device, compute type) for the life of the process.  Decoding is
CPU-bound and runs in a worker thread.
"""

import asyncio
import io
import logging

from faster_whisper import WhisperModel

from pravas.core.config import get_settings
from pravas.core.exceptions import TranscriptionError
from pravas.services.transcription.base import BaseSTT

logger = logging.getLogger(__name__)

_model_cache: dict[tuple[str, str, str], WhisperModel] = {}


class WhisperSTT(BaseSTT):
    """faster-whisper (CTranslate2) transcription of encoded audio bytes.

    Args:
        model_size: tiny, base, small, medium, large-v3 ...
        device: "cpu" or "cuda".
        compute_type: CTranslate2 quantisation, e.g. "int8" or "float16".
        settings: Settings override; defaults to ``get_settings()``.
    """

    name = "local"

    def __init__(
        self,
        model_size: str | None = None,
        device: str | None = None,
        compute_type: str | None = None,
        settings=None,
    ) -> None:
        settings = settings or get_settings()
        self._key = (
            model_size or settings.whisper_model,
            device or settings.whisper_device,
            compute_type or settings.whisper_compute_type,
        )

    def _get_model(self) -> WhisperModel:
        model = _model_cache.get(self._key)
        if model is None:
            size, device, compute_type = self._key
            logger.info("Loading Whisper %s on %s (%s)", size, device, compute_type)
            model = WhisperModel(size, device=device, compute_type=compute_type)
            _model_cache[self._key] = model
        return model

    def _decode(self, audio: bytes, language: str, beam_size: int, vad_filter: bool) -> list[str]:
        # segments are lazy; consume them on this thread
        segments, _info = self._get_model().transcribe(
            io.BytesIO(audio),
            language=language,
            beam_size=beam_size,
            vad_filter=vad_filter,
        )
        return [text for text in (seg.text.strip() for seg in segments) if text]

    async def transcribe(self, audio: bytes, language: str, **kwargs) -> str:
        """Transcribe *audio*; ``beam_size`` and ``vad_filter`` may be passed."""
        try:
            texts = await asyncio.to_thread(
                self._decode,
                audio,
                language,
                kwargs.get("beam_size", 5),
                kwargs.get("vad_filter", True),
            )
        except Exception as exc:
            raise TranscriptionError(detail=f"Whisper transcription failed: {exc}") from exc
        return " ".join(texts)
