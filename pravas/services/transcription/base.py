"""
Abstract base class for Speech-to-Text providers.

All STT implementations (OpenAI hosted Whisper, local faster-whisper)
must implement this interface, enabling provider-agnostic transcription
in the pipeline.
"""

from abc import ABC, abstractmethod


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    #: Short vendor tag persisted as ``transcription_provider``.
    name: str = "unknown"

    @abstractmethod
    async def transcribe(self, audio: bytes, language: str, **kwargs) -> str:
        """Transcribe encoded audio spoken in *language* to text.

        Args:
            audio: Raw bytes of an encoded audio file (webm, ogg, wav...).
            language: ISO 639-1 code of the spoken language (e.g. "mr").
            **kwargs: Provider-specific options (``mime_type``, ``beam_size``...).

        Returns:
            The transcript in the source language.

        Raises:
            TranscriptionError: If the provider fails.
        """
