"""Transcription pipeline: fetch -> transcribe -> translate -> persist.

Each ``run()`` is an independent, stateless invocation keyed by an entry
id.  Provider clients are built once at startup (see ``build_pipeline``)
and injected, so the pipeline never branches on vendor names.

Usage::

    pipeline = build_pipeline(get_settings())
    status = await pipeline.run(entry_id)
"""

import logging
from datetime import timedelta

from pravas.core.config import Settings
from pravas.core.exceptions import EntryBusyError, TranscriptionError
from pravas.core.models import TranscriptionStatus
from pravas.services.audio.fetcher import AudioFetcher
from pravas.services.storage.database import get_session
from pravas.services.storage.repository import DiaryRepository
from pravas.services.transcription import create_stt
from pravas.services.transcription.base import BaseSTT
from pravas.services.translation import create_translator
from pravas.services.translation.base import BaseTranslator

logger = logging.getLogger(__name__)


class TranscriptionPipeline:
    """Runs one entry through speech-to-text and translation.

    Args:
        stt: Speech-to-text provider.
        translator: Translation provider.
        fetcher: Downloads the entry's audio by URL.
        source_language: Language the memos are spoken in.
        target_language: Language transcripts are translated into.
        stale_after: How long a *processing* claim is honoured before another
            invocation may take the entry over.
    """

    def __init__(
        self,
        stt: BaseSTT,
        translator: BaseTranslator,
        fetcher: AudioFetcher,
        source_language: str = "mr",
        target_language: str = "en",
        stale_after: timedelta = timedelta(minutes=15),
    ) -> None:
        self._stt = stt
        self._translator = translator
        self._fetcher = fetcher
        self._source_language = source_language
        self._target_language = target_language
        self._stale_after = stale_after

    @property
    def provider_name(self) -> str:
        """Tag written to ``transcription_provider`` on success."""
        if self._stt.name == self._translator.name:
            return self._stt.name
        return f"{self._stt.name}+{self._translator.name}"

    async def run(self, entry_id: str) -> TranscriptionStatus:
        """Process one entry and persist the terminal status.

        Returns:
            ``done`` or ``failed``; the persisted entry carries the detail.

        Raises:
            EntryNotFoundError: The entry does not exist (nothing is written).
            EntryBusyError: Another invocation currently holds the entry.
        """
        async with get_session() as session:
            repo = DiaryRepository(session)
            claimed = await repo.claim_for_processing(entry_id, self._stale_after)
            entry = await repo.get_entry(entry_id)
            status = TranscriptionStatus(entry.transcription_status)
            audio_url = entry.audio_url
            audio_mime = entry.audio_mime

        if not claimed:
            if status is TranscriptionStatus.done:
                logger.info("Entry %s already transcribed; nothing to do", entry_id)
                return TranscriptionStatus.done
            raise EntryBusyError(entry_id)

        logger.info("Transcribing entry %s with %s", entry_id, self.provider_name)
        try:
            audio = await self._fetcher.fetch(audio_url)
            source_text = await self._stt.transcribe(
                audio, self._source_language, mime_type=audio_mime
            )
            if not source_text.strip():
                raise TranscriptionError("No speech detected in recording")
            target_text = await self._translator.translate(
                source_text, self._source_language, self._target_language
            )
        except Exception as exc:
            logger.warning("Transcription failed for entry %s: %s", entry_id, exc)
            async with get_session() as session:
                await DiaryRepository(session).fail_transcription(entry_id, str(exc))
            return TranscriptionStatus.failed

        async with get_session() as session:
            await DiaryRepository(session).complete_transcription(
                entry_id,
                transcript_source=source_text,
                transcript_target=target_text,
                provider=self.provider_name,
            )
        logger.info("Entry %s transcribed (%d chars)", entry_id, len(source_text))
        return TranscriptionStatus.done


def build_pipeline(settings: Settings) -> TranscriptionPipeline:
    """Construct providers from configuration and wire them into a pipeline."""
    return TranscriptionPipeline(
        stt=create_stt(provider=settings.stt_provider),
        translator=create_translator(provider=settings.translation_provider),
        fetcher=AudioFetcher(timeout=settings.fetch_timeout_seconds),
        source_language=settings.source_language,
        target_language=settings.target_language,
    )
