"""Unit tests for the OpenAI hosted Whisper STT provider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from openai import APIConnectionError

from pravas.core.exceptions import TranscriptionError
from pravas.services.transcription.openai import OpenAISTT


def _mock_settings(**overrides):
    """Return a fake Settings object with sensible defaults."""
    defaults = {
        "openai_api_key": "sk-test-key",
        "openai_stt_model": "whisper-1",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


@pytest.fixture
def mock_client():
    """Return an ``AsyncMock`` mimicking ``AsyncOpenAI``."""
    client = AsyncMock()
    client.audio.transcriptions.create = AsyncMock(
        return_value=SimpleNamespace(text="  आज पाऊस पडला.  ")
    )
    return client


@pytest.fixture
def stt(mock_client):
    with patch("pravas.services.transcription.openai.get_settings", return_value=_mock_settings()):
        instance = OpenAISTT(client=mock_client)
    return instance


class TestInit:
    def test_defaults_from_settings(self):
        with patch("pravas.services.transcription.openai.get_settings", return_value=_mock_settings()):
            with patch("pravas.services.transcription.openai.AsyncOpenAI") as mock_cls:
                stt = OpenAISTT()

        assert stt._model == "whisper-1"
        mock_cls.assert_called_once_with(api_key="sk-test-key")


class TestTranscribe:
    async def test_returns_stripped_text(self, stt):
        assert await stt.transcribe(b"audio", "mr") == "आज पाऊस पडला."

    async def test_sends_language_and_named_file(self, stt, mock_client):
        """The upload filename carries an extension matching the mime type."""
        await stt.transcribe(b"audio", "mr", mime_type="audio/ogg")

        kwargs = mock_client.audio.transcriptions.create.call_args.kwargs
        assert kwargs["model"] == "whisper-1"
        assert kwargs["language"] == "mr"
        assert kwargs["file"] == ("audio.ogg", b"audio", "audio/ogg")

    async def test_defaults_to_webm(self, stt, mock_client):
        await stt.transcribe(b"audio", "mr")
        assert mock_client.audio.transcriptions.create.call_args.kwargs["file"][0] == "audio.webm"

    async def test_unexpected_error_wrapped(self, stt, mock_client):
        mock_client.audio.transcriptions.create.side_effect = ValueError("bad audio")
        with pytest.raises(TranscriptionError, match="bad audio"):
            await stt.transcribe(b"audio", "mr")
        assert mock_client.audio.transcriptions.create.await_count == 1

    async def test_connection_error_retried_then_wrapped(self, stt, mock_client):
        mock_client.audio.transcriptions.create.side_effect = APIConnectionError(request=MagicMock())
        with pytest.raises(TranscriptionError):
            await stt.transcribe(b"audio", "mr")
        assert mock_client.audio.transcriptions.create.await_count == 3
