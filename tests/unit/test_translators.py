"""Unit tests for the OpenAI, Claude, and Ollama translators."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from pravas.core.exceptions import TranslationError
from pravas.services.translation.base import language_name, translation_system_prompt
from pravas.services.translation.claude import ClaudeTranslator
from pravas.services.translation.ollama import OllamaTranslator
from pravas.services.translation.openai import OpenAITranslator


def _mock_settings(**overrides):
    """Return a fake Settings object with sensible defaults."""
    defaults = {
        "openai_api_key": "sk-test-key",
        "openai_translation_model": "gpt-4o",
        "claude_api_key": "sk-ant-test",
        "claude_model": "claude-sonnet-4-20250514",
        "ollama_base_url": "http://localhost:11434",
        "ollama_model": "llama3.2",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


class TestPrompt:
    def test_marathi_to_english(self):
        prompt = translation_system_prompt("mr", "en")
        assert "Translate the following Marathi text to English" in prompt
        assert "Preserve the tone and nuance" in prompt

    def test_unknown_code_passes_through(self):
        assert language_name("xx") == "xx"


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------


def _chat_response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


@pytest.fixture
def openai_client():
    client = AsyncMock()
    client.chat.completions.create = AsyncMock(return_value=_chat_response(" It rained today. "))
    return client


@pytest.fixture
def openai_translator(openai_client):
    with patch("pravas.services.translation.openai.get_settings", return_value=_mock_settings()):
        instance = OpenAITranslator(client=openai_client)
    return instance


class TestOpenAITranslator:
    async def test_returns_stripped_translation(self, openai_translator):
        assert await openai_translator.translate("आज पाऊस पडला.", "mr", "en") == "It rained today."

    async def test_request_shape(self, openai_translator, openai_client):
        await openai_translator.translate("आज पाऊस पडला.", "mr", "en")

        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o"
        assert kwargs["messages"][0]["role"] == "system"
        assert "Marathi" in kwargs["messages"][0]["content"]
        assert kwargs["messages"][1] == {"role": "user", "content": "आज पाऊस पडला."}

    async def test_empty_content_is_error(self, openai_translator, openai_client):
        openai_client.chat.completions.create.return_value = _chat_response(None)
        with pytest.raises(TranslationError, match="empty translation"):
            await openai_translator.translate("text", "mr", "en")

    async def test_unexpected_error_wrapped(self, openai_translator, openai_client):
        openai_client.chat.completions.create.side_effect = ValueError("boom")
        with pytest.raises(TranslationError, match="boom"):
            await openai_translator.translate("text", "mr", "en")


# ---------------------------------------------------------------------------
# Claude
# ---------------------------------------------------------------------------


@pytest.fixture
def claude_client():
    client = AsyncMock()
    client.messages.create = AsyncMock(
        return_value=SimpleNamespace(content=[SimpleNamespace(text="We saw the fort.\n")])
    )
    return client


@pytest.fixture
def claude_translator(claude_client):
    with patch("pravas.services.translation.claude.get_settings", return_value=_mock_settings()):
        with patch("pravas.services.translation.claude.AsyncAnthropic", return_value=claude_client):
            instance = ClaudeTranslator()
    return instance


class TestClaudeTranslator:
    async def test_translates_with_system_prompt(self, claude_translator, claude_client):
        result = await claude_translator.translate("आम्ही किल्ला पाहिला.", "mr", "en")

        assert result == "We saw the fort."
        kwargs = claude_client.messages.create.call_args.kwargs
        assert kwargs["model"] == "claude-sonnet-4-20250514"
        assert kwargs["system"] == translation_system_prompt("mr", "en")
        assert kwargs["messages"] == [{"role": "user", "content": "आम्ही किल्ला पाहिला."}]

    async def test_error_wrapped(self, claude_translator, claude_client):
        claude_client.messages.create.side_effect = ValueError("bad request")
        with pytest.raises(TranslationError, match="Claude translation failed"):
            await claude_translator.translate("text", "mr", "en")


# ---------------------------------------------------------------------------
# Ollama
# ---------------------------------------------------------------------------


@pytest.fixture
def ollama_client():
    client = AsyncMock()
    client.chat = AsyncMock(
        return_value=SimpleNamespace(message=SimpleNamespace(content="The sea was calm."))
    )
    return client


@pytest.fixture
def ollama_translator(ollama_client):
    with patch("pravas.services.translation.ollama.get_settings", return_value=_mock_settings()):
        with patch("pravas.services.translation.ollama.AsyncClient", return_value=ollama_client):
            instance = OllamaTranslator()
    return instance


class TestOllamaTranslator:
    async def test_translates(self, ollama_translator, ollama_client):
        assert await ollama_translator.translate("समुद्र शांत होता.", "mr", "en") == "The sea was calm."
        assert ollama_client.chat.call_args.kwargs["model"] == "llama3.2"

    async def test_error_wrapped(self, ollama_translator, ollama_client):
        ollama_client.chat.side_effect = ValueError("model not found")
        with pytest.raises(TranslationError, match="Ollama translation failed"):
            await ollama_translator.translate("text", "mr", "en")
