"""
Abstract base class for translation providers.

Every translator (OpenAI chat, Claude, Ollama) turns source-language
transcript text into the target language while keeping the speaker's
tone, so the pipeline never branches on vendor.
"""

from abc import ABC, abstractmethod

LANGUAGE_NAMES = {
    "mr": "Marathi",
    "hi": "Hindi",
    "en": "English",
    "gu": "Gujarati",
    "ta": "Tamil",
    "te": "Telugu",
    "kn": "Kannada",
    "bn": "Bengali",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "ja": "Japanese",
    "ko": "Korean",
}


def language_name(code: str) -> str:
    """Return the English name for an ISO 639-1 code, or the code itself."""
    return LANGUAGE_NAMES.get(code.lower(), code)


def translation_system_prompt(source_lang: str, target_lang: str) -> str:
    """Instruction shared by all LLM translators."""
    return (
        "You are a helpful translator. "
        f"Translate the following {language_name(source_lang)} text to "
        f"{language_name(target_lang)}. Preserve the tone and nuance. "
        "Reply with the translation only."
    )


class BaseTranslator(ABC):
    """Interface that every translation provider must implement."""

    #: Short vendor tag persisted as part of ``transcription_provider``.
    name: str = "unknown"

    @abstractmethod
    async def translate(self, text: str, source_lang: str, target_lang: str, **kwargs) -> str:
        """Translate *text* from *source_lang* to *target_lang*.

        Args:
            text: Source-language transcript.
            source_lang: ISO 639-1 code of *text*.
            target_lang: ISO 639-1 code to translate into.
            **kwargs: Provider-specific options (temperature, max_tokens, etc.).

        Returns:
            The translated text.

        Raises:
            TranslationError: If the provider fails.
        """
