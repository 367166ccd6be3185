"""
Translation module - transcript translation abstraction layer.

Factory function for creating translator instances based on provider configuration.
"""

from .base import BaseTranslator

__all__ = ["BaseTranslator", "create_translator"]


def create_translator(provider: str, **kwargs) -> BaseTranslator:
    """
    Factory function to create a translator instance based on provider.

    Args:
        provider: Translation provider name ("openai", "claude", "ollama")
        **kwargs: Provider-specific configuration

    Returns:
        BaseTranslator implementation instance

    Raises:
        ValueError: If provider is unknown
    """
    if provider == "openai":
        from .openai import OpenAITranslator

        return OpenAITranslator(**kwargs)
    elif provider == "claude":
        from .claude import ClaudeTranslator

        return ClaudeTranslator(**kwargs)
    elif provider == "ollama":
        from .ollama import OllamaTranslator

        return OllamaTranslator(**kwargs)
    else:
        raise ValueError(f"Unknown translation provider: {provider}")
