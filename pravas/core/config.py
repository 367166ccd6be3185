"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Pravas application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        stt_provider: Speech-to-text backend ("openai" or "local").
        translation_provider: Translation backend ("openai", "claude", "ollama").
        source_language: ISO 639-1 code of the spoken language in memos.
        target_language: ISO 639-1 code transcripts are translated into.
        database_url: Async SQLAlchemy connection string for SQLite.
        auth_tokens: Static bearer token -> "user_id:email" map.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Providers ---
    stt_provider: str = "openai"
    translation_provider: str = "openai"

    # OpenAI (hosted Whisper + chat completions)
    openai_api_key: str = ""
    openai_stt_model: str = "whisper-1"
    openai_translation_model: str = "gpt-4o"

    # Claude (Anthropic API) translator
    claude_api_key: str = ""
    claude_model: str = "claude-sonnet-4-20250514"

    # Ollama (local LLM) translator
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.2"

    # faster-whisper (local STT)
    whisper_model: str = "base"  # Model size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"

    # --- Languages ---
    source_language: str = "mr"
    target_language: str = "en"

    # --- Pipeline ---
    fetch_timeout_seconds: float = 60.0  # Audio download timeout

    # --- Recording (client) ---
    recording_mime: str = "audio/ogg"
    recording_sample_rate: int = 16000
    recording_channels: int = 1
    api_base_url: str = "http://localhost:8000"
    api_token: str = ""  # Bearer token the CLI sends to the API

    # --- Auth ---
    # Maps bearer tokens to "user_id:email". Empty = nobody can sign in.
    auth_tokens: dict[str, str] = {}

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = ["http://localhost:3000"]

    # --- Storage ---
    database_url: str = "sqlite+aiosqlite:///data/pravas.db"
    audio_dir: str = "data/audio"  # Object storage root for uploaded blobs
    public_base_url: str = "http://localhost:8000"  # Prefix for public audio URLs


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
