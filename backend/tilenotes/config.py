from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        extra="ignore",
        case_sensitive=False,
    )

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # API
    api_prefix: str = "/api/v1"
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    cors_origin_regex: str | None = None
    trusted_hosts: list[str] = ["*"]
    root_path: str = ""

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str
    storage_bucket: str = "attachments"
    oauth_redirect_url: str | None = None

    # OpenAI
    openai_api_key: str
    enrichment_model: str = "gpt-5-nano"
    enrichment_model_reasoning: str = "low"
    vision_model: str = "gpt-4o-mini"
    transcription_model: str = "whisper-1"
    openai_timeout: float = 30.0  # seconds; a failed call falls back to heuristics instead of retrying

    # Enrichment
    enrichment_settle_delay: float = 3.0  # seconds between the last edit and the AI call
    enrichment_min_content_length: int = 10
    fallback_summary_length: int = 100
    max_ai_tags: int = 5
    max_extracted_tasks: int = 5

    # Notes
    default_note_color: str = "#FFFACD"
    note_list_limit: int = 500
    workspace_cache_size: int = 256  # users whose notes and tasks stay cached per process

    # Authentication security settings
    max_login_attempts: int = 5  # Maximum failed login attempts before rate limiting
    login_attempt_window: int = 300  # Time window for login attempts (5 minutes)
    enable_rate_limiting: bool = True


settings = Settings()
