from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_env: str = "development"
    app_debug: bool = False
    app_version: str = "1.0.0"
    app_host: str = "0.0.0.0"
    app_port: int = 3000

    # CORS
    allowed_origins: str = "*"  # comma-separated, e.g. "https://museum.example.com,https://cms.example.com"

    # Reject unknown model identifiers instead of falling back to OpenAI
    strict_model_routing: bool = False

    # Provider calls
    description_max_tokens: int = 250
    provider_timeout_seconds: float = 60.0
    image_download_timeout_seconds: float = 30.0
    max_image_bytes: int = 20 * 1024 * 1024  # downloads past this are abandoned

    openai_api_url: str = "https://api.openai.com/v1/chat/completions"
    gemini_api_url: str = "https://generativelanguage.googleapis.com/v1beta/models"
    anthropic_api_url: str = "https://api.anthropic.com/v1/messages"
    anthropic_version: str = "2023-06-01"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    # Sentry
    sentry_dsn: str = ""  # leave empty to disable


settings = Settings()


def validate_settings_for_production() -> None:
    """Validate critical settings. Called on startup."""
    errors: list[str] = []

    if settings.description_max_tokens <= 0:
        errors.append("DESCRIPTION_MAX_TOKENS must be positive")

    if settings.provider_timeout_seconds <= 0 or settings.image_download_timeout_seconds <= 0:
        errors.append("PROVIDER_TIMEOUT_SECONDS and IMAGE_DOWNLOAD_TIMEOUT_SECONDS must be positive")

    if settings.max_image_bytes <= 0:
        errors.append("MAX_IMAGE_BYTES must be positive")

    if settings.app_env == "production":
        if settings.allowed_origins == "*":
            errors.append("ALLOWED_ORIGINS must not be '*' in production")
        if settings.app_debug:
            errors.append("APP_DEBUG must be false in production")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))
