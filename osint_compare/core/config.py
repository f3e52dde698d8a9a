from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    app_env: str = "development"
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # CORS
    allowed_origins: str = "*"  # comma-separated, e.g. "https://app.example.com,https://admin.example.com"

    # Simulated tool calls (no real network traffic)
    simulated_min_delay_ms: int = 1000
    simulated_max_delay_ms: int = 3000
    simulated_failure_rate: float = 0.1  # 0.0–1.0

    # Per-tool call budget before the result is marked as timed out
    tool_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs


settings = Settings()


def validate_settings_for_production() -> None:
    """Validate critical settings. Called on startup in non-test environments."""
    errors: list[str] = []

    if settings.simulated_min_delay_ms < 0:
        errors.append("SIMULATED_MIN_DELAY_MS must not be negative")

    if settings.simulated_max_delay_ms < settings.simulated_min_delay_ms:
        errors.append("SIMULATED_MAX_DELAY_MS must be >= SIMULATED_MIN_DELAY_MS")

    if not 0.0 <= settings.simulated_failure_rate <= 1.0:
        errors.append("SIMULATED_FAILURE_RATE must be between 0 and 1")

    if settings.tool_timeout_seconds <= 0:
        errors.append("TOOL_TIMEOUT_SECONDS must be positive")

    if settings.app_env == "production":
        if settings.allowed_origins == "*":
            errors.append("ALLOWED_ORIGINS must not be '*' in production")
        if settings.app_debug:
            errors.append("APP_DEBUG must be false in production")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))
