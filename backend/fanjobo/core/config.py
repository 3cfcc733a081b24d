"""Application configuration loaded from environment variables.

Settings for the database, the admin API, the Telegram transport, the
Google Drive file store and the wizard engine. Uses pydantic-settings for
validation and .env file support.
"""

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Known insecure default password that must not be used in production
# Security: Runtime check in check_production_security() prevents use in production
_INSECURE_DEFAULT_PASSWORD = "fanjobo_dev_password"  # nosec B105


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    database_host: str = "localhost"
    database_port: int = 5432
    database_name: str = "fanjobo"
    database_user: str = "fanjobo_user"
    database_password: str = _INSECURE_DEFAULT_PASSWORD

    # API
    # 0.0.0.0 binds to all network interfaces (required for Docker containers)
    api_host: str = "0.0.0.0"  # nosec B104
    api_port: int = 8000
    allowed_origins: list[str] = ["http://localhost:3000"]

    # Application
    environment: str = "development"
    log_level: str = "INFO"

    # Admin API: required X-Admin-Key header on /api/v1 routes
    admin_api_key: SecretStr = SecretStr("")

    # Telegram transport
    telegram_bot_token: SecretStr = SecretStr("")
    telegram_use_webhook: bool = False
    telegram_webhook_domain: str = ""
    telegram_webhook_path: str = ""
    telegram_webhook_secret: SecretStr = SecretStr("")

    # Google Drive file store
    drive_root_folder_id: str = ""
    drive_university_folder_id: str = ""
    google_service_account_json_path: str = ""
    google_service_account_json_base64: SecretStr = SecretStr("")

    # Wizard engine
    wizard_session_ttl_minutes: int = 60
    wizard_upload_timeout_seconds: float = 60.0
    wizard_upload_max_size_mb: int = 20

    @property
    def database_url(self) -> str:
        """Async database URL for SQLAlchemy."""
        return (
            f"postgresql+asyncpg://{self.database_user}:{self.database_password}"
            f"@{self.database_host}:{self.database_port}/{self.database_name}"
        )

    @property
    def telegram_enabled(self) -> bool:
        """Whether a bot token is configured."""
        return bool(self.telegram_bot_token.get_secret_value())

    @property
    def webhook_path(self) -> str:
        """Route path that receives Telegram webhook updates.

        Falls back to /telegram/webhook/<token prefix> when no explicit
        path is configured.
        """
        if self.telegram_webhook_path:
            path = self.telegram_webhook_path
            return path if path.startswith("/") else f"/{path}"
        token = self.telegram_bot_token.get_secret_value() or "bot"
        return f"/telegram/webhook/{token.split(':')[0]}"

    @property
    def webhook_url(self) -> str:
        """Public URL registered with Telegram in webhook mode."""
        domain = self.telegram_webhook_domain.strip()
        if not domain.lower().startswith(("http://", "https://")):
            domain = f"https://{domain}"
        return f"{domain.rstrip('/')}{self.webhook_path}"

    @model_validator(mode="after")
    def check_production_security(self) -> "Settings":
        """Validate wizard limits, webhook mode and production requirements.

        Checks:
        - Session TTL, upload timeout and upload size must be positive
        - Webhook mode requires TELEGRAM_WEBHOOK_DOMAIN
        - Database password must not be the default in production
        - ADMIN_API_KEY must be set in production
        """
        if self.wizard_session_ttl_minutes <= 0:
            msg = (
                "WIZARD_SESSION_TTL_MINUTES must be positive. "
                f"Got: {self.wizard_session_ttl_minutes}"
            )
            raise ValueError(msg)
        if self.wizard_upload_timeout_seconds <= 0:
            msg = (
                "WIZARD_UPLOAD_TIMEOUT_SECONDS must be positive. "
                f"Got: {self.wizard_upload_timeout_seconds}"
            )
            raise ValueError(msg)
        if self.wizard_upload_max_size_mb <= 0:
            msg = (
                "WIZARD_UPLOAD_MAX_SIZE_MB must be positive. "
                f"Got: {self.wizard_upload_max_size_mb}"
            )
            raise ValueError(msg)

        if self.telegram_use_webhook and not self.telegram_webhook_domain.strip():
            msg = (
                "TELEGRAM_WEBHOOK_DOMAIN must be set when TELEGRAM_USE_WEBHOOK=true."
            )
            raise ValueError(msg)

        if self.environment == "production":
            if self.database_password == _INSECURE_DEFAULT_PASSWORD:
                msg = (
                    "Cannot use default database password in production. "
                    "Set DATABASE_PASSWORD environment variable to a secure value."
                )
                raise ValueError(msg)
            if not self.admin_api_key.get_secret_value():
                msg = "ADMIN_API_KEY must be set in production."
                raise ValueError(msg)

        return self


settings = Settings()
