from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Database
    DATABASE_URL: str = "sqlite:///./reviewdesk.db"

    # JWT Authentication
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    ACCESS_TOKEN_COOKIE: str = "access_token"

    # Application
    APP_NAME: str = "ReviewDesk"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: str = (
        "http://localhost:3000,"
        "http://127.0.0.1:3000"
    )

    # Roles
    ADMIN_EMAILS: str = ""
    PROFILE_AUTOCREATE: bool = True

    # Rate limiting (fixed window, per process)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60
    RATE_LIMIT_PUBLIC_REQUESTS: int = 100
    RATE_LIMIT_AUTH_REQUESTS: int = 10

    # Typeahead suggestion feeds
    SUGGEST_TIMEOUT_SECONDS: float = 5.0

    @property
    def admin_emails(self) -> list[str]:
        """Admin allow-list, trimmed and lower-cased."""
        return [
            email.strip().lower()
            for email in self.ADMIN_EMAILS.split(",")
            if email.strip()
        ]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()
