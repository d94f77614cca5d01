"""Application settings and configuration.

This module defines all configuration options for the TraderFM Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="TraderFM Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./traderfm.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 30,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    bcrypt_rounds: int = Field(default=10, alias="BCRYPT_ROUNDS")

    # Trusted identity gateway for external (OAuth) logins
    external_auth_shared_secret: str | None = Field(
        default=None,
        alias="EXTERNAL_AUTH_SHARED_SECRET",
    )

    # Rate limiting
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    rate_limit_backend: str = Field(default="memory", alias="RATE_LIMIT_BACKEND")
    rate_limit_global_max: int = Field(default=100, alias="RATE_LIMIT_GLOBAL_MAX")
    rate_limit_global_window_seconds: int = Field(
        default=15 * 60,
        alias="RATE_LIMIT_GLOBAL_WINDOW_SECONDS",
    )
    rate_limit_question_max: int = Field(default=3, alias="RATE_LIMIT_QUESTION_MAX")
    rate_limit_question_window_seconds: int = Field(
        default=60,
        alias="RATE_LIMIT_QUESTION_WINDOW_SECONDS",
    )

    # Activity feed polling
    activity_page_size: int = Field(default=10, alias="ACTIVITY_PAGE_SIZE")
    activity_default_lookback_seconds: int = Field(
        default=300,
        alias="ACTIVITY_DEFAULT_LOOKBACK_SECONDS",
    )

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_buffer_capacity: int = Field(default=500, alias="LOG_BUFFER_CAPACITY")

    # Handles allowed to read operator endpoints such as recent logs
    admin_handles: list[str] = Field(default_factory=list, alias="ADMIN_HANDLES")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def external_auth_enabled(self) -> bool:
        """Return True when a trusted identity gateway secret is configured."""
        return bool(self.external_auth_shared_secret)


settings = Settings()  # type: ignore[call-arg]
