"""Configuration management for the Wallet Admin service.

Configuration is loaded from environment variables. Every mail and console
setting is optional so the service starts in degraded mode without them.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Constants for database URL construction
POSTGRESQL_PREFIX = "postgresql://"
ASYNCPG_DRIVER = "+asyncpg"
PSYCOPG_DRIVER = "+psycopg"

DEFAULT_SENDER = '"QFS Wallet" <noreply@qfs-wallet.com>'


class AppEnvironment(str, Enum):
    LOCAL = "local"
    TEST = "test"
    PROD = "prod"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class AppConfig(BaseSettings):
    name: str = Field(default="wallet-admin")
    env: AppEnvironment = Field(default=AppEnvironment.LOCAL)
    version: str = Field(default="0.1.0")
    debug: bool = Field(default=False)
    log_level: LogLevel = Field(default=LogLevel.INFO)

    model_config = SettingsConfigDict(env_prefix="APP_")

    @field_validator("env", mode="before")
    @classmethod
    def validate_env(cls, v: str | AppEnvironment) -> AppEnvironment:
        if isinstance(v, AppEnvironment):
            return v
        return AppEnvironment(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        if isinstance(v, LogLevel):
            return v
        return LogLevel(v.upper())


class ServerConfig(BaseSettings):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    workers: int = Field(default=4)

    model_config = SettingsConfigDict(env_prefix="SERVER_")


class DatabaseConfig(BaseSettings):
    # Primary: full connection URL
    url_app: str = Field(default="", alias="database_url_app")

    # Admin URL for schema setup (optional)
    url_admin: str = Field(default="", alias="database_url_admin")

    # Fallback: individual components
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    name: str = Field(default="wallet_admin")
    user: str = Field(default="postgres")
    password: SecretStr = Field(default=SecretStr(""))
    pool_size: int = Field(default=10)
    max_overflow: int = Field(default=20)
    pool_timeout: int = Field(default=30)
    pool_recycle: int = Field(default=1800)
    echo: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="DATABASE_",
        populate_by_name=True,
    )

    @property
    def async_url(self) -> str:
        """Build async database URL."""
        if self.url_app:
            url = self.url_app
            if url.startswith(POSTGRESQL_PREFIX) and ASYNCPG_DRIVER not in url:
                new_prefix = POSTGRESQL_PREFIX.removesuffix("://") + ASYNCPG_DRIVER + "://"
                url = url.replace(POSTGRESQL_PREFIX, new_prefix, 1)
            return url
        password = self.password.get_secret_value()
        return f"postgresql{ASYNCPG_DRIVER}://{self.user}:{password}@{self.host}:{self.port}/{self.name}"

    @property
    def sync_url(self) -> str:
        """Build sync database URL for schema setup."""
        url = self.url_admin or self.url_app
        if url:
            if ASYNCPG_DRIVER in url:
                url = url.replace(ASYNCPG_DRIVER, PSYCOPG_DRIVER, 1)
            elif PSYCOPG_DRIVER not in url:
                url = url.replace(POSTGRESQL_PREFIX, "postgresql+psycopg://", 1)
            return url
        password = self.password.get_secret_value()
        return f"postgresql{PSYCOPG_DRIVER}://{self.user}:{password}@{self.host}:{self.port}/{self.name}"


class MailConfig(BaseSettings):
    """SMTP transport settings.

    The transport is only enabled when both username and password are set.
    Timeouts are in seconds.
    """

    host: str = Field(default="smtp.gmail.com")
    port: int = Field(default=587)
    username: str = Field(default="", validation_alias=AliasChoices("email_username", "gmail_user"))
    password: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("email_password", "gmail_pass")
    )
    use_tls: bool = Field(default=False)
    start_tls: bool = Field(default=True)
    sender: str = Field(default=DEFAULT_SENDER, alias="email_from")
    connection_timeout: float = Field(default=10.0)
    greeting_timeout: float = Field(default=5.0)
    socket_timeout: float = Field(default=10.0)

    model_config = SettingsConfigDict(env_prefix="EMAIL_", populate_by_name=True)

    @property
    def has_credentials(self) -> bool:
        return bool(self.username and self.password.get_secret_value())


class AdminConsoleConfig(BaseSettings):
    base_url: str = Field(default="http://localhost:3000/admin", alias="admin_url")

    model_config = SettingsConfigDict(env_prefix="ADMIN_", populate_by_name=True)

    @field_validator("base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AuthConfig(BaseSettings):
    jwt_secret: SecretStr = Field(default=SecretStr(""))
    algorithms: str = Field(default="HS256")
    issuer: str | None = Field(default=None)
    audience: str | None = Field(default=None)

    model_config = SettingsConfigDict(env_prefix="AUTH_")

    @property
    def algorithms_list(self) -> list[str]:
        """Parse algorithms string into a list."""
        return [algo.strip() for algo in self.algorithms.split(",") if algo.strip()]


class ObservabilityConfig(BaseSettings):
    service_name: str = Field(default="wallet-admin")
    otlp_endpoint: str | None = Field(default=None)
    otlp_insecure: bool = Field(default=True)
    log_record_format: str = Field(default="json")

    model_config = SettingsConfigDict(env_prefix="OTEL_")


class FeatureFlagsConfig(BaseSettings):
    notify_on_rejection: bool = Field(default=False)
    enable_debug_email: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="FEATURE_")


class SecurityConfig(BaseSettings):
    cors_allowed_origins: str = Field(default="http://localhost:3000,http://localhost:8000")
    cors_allow_credentials: bool = Field(default=True)
    cors_allow_methods: list[str] = Field(default=["GET", "POST", "PUT", "PATCH", "DELETE"])
    cors_allow_headers: list[str] = Field(default=["Authorization", "Content-Type", "X-Request-ID"])

    # ONLY allowed in local environment, enforced by Settings.
    skip_jwt_validation: bool = Field(default=False)

    model_config = SettingsConfigDict(env_prefix="SECURITY_")

    @field_validator("cors_allowed_origins", mode="after")
    @classmethod
    def validate_cors_allowed_origins(cls, v: str | list[str]) -> list[str]:
        """Parse comma-separated string into list of origins."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("skip_jwt_validation", mode="before")
    @classmethod
    def parse_skip_jwt_validation(cls, v: bool | str) -> bool:
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes", "on")
        return v


class Settings(BaseSettings):
    app: AppConfig = Field(default_factory=AppConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    mail: MailConfig = Field(default_factory=MailConfig)
    admin_console: AdminConsoleConfig = Field(default_factory=AdminConsoleConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    features: FeatureFlagsConfig = Field(default_factory=FeatureFlagsConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)

    @model_validator(mode="after")
    def validate_security_settings(self) -> Settings:
        """Validate security settings after all configs are loaded."""
        if self.security.skip_jwt_validation and self.app.env != AppEnvironment.LOCAL:
            raise ValueError(
                "SECURITY_SKIP_JWT_VALIDATION can only be set in local environment. "
                f"Current environment: {self.app.env.value}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def reload_settings() -> Settings:
    """Reload settings (useful for testing)."""
    get_settings.cache_clear()
    return get_settings()
