"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEVELOPMENT_JWT_SECRET = "notebase-dev-secret-change-me"


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        NOTEBASE_DB_HOST: Database host (default: localhost)
        NOTEBASE_DB_PORT: Database port (default: 5432)
        NOTEBASE_DB_DATABASE: Database name (default: notebase)
        NOTEBASE_DB_USERNAME: Database user (default: notebase)
        NOTEBASE_DB_PASSWORD: Database password (required in production)
        NOTEBASE_DB_POOL_MIN_CONNECTIONS: Minimum connections in pool (default: 2)
        NOTEBASE_DB_POOL_MAX_CONNECTIONS: Maximum connections in pool (default: 10)
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTEBASE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="notebase", description="Database name")
    username: str = Field(default="notebase", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_min_connections: int = Field(
        default=2,
        description="Minimum connections in pool",
        ge=1,
        le=100,
    )
    pool_max_connections: int = Field(
        default=10,
        description="Maximum connections in pool",
        ge=1,
        le=100,
    )

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate pool max >= min."""
        if self.pool_max_connections < self.pool_min_connections:
            raise ValueError(
                f"pool_max_connections ({self.pool_max_connections}) must be >= "
                f"pool_min_connections ({self.pool_min_connections})"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class AuthSettings(BaseSettings):
    """Session token settings.

    Environment variables:
        NOTEBASE_AUTH_JWT_SECRET: HMAC secret used to sign session tokens
        NOTEBASE_AUTH_JWT_ALGORITHM: Signing algorithm (default: HS256)
        NOTEBASE_AUTH_SESSION_TTL_HOURS: Session token lifetime (default: 168, 7 days)
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTEBASE_AUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jwt_secret: SecretStr = Field(
        default=SecretStr(DEVELOPMENT_JWT_SECRET),
        description="Secret used to sign session tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    session_ttl_hours: int = Field(
        default=168,
        description="Session token lifetime in hours",
        ge=1,
    )

    @property
    def uses_development_secret(self) -> bool:
        """Whether tokens are signed with the built-in development secret."""
        return self.jwt_secret.get_secret_value() == DEVELOPMENT_JWT_SECRET


class InvitationSettings(BaseSettings):
    """Invitation lifecycle settings.

    Environment variables:
        NOTEBASE_INVITATIONS_TTL_DAYS: Days before a pending invitation expires (default: 7)
        NOTEBASE_INVITATIONS_FRONTEND_URL: Base URL used to build invitation links
    """

    model_config = SettingsConfigDict(
        env_prefix="NOTEBASE_INVITATIONS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ttl_days: int = Field(
        default=7,
        description="Invitation lifetime in days",
        ge=1,
        le=365,
    )
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Frontend base URL for invitation links",
    )

    def build_accept_link(self, token: str) -> str:
        """Build the link an invitee follows to accept an invitation."""
        return f"{self.frontend_url.rstrip('/')}/accept-invitation?token={token}"


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_prefix="NOTEBASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="Notebase API", description="Application name")
    debug: bool = Field(default=False, description="Debug mode")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed by the CORS middleware",
    )

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def auth(self) -> AuthSettings:
        """Get session token settings."""
        return get_auth_settings()

    @property
    def invitations(self) -> InvitationSettings:
        """Get invitation settings."""
        return get_invitation_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_auth_settings() -> AuthSettings:
    """Get cached session token settings."""
    return AuthSettings()


@lru_cache
def get_invitation_settings() -> InvitationSettings:
    """Get cached invitation settings."""
    return InvitationSettings()
