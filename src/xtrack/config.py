"""Runtime configuration loaded from the environment (and an optional .env file)."""
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL

DEFAULT_JWT_EXPIRATION_HOURS = 24


class Settings(BaseSettings):
    """X-Track service settings.

    DATABASE_URL wins over the individual DB_* parameters when both are set.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    RUN_MODE: str = Field(default="debug", validation_alias=AliasChoices("RUN_MODE", "GIN_MODE"))
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_NAME: str = "xtrack"
    SSLMODE: str = "require"
    SQL_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True

    # Session credentials
    JWT_SECRET: str = "your-secret-key-change-this-in-production"
    JWT_EXPIRATION_HOURS: int = DEFAULT_JWT_EXPIRATION_HOURS
    PASSWORD_HASH_ROUNDS: int | None = None

    # Bootstrap admin
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    @field_validator("JWT_EXPIRATION_HOURS", mode="before")
    @classmethod
    def _fallback_expiration(cls, value: object) -> object:
        try:
            return int(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return DEFAULT_JWT_EXPIRATION_HOURS

    @field_validator("PASSWORD_HASH_ROUNDS", mode="before")
    @classmethod
    def _empty_rounds(cls, value: object) -> object:
        return None if value in ("", None) else value

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the configured database."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+psycopg2",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
            query={"sslmode": self.SSLMODE},
        ).render_as_string(hide_password=False)

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_release(self) -> bool:
        return self.RUN_MODE.lower() == "release"


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, read once."""
    return Settings()
