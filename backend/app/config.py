"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded in production)
    - get_settings() is cached (lru_cache) — single instance per process
    - Token issuer, password policy and lockout policy receive explicit structs,
      never the Settings object itself

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.password_policy import PasswordPolicy, LockoutPolicy
from app.core.token_issuer import JwtSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    environment: str = "production"

    # Database
    database_url: str = (
        "postgresql+asyncpg://tarefas:tarefas@db:5432/tarefas"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosting platforms provide postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # JWT
    jwt_secret_key: str = "change-me-in-production-minimum-32-bytes"
    jwt_expiration_hours: int = 2
    jwt_issuer: str = "MinimalPilot"
    jwt_audience: str = "https://localhost"

    # Identity
    password_required_length: int = 6
    password_required_unique_chars: int = 1
    password_require_digit: bool = True
    password_require_lowercase: bool = True
    password_require_uppercase: bool = True
    password_require_non_alphanumeric: bool = True
    lockout_max_failed_attempts: int = 5
    lockout_minutes: int = 5

    # API
    cors_origins: list[str] = ["http://localhost:5173"]
    https_redirect: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() == "development"

    def jwt_settings(self) -> JwtSettings:
        return JwtSettings(
            secret_key=self.jwt_secret_key,
            expiration_hours=self.jwt_expiration_hours,
            issuer=self.jwt_issuer,
            audience=self.jwt_audience,
        )

    def password_policy(self) -> PasswordPolicy:
        return PasswordPolicy(
            required_length=self.password_required_length,
            required_unique_chars=self.password_required_unique_chars,
            require_digit=self.password_require_digit,
            require_lowercase=self.password_require_lowercase,
            require_uppercase=self.password_require_uppercase,
            require_non_alphanumeric=self.password_require_non_alphanumeric,
        )

    def lockout_policy(self) -> LockoutPolicy:
        return LockoutPolicy(
            max_failed_attempts=self.lockout_max_failed_attempts,
            lockout_minutes=self.lockout_minutes,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
