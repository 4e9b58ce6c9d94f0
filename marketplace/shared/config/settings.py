# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from functools import lru_cache
from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

INSECURE_JWT_SECRETS = frozenset({"", "dev", "dev-secret", "default_secret", "change-me", "secret"})
_POSTGRES_DRIVERNAMES = frozenset({"postgres", "postgresql"})


def _section_config() -> SettingsConfigDict:
    return SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


class DatabaseConfig(BaseSettings):
    url: str | None = Field(None, alias="DATABASE_URL")
    host: str | None = Field(None, alias="DB_HOST")
    port: int = Field(5432, ge=1, le=65535, alias="DB_PORT")
    user: str | None = Field(None, alias="DB_USER")
    password: str | None = Field(None, alias="DB_PASSWORD")
    name: str | None = Field(None, alias="DB_NAME")
    ssl: bool = Field(False, alias="DB_SSL")
    statement_timeout_ms: int = Field(5000, ge=0, alias="DB_STATEMENT_TIMEOUT_MS")
    sqlite_path: Path = Field(Path("marketplace.db"), alias="SQLITE_PATH")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(5, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(30.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _section_config()

    @field_validator("ssl", mode="before")
    @classmethod
    def _parse_ssl(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    def resolved_url(self) -> URL:
        """DATABASE_URL wins, then the discrete DB_* fields, then a local SQLite file."""
        if self.url:
            url = make_url(self.url)
            # libpq-style postgres:// URLs run on psycopg 3
            if url.drivername in _POSTGRES_DRIVERNAMES:
                url = url.set(drivername="postgresql+psycopg")
            return url
        if self.host:
            return URL.create(
                "postgresql+psycopg",
                username=self.user,
                password=self.password,
                host=self.host,
                port=self.port,
                database=self.name,
            )
        return make_url(f"sqlite:///{self.sqlite_path}")


class AuthConfig(BaseSettings):
    jwt_secret: str = Field(alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    jwt_expires_hours: int = Field(24, ge=1, alias="JWT_EXPIRES_HOURS")
    hash_workers: int = Field(4, ge=1, alias="HASH_WORKERS")
    hash_timeout_seconds: float = Field(5.0, ge=0.1, alias="HASH_TIMEOUT_SECONDS")

    model_config = _section_config()

    @field_validator("jwt_secret")
    @classmethod
    def _reject_insecure_secret(cls, value: str) -> str:
        if value.strip().lower() in INSECURE_JWT_SECRETS:
            raise ValueError("JWT_SECRET must be set to a strong random value")
        return value


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, ge=1, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, ge=0.1, alias="RL_WINDOW")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _section_config()

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3333, ge=1, le=65535, alias="PORT")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_assignment=True,
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()  # type: ignore[call-arg]


__all__ = ["AppConfig", "AuthConfig", "DatabaseConfig", "SecurityConfig", "load_config"]
