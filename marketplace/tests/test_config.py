from __future__ import annotations

import pytest
from pydantic import ValidationError

from marketplace.shared.config import AppConfig, AuthConfig, DatabaseConfig, SecurityConfig


def test_jwt_secret_is_required(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)

    with pytest.raises(ValidationError):
        AuthConfig(_env_file=None)  # type: ignore[call-arg]


@pytest.mark.parametrize("placeholder", ["", "dev", "change-me", " Secret "])
def test_placeholder_jwt_secret_rejected(monkeypatch: pytest.MonkeyPatch, placeholder: str) -> None:
    monkeypatch.setenv("JWT_SECRET", placeholder)

    with pytest.raises(ValidationError):
        AppConfig(_env_file=None)  # type: ignore[call-arg]


def test_auth_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET", "a-long-random-secret-value-0123456789")

    config = AuthConfig(_env_file=None)  # type: ignore[call-arg]

    assert config.jwt_algorithm == "HS256"
    assert config.jwt_expires_hours == 24
    assert config.hash_workers == 4


def test_app_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("HOST", "PORT", "APP_ENV"):
        monkeypatch.delenv(name, raising=False)

    config = AppConfig(_env_file=None)  # type: ignore[call-arg]

    assert config.host == "0.0.0.0"
    assert config.port == 3333
    assert config.is_production() is False


def test_database_url_takes_precedence(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg://app:pw@db.internal/market")
    monkeypatch.setenv("DB_HOST", "ignored")

    url = DatabaseConfig(_env_file=None).resolved_url()  # type: ignore[call-arg]

    assert url.host == "db.internal"
    assert url.database == "market"


def test_discrete_db_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("DB_HOST", "pg")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("DB_USER", "app")
    monkeypatch.setenv("DB_PASSWORD", "p@ss:word")
    monkeypatch.setenv("DB_NAME", "market")

    url = DatabaseConfig(_env_file=None).resolved_url()  # type: ignore[call-arg]

    assert url.drivername == "postgresql+psycopg"
    assert (url.host, url.port, url.username, url.database) == ("pg", 6543, "app", "market")
    assert url.password == "p@ss:word"


def test_sqlite_fallback(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_HOST", raising=False)
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "dev.db"))

    url = DatabaseConfig(_env_file=None).resolved_url()  # type: ignore[call-arg]

    assert url.get_backend_name() == "sqlite"
    assert url.database == str(tmp_path / "dev.db")


def test_security_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "false")
    monkeypatch.setenv("ENABLE_HSTS", "1")

    config = SecurityConfig(_env_file=None)  # type: ignore[call-arg]

    assert config.allowed_origins == ["https://a.example", "https://b.example"]
    assert config.enable_rate_limit is False
    assert config.enable_hsts is True


def test_generic_host_variables_do_not_leak_into_database(
    monkeypatch: pytest.MonkeyPatch, tmp_path
) -> None:
    for name in ("DATABASE_URL", "DB_HOST", "DB_USER", "DB_PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("USER", "someone")
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "dev.db"))

    config = AppConfig(_env_file=None)  # type: ignore[call-arg]

    assert config.database.resolved_url().get_backend_name() == "sqlite"
    assert config.database.host is None
    assert config.database.user is None
    assert (config.host, config.port) == ("127.0.0.1", 8080)


@pytest.mark.parametrize("scheme", ["postgres", "postgresql"])
def test_libpq_style_urls_use_psycopg(monkeypatch: pytest.MonkeyPatch, scheme: str) -> None:
    monkeypatch.setenv("DATABASE_URL", f"{scheme}://u:p@db.internal:5432/app")

    url = DatabaseConfig(_env_file=None).resolved_url()  # type: ignore[call-arg]

    assert url.drivername == "postgresql+psycopg"
    assert (url.host, url.username, url.database) == ("db.internal", "u", "app")
