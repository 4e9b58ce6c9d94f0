from __future__ import annotations

from collections.abc import Iterator

import pytest

from marketplace.app import main
from marketplace.shared.config import load_config


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    load_config.cache_clear()
    yield
    load_config.cache_clear()


def test_main_refuses_to_start_without_secret(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)

    assert main([]) == 1


def test_main_exits_when_database_unreachable(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_HOST", raising=False)
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "missing" / "nowhere.db"))

    assert main(["--port", "0"]) == 1


@pytest.mark.parametrize(
    "url",
    [
        "postgres://u:p@127.0.0.1:1/app",
        "not a database url",
        "nosuchdialect://u:p@127.0.0.1/app",
    ],
)
def test_main_exits_on_unusable_database_url(monkeypatch: pytest.MonkeyPatch, url: str) -> None:
    monkeypatch.setenv("DATABASE_URL", url)

    assert main(["--port", "0"]) == 1
