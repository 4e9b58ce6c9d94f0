from __future__ import annotations

import os
from collections.abc import Iterator, Sequence
from dataclasses import replace
from pathlib import Path

import pytest
from flask import Flask

# Settings are read from the environment when AppConfig is built.
os.environ.setdefault("JWT_SECRET", "test-signing-key-7f3b9c2e4a1d8f6b5c0e9a7d3f2b1c4e")

from marketplace.app import create_app  # noqa: E402
from marketplace.domain.providers.entities import Provider, ProviderQuery, Review, sort_key  # noqa: E402
from marketplace.domain.providers.exceptions import (ProviderAlreadyExistsError,  # noqa: E402
                                                     ProviderNotFoundError)
from marketplace.domain.users.entities import User  # noqa: E402
from marketplace.domain.users.exceptions import EmailAlreadyRegisteredError  # noqa: E402
from marketplace.infrastructure.db import Database  # noqa: E402
from marketplace.shared.config import AppConfig  # noqa: E402


class InMemoryUserRepository:
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def find_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def add(self, user: User) -> User:
        if self.find_by_email(user.email):
            raise EmailAlreadyRegisteredError()
        new_user = replace(user, id=self._seq)
        self._seq += 1
        self._users[new_user.id] = new_user
        return new_user


class DeterministicHasher:
    def __init__(self) -> None:
        self.verified: list[tuple[str, str | None]] = []

    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str | None) -> bool:
        self.verified.append((password, hashed))
        return hashed == f"hashed:{password}"


class InMemoryProviderRepository:
    def __init__(self) -> None:
        self.providers: dict[int, Provider] = {}
        self._seq = 1

    def add(self, provider: Provider) -> Provider:
        if self.find_by_owner(provider.owner_id):
            raise ProviderAlreadyExistsError()
        stored = replace(provider, id=self._seq)
        self._seq += 1
        self.providers[stored.id] = stored
        return stored

    def get(self, provider_id: int) -> Provider | None:
        return self.providers.get(provider_id)

    def find_by_owner(self, owner_id: int) -> Provider | None:
        return next((p for p in self.providers.values() if p.owner_id == owner_id), None)

    def update(self, provider: Provider) -> Provider:
        if provider.id not in self.providers:
            raise ProviderNotFoundError(provider.id)
        self.providers[provider.id] = provider
        return provider

    def search(self, query: ProviderQuery) -> Sequence[Provider]:
        return sorted((p for p in self.providers.values() if query.matches(p)), key=sort_key)


class InMemoryReviewRepository:
    def __init__(self, providers: InMemoryProviderRepository) -> None:
        self._providers = providers
        self.reviews: list[Review] = []

    def add_and_rerate(self, review: Review) -> tuple[Review, Provider]:
        stored = replace(review, id=len(self.reviews) + 1)
        self.reviews.append(stored)
        scores = [r.rating for r in self.reviews if r.provider_id == review.provider_id]
        provider = self._providers.providers[review.provider_id].with_review_totals(
            len(scores), sum(scores)
        )
        self._providers.providers[provider.id] = provider
        return stored, provider

    def list_for_provider(self, provider_id: int) -> Sequence[Review]:
        return [r for r in reversed(self.reviews) if r.provider_id == provider_id]


@pytest.fixture()
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def provider_repository() -> InMemoryProviderRepository:
    return InMemoryProviderRepository()


@pytest.fixture()
def review_repository(provider_repository: InMemoryProviderRepository) -> InMemoryReviewRepository:
    return InMemoryReviewRepository(provider_repository)


@pytest.fixture()
def app_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> AppConfig:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("DB_HOST", raising=False)
    monkeypatch.setenv("SQLITE_PATH", str(tmp_path / "marketplace-test.db"))
    monkeypatch.setenv("ENABLE_RATE_LIMIT", "false")
    return AppConfig()  # type: ignore[call-arg]


@pytest.fixture()
def database(app_config: AppConfig) -> Iterator[Database]:
    db = Database.from_config(app_config.database)
    db.create_schema()
    yield db
    db.dispose()


@pytest.fixture()
def app(app_config: AppConfig, database: Database) -> Flask:
    return create_app(app_config, database)
