from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from marketplace.domain import Provider, ProviderQuery
from marketplace.domain.providers.exceptions import ProviderNotFoundError
from marketplace.domain.users.entities import User
from marketplace.domain.users.exceptions import EmailAlreadyRegisteredError
from marketplace.infrastructure.db import Database
from marketplace.infrastructure.repositories.providers import SqlAlchemyProviderRepository
from marketplace.infrastructure.repositories.users import SqlAlchemyUserRepository


def _user(email: str) -> User:
    return User(
        id=0, name="Ana", email=email, password_hash="h", created_at=datetime.now(UTC)
    )


def _provider(owner_id: int, **overrides) -> Provider:
    data: dict[str, object] = {
        "id": 0,
        "owner_id": owner_id,
        "name": f"Prestador {owner_id}",
        "service": "Eletricista",
        "category": "Reparos",
        "location": "São Paulo, SP",
        "created_at": datetime.now(UTC),
    }
    data.update(overrides)
    return Provider(**data)  # type: ignore[arg-type]


def test_add_maps_unique_violation_to_conflict(database: Database) -> None:
    # A row that slipped in between the use case's lookup and the insert.
    database.execute(
        "INSERT INTO usuarios (nome, email, senha_hash, created_at) "
        "VALUES (:nome, :email, :hash, :created_at)",
        {"nome": "Ana", "email": "ana@x.com", "hash": "h", "created_at": datetime.now(UTC)},
    )
    users = SqlAlchemyUserRepository(database)

    with pytest.raises(EmailAlreadyRegisteredError) as exc_info:
        users.add(_user("ana@x.com"))

    assert exc_info.value.status == 409
    assert users.find_by_email("ana@x.com").name == "Ana"


@pytest.fixture(params=["memory", "sqlite"])
def providers(request: pytest.FixtureRequest):
    if request.param == "memory":
        return request.getfixturevalue("provider_repository")
    database: Database = request.getfixturevalue("database")
    users = SqlAlchemyUserRepository(database)
    for n in range(1, 5):
        users.add(_user(f"owner{n}@x.com"))
    return SqlAlchemyProviderRepository(database)


def test_search_folds_case_beyond_ascii(providers) -> None:
    providers.add(_provider(1, name="Instalação Elétrica", category="Reparos"))
    providers.add(_provider(2, name="Dona Maria", service="Diarista", category="Ônibus e Fretes"))

    by_text = providers.search(ProviderQuery(text="ELÉTRICA"))
    by_category = providers.search(ProviderQuery(category="ônibus e fretes"))
    by_location = providers.search(ProviderQuery(location="SÃO PAULO"))

    assert [p.name for p in by_text] == ["Instalação Elétrica"]
    assert [p.name for p in by_category] == ["Dona Maria"]
    assert len(by_location) == 2


def test_search_orders_featured_first(providers) -> None:
    providers.add(_provider(1))
    providers.add(_provider(2, is_featured=True))
    providers.add(_provider(3))

    results = providers.search(ProviderQuery())
    featured = providers.search(ProviderQuery(featured_only=True))

    assert [p.owner_id for p in results] == [2, 1, 3]
    assert [p.owner_id for p in featured] == [2]


def test_search_treats_wildcards_literally(providers) -> None:
    providers.add(_provider(1, description="Garantia 100% no serviço"))
    providers.add(_provider(2, description="Atendimento 24h"))

    assert [p.owner_id for p in providers.search(ProviderQuery(text="100%"))] == [1]
    assert providers.search(ProviderQuery(text="_")) == []


def test_update_writes_editable_fields(providers) -> None:
    created = providers.add(_provider(1, description="Antigo", price="R$ 80"))

    providers.update(replace(created, description="Novo", price="A combinar", available=False))
    stored = providers.get(created.id)

    assert stored.description == "Novo"
    assert stored.price == "A combinar"
    assert stored.available is False
    assert stored.name == created.name
    with pytest.raises(ProviderNotFoundError):
        providers.update(replace(created, id=999))
