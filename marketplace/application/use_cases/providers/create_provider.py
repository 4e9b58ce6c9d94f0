# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from marketplace.domain.providers.entities import DEFAULT_PRICE, Provider
from marketplace.domain.providers.exceptions import ProviderAlreadyExistsError
from marketplace.domain.providers.repositories import ProviderRepository


@dataclass(slots=True, frozen=True)
class CreateProviderInput:
    owner_id: int
    name: str
    service: str
    category: str
    location: str
    phone: str | None = None
    description: str | None = None
    price: str | None = None
    available: bool = True


class CreateProviderUseCase:
    def __init__(self, *, providers: ProviderRepository) -> None:
        self._providers = providers

    def execute(self, data: CreateProviderInput) -> Provider:
        if self._providers.find_by_owner(data.owner_id):
            raise ProviderAlreadyExistsError()
        provider = Provider(
            id=0,
            owner_id=data.owner_id,
            name=data.name.strip(),
            service=data.service.strip(),
            category=data.category.strip(),
            location=data.location.strip(),
            phone=data.phone,
            description=data.description,
            price=(data.price or "").strip() or DEFAULT_PRICE,
            available=data.available,
            created_at=datetime.now(UTC),
        )
        return self._providers.add(provider)
