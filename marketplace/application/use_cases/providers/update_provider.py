# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from marketplace.domain.providers.entities import DEFAULT_PRICE, Provider
from marketplace.domain.providers.exceptions import (ProviderNotFoundError,
                                                     ProviderOwnershipError)
from marketplace.domain.providers.repositories import ProviderRepository


class UpdateProviderUseCase:
    """Owner-only edit of a listing's description, price and availability."""

    def __init__(self, *, providers: ProviderRepository) -> None:
        self._providers = providers

    def execute(self, *, provider_id: int, user_id: int, changes: Mapping[str, Any]) -> Provider:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        if provider.owner_id != user_id:
            raise ProviderOwnershipError()

        updates: dict[str, Any] = {}
        if "description" in changes:
            updates["description"] = (changes["description"] or "").strip() or None
        if "price" in changes:
            updates["price"] = (changes["price"] or "").strip() or DEFAULT_PRICE
        if "available" in changes:
            updates["available"] = bool(changes["available"])
        if not updates:
            return provider
        return self._providers.update(replace(provider, **updates))
