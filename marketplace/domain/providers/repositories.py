# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .entities import Provider, ProviderQuery, Review


class ProviderRepository(Protocol):
    def add(self, provider: Provider) -> Provider: ...
    def get(self, provider_id: int) -> Provider | None: ...
    def find_by_owner(self, owner_id: int) -> Provider | None: ...
    def update(self, provider: Provider) -> Provider: ...
    def search(self, query: ProviderQuery) -> Sequence[Provider]: ...


class ReviewRepository(Protocol):
    def add_and_rerate(self, review: Review) -> tuple[Review, Provider]:
        """Persist the review and refresh the provider's rating atomically."""
        ...

    def list_for_provider(self, provider_id: int) -> Sequence[Review]: ...
