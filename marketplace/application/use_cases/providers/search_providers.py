# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from marketplace.domain.providers.entities import Provider, ProviderQuery
from marketplace.domain.providers.repositories import ProviderRepository


class SearchProvidersUseCase:
    def __init__(self, *, providers: ProviderRepository) -> None:
        self._providers = providers

    def execute(self, query: ProviderQuery) -> Sequence[Provider]:
        return self._providers.search(query.normalized())
