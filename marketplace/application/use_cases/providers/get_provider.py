# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from marketplace.domain.providers.entities import Provider
from marketplace.domain.providers.exceptions import ProviderNotFoundError
from marketplace.domain.providers.repositories import ProviderRepository


class GetProviderUseCase:
    def __init__(self, *, providers: ProviderRepository) -> None:
        self._providers = providers

    def execute(self, provider_id: int) -> Provider:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        return provider
