# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from marketplace.domain.providers.entities import Review
from marketplace.domain.providers.exceptions import ProviderNotFoundError
from marketplace.domain.providers.repositories import ProviderRepository, ReviewRepository


class ListReviewsUseCase:
    def __init__(
        self,
        *,
        providers: ProviderRepository,
        reviews: ReviewRepository,
    ) -> None:
        self._providers = providers
        self._reviews = reviews

    def execute(self, provider_id: int) -> Sequence[Review]:
        if self._providers.get(provider_id) is None:
            raise ProviderNotFoundError(provider_id)
        return self._reviews.list_for_provider(provider_id)
