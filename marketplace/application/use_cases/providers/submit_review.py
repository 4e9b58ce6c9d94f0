# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from marketplace.domain.providers.entities import Provider, Review
from marketplace.domain.providers.exceptions import ProviderNotFoundError, SelfReviewError
from marketplace.domain.providers.repositories import ProviderRepository, ReviewRepository


class SubmitReviewUseCase:
    """Record a 1-5 score for a provider and refresh its average rating."""

    def __init__(
        self,
        *,
        providers: ProviderRepository,
        reviews: ReviewRepository,
    ) -> None:
        self._providers = providers
        self._reviews = reviews

    def execute(
        self,
        *,
        provider_id: int,
        author_id: int,
        rating: int,
        comment: str | None = None,
        service_id: str | None = None,
    ) -> tuple[Review, Provider]:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)
        if provider.owner_id == author_id:
            raise SelfReviewError()

        review = Review(
            id=0,
            provider_id=provider_id,
            author_id=author_id,
            rating=rating,
            comment=(comment or "").strip() or None,
            service_id=service_id,
            created_at=datetime.now(UTC),
        )
        return self._reviews.add_and_rerate(review)
