# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Provider listings and the reviews that rate them."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from marketplace.domain.exceptions import InvariantViolation

MIN_RATING = 1
MAX_RATING = 5
DEFAULT_PRICE = "A combinar"
ALL_CATEGORIES = "todos os serviços"


@dataclass(slots=True, frozen=True)
class Provider:
    """A service listing owned by a registered user."""

    id: int
    owner_id: int
    name: str
    service: str
    category: str
    location: str
    created_at: datetime
    phone: str | None = None
    description: str | None = None
    price: str = DEFAULT_PRICE
    available: bool = True
    is_featured: bool = False
    rating: float = 0.0
    reviews: int = 0

    def __post_init__(self) -> None:
        for fld in ("name", "service", "category", "location"):
            if not getattr(self, fld).strip():
                raise InvariantViolation("must not be blank", field=fld)
        if self.reviews < 0:
            raise InvariantViolation("review count must be >= 0", field="reviews")
        if self.reviews == 0 and self.rating != 0.0:
            raise InvariantViolation("rating must be 0 without reviews", field="rating")
        if self.reviews and not MIN_RATING <= self.rating <= MAX_RATING:
            raise InvariantViolation("rating out of range", field="rating")

    def with_review_totals(self, count: int, total: int) -> Provider:
        """Return a copy whose rating is the mean of ``count`` scores summing to ``total``."""

        if count < 0 or total < MIN_RATING * count or total > MAX_RATING * count:
            raise InvariantViolation("inconsistent review totals", field="reviews")
        rating = round(total / count, 2) if count else 0.0
        return replace(self, rating=rating, reviews=count)


@dataclass(slots=True, frozen=True)
class Review:

    id: int
    provider_id: int
    author_id: int
    rating: int
    created_at: datetime
    comment: str | None = None
    service_id: str | None = None
    author_name: str | None = None

    def __post_init__(self) -> None:
        validate_rating(self.rating)


@dataclass(slots=True, frozen=True)
class ProviderQuery:
    """Search filters; empty values disable the corresponding filter."""

    text: str | None = None
    category: str | None = None
    location: str | None = None
    featured_only: bool = False

    def normalized(self) -> ProviderQuery:
        category = (self.category or "").strip()
        if category.lower() == ALL_CATEGORIES:
            category = ""
        return ProviderQuery(
            text=(self.text or "").strip() or None,
            category=category or None,
            location=(self.location or "").strip() or None,
            featured_only=self.featured_only,
        )

    def matches(self, provider: Provider) -> bool:
        query = self.normalized()
        if query.featured_only and not provider.is_featured:
            return False
        if query.text:
            needle = query.text.lower()
            haystacks = (provider.name, provider.service, provider.description or "")
            if not any(needle in value.lower() for value in haystacks):
                return False
        if query.category and provider.category.lower() != query.category.lower():
            return False
        if query.location and query.location.lower() not in provider.location.lower():
            return False
        return True


def validate_rating(rating: int) -> None:
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvariantViolation("rating must be an integer", field="rating")
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvariantViolation(
            f"rating must be between {MIN_RATING} and {MAX_RATING}", field="rating"
        )


def sort_key(provider: Provider) -> tuple[int, float, int]:
    return (0 if provider.is_featured else 1, -provider.rating, provider.id)
