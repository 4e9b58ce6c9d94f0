from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import (BaseModel, ConfigDict, Field, StringConstraints, field_validator,
                      model_validator)

from marketplace.domain.providers.entities import MAX_RATING, MIN_RATING, Provider, Review

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255)] | None


class CreateProviderRequestDTO(BaseModel):
    name: RequiredText
    service: RequiredText
    category: RequiredText
    location: RequiredText
    phone: OptionalText = None
    description: Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)] | None = None
    price: OptionalText = None
    available: bool = True


class UpdateProviderRequestDTO(BaseModel):
    description: Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)] | None = None
    price: OptionalText = None
    available: bool = True

    @model_validator(mode="after")
    def _require_change(self) -> UpdateProviderRequestDTO:
        if not self.model_fields_set:
            raise ValueError("at least one of description, price or available is required")
        return self


class ProviderSearchDTO(BaseModel):
    q: str | None = None
    category: str | None = None
    location: str | None = None
    featured: bool = False

    @field_validator("featured", mode="before")
    @classmethod
    def _parse_featured(cls, value: str | bool | None) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)


class SubmitReviewRequestDTO(BaseModel):
    model_config = ConfigDict(validate_by_name=True)

    # Strict: "5", 4.5 and true are rejected rather than coerced.
    rating: int = Field(ge=MIN_RATING, le=MAX_RATING, strict=True)
    comentario: Annotated[str, StringConstraints(max_length=2000)] | None = None
    service_id: str | None = Field(None, alias="serviceId", max_length=255)


class ProviderDTO(BaseModel):
    id: int
    owner_id: int
    name: str
    service: str
    category: str
    location: str
    phone: str | None
    description: str | None
    price: str
    available: bool
    is_featured: bool
    rating: float
    reviews: int
    created_at: datetime

    @classmethod
    def from_entity(cls, provider: Provider) -> ProviderDTO:
        return cls(
            id=provider.id,
            owner_id=provider.owner_id,
            name=provider.name,
            service=provider.service,
            category=provider.category,
            location=provider.location,
            phone=provider.phone,
            description=provider.description,
            price=provider.price,
            available=provider.available,
            is_featured=provider.is_featured,
            rating=provider.rating,
            reviews=provider.reviews,
            created_at=provider.created_at,
        )


class RatingSummaryDTO(BaseModel):
    id: int
    rating: float
    reviews: int


class ReviewDTO(BaseModel):
    id: int
    rating: int
    comentario: str | None
    created_at: datetime
    autor_nome: str | None

    @classmethod
    def from_entity(cls, review: Review) -> ReviewDTO:
        return cls(
            id=review.id,
            rating=review.rating,
            comentario=review.comment,
            created_at=review.created_at,
            autor_nome=review.author_name,
        )


class ReviewCreatedDTO(BaseModel):
    review: ReviewDTO
    provider: RatingSummaryDTO

    @classmethod
    def build(cls, review: Review, provider: Provider) -> ReviewCreatedDTO:
        return cls(
            review=ReviewDTO.from_entity(review),
            provider=RatingSummaryDTO(
                id=provider.id, rating=provider.rating, reviews=provider.reviews
            ),
        )
