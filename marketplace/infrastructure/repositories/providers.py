# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from marketplace.domain.providers.entities import Provider, ProviderQuery
from marketplace.domain.providers.entities import Review as DomainReview
from marketplace.domain.providers.exceptions import (ProviderAlreadyExistsError,
                                                     ProviderNotFoundError)
from marketplace.domain.providers.repositories import ProviderRepository, ReviewRepository
from marketplace.infrastructure.db import Database
from marketplace.infrastructure.db.models import Review, ServiceProvider, User
from marketplace.infrastructure.repositories.users import as_utc
from marketplace.shared.errors import StorageUnavailableError


def _like_pattern(value: str) -> str:
    escaped = value.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _provider_to_domain(row: ServiceProvider) -> Provider:
    return Provider(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        service=row.service,
        category=row.category,
        location=row.location,
        phone=row.phone,
        description=row.description,
        price=row.price,
        available=bool(row.available),
        is_featured=bool(row.is_featured),
        rating=float(row.rating or 0.0),
        reviews=int(row.reviews or 0),
        created_at=as_utc(row.created_at),
    )


def _review_to_domain(row: Review, author_name: str | None) -> DomainReview:
    return DomainReview(
        id=row.id,
        provider_id=row.provider_id,
        author_id=row.author_id,
        rating=int(row.rating),
        comment=row.comment,
        service_id=row.service_id,
        created_at=as_utc(row.created_at),
        author_name=author_name,
    )


class SqlAlchemyProviderRepository(ProviderRepository):
    def __init__(self, database: Database) -> None:
        self._database = database

    def add(self, provider: Provider) -> Provider:
        try:
            with self._database.session_scope() as session:
                row = ServiceProvider(
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
                    rating=0.0,
                    reviews=0,
                    created_at=provider.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _provider_to_domain(row)
        except IntegrityError as exc:
            raise ProviderAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def get(self, provider_id: int) -> Provider | None:
        try:
            with self._database.session_scope() as session:
                row = session.get(ServiceProvider, provider_id)
                return _provider_to_domain(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def find_by_owner(self, owner_id: int) -> Provider | None:
        try:
            with self._database.session_scope() as session:
                row = session.scalars(
                    select(ServiceProvider).where(ServiceProvider.owner_id == owner_id)
                ).first()
                return _provider_to_domain(row) if row else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def update(self, provider: Provider) -> Provider:
        try:
            with self._database.session_scope() as session:
                row = session.get(ServiceProvider, provider.id)
                if row is None:
                    raise ProviderNotFoundError(provider.id)
                # Only the owner-editable fields are written back.
                row.description = provider.description
                row.price = provider.price
                row.available = provider.available
                session.flush()
                return _provider_to_domain(row)
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def search(self, query: ProviderQuery) -> Sequence[Provider]:
        query = query.normalized()
        stmt = select(ServiceProvider)

        if query.featured_only:
            stmt = stmt.where(ServiceProvider.is_featured.is_(True))
        if query.text:
            pattern = _like_pattern(query.text)
            stmt = stmt.where(
                func.lower(ServiceProvider.name).like(pattern, escape="\\")
                | func.lower(ServiceProvider.service).like(pattern, escape="\\")
                | func.lower(func.coalesce(ServiceProvider.description, "")).like(
                    pattern, escape="\\"
                )
            )
        if query.category:
            stmt = stmt.where(func.lower(ServiceProvider.category) == query.category.lower())
        if query.location:
            stmt = stmt.where(
                func.lower(ServiceProvider.location).like(
                    _like_pattern(query.location), escape="\\"
                )
            )

        stmt = stmt.order_by(
            ServiceProvider.is_featured.desc(),
            ServiceProvider.rating.desc(),
            ServiceProvider.id.asc(),
        )
        try:
            with self._database.session_scope() as session:
                return [_provider_to_domain(row) for row in session.scalars(stmt)]
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc


class SqlAlchemyReviewRepository(ReviewRepository):
    def __init__(self, database: Database) -> None:
        self._database = database

    def add_and_rerate(self, review: DomainReview) -> tuple[DomainReview, Provider]:
        try:
            with self._database.session_scope() as session:
                # Serialises concurrent reviews of the same provider (no-op on SQLite).
                provider_row = session.scalars(
                    select(ServiceProvider)
                    .where(ServiceProvider.id == review.provider_id)
                    .with_for_update()
                ).first()
                if provider_row is None:
                    raise ProviderNotFoundError(review.provider_id)

                row = Review(
                    provider_id=review.provider_id,
                    author_id=review.author_id,
                    rating=review.rating,
                    comment=review.comment,
                    service_id=review.service_id,
                    created_at=review.created_at,
                )
                session.add(row)
                session.flush()

                count, total = session.execute(
                    select(func.count(Review.id), func.coalesce(func.sum(Review.rating), 0))
                    .where(Review.provider_id == review.provider_id)
                ).one()
                updated = _provider_to_domain(provider_row).with_review_totals(
                    int(count), int(total)
                )
                provider_row.rating = updated.rating
                provider_row.reviews = updated.reviews

                author = session.get(User, review.author_id)
                return _review_to_domain(row, author.name if author else None), updated
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc

    def list_for_provider(self, provider_id: int) -> Sequence[DomainReview]:
        stmt = (
            select(Review, User.name)
            .join(User, User.id == Review.author_id, isouter=True)
            .where(Review.provider_id == provider_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
        )
        try:
            with self._database.session_scope() as session:
                return [_review_to_domain(row, name) for row, name in session.execute(stmt)]
        except SQLAlchemyError as exc:
            raise StorageUnavailableError() from exc


__all__ = ["SqlAlchemyProviderRepository", "SqlAlchemyReviewRepository"]
