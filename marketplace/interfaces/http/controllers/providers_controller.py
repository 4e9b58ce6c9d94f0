# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from marketplace.application.use_cases.providers.create_provider import (CreateProviderInput,
                                                                         CreateProviderUseCase)
from marketplace.application.use_cases.providers.get_provider import GetProviderUseCase
from marketplace.application.use_cases.providers.list_reviews import ListReviewsUseCase
from marketplace.application.use_cases.providers.search_providers import SearchProvidersUseCase
from marketplace.application.use_cases.providers.submit_review import SubmitReviewUseCase
from marketplace.application.use_cases.providers.update_provider import UpdateProviderUseCase
from marketplace.domain.providers.entities import ProviderQuery
from marketplace.domain.users.repositories import TokenIssuer
from marketplace.infrastructure.audit import AuditAction, audit_log
from marketplace.interfaces.http.authentication import authenticate, get_client_ip
from marketplace.interfaces.http.dto.providers import (CreateProviderRequestDTO, ProviderDTO,
                                                       ProviderSearchDTO, ReviewCreatedDTO,
                                                       ReviewDTO, SubmitReviewRequestDTO,
                                                       UpdateProviderRequestDTO)
from marketplace.shared.errors.validation import raise_validation_error
from marketplace.shared.logging import logger


class ProvidersController:
    def __init__(
        self,
        *,
        create_use_case: CreateProviderUseCase,
        search_use_case: SearchProvidersUseCase,
        get_use_case: GetProviderUseCase,
        update_use_case: UpdateProviderUseCase,
        submit_review_use_case: SubmitReviewUseCase,
        list_reviews_use_case: ListReviewsUseCase,
        tokens: TokenIssuer,
    ) -> None:
        self._create_use_case = create_use_case
        self._search_use_case = search_use_case
        self._get_use_case = get_use_case
        self._update_use_case = update_use_case
        self._submit_review_use_case = submit_review_use_case
        self._list_reviews_use_case = list_reviews_use_case
        self._tokens = tokens

    def create(self) -> tuple[Response, int]:
        claims = authenticate(self._tokens)
        try:
            dto = CreateProviderRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        provider = self._create_use_case.execute(
            CreateProviderInput(owner_id=claims.user_id, **dto.model_dump())
        )
        audit_log(
            AuditAction.PROVIDER_CREATED,
            user_id=claims.user_id,
            ip_address=get_client_ip(),
            details={"provider_id": provider.id, "category": provider.category},
        )
        return jsonify(ProviderDTO.from_entity(provider).model_dump(mode="json")), 201

    def search(self) -> tuple[Response, int]:
        try:
            dto = ProviderSearchDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc)

        providers = self._search_use_case.execute(
            ProviderQuery(
                text=dto.q,
                category=dto.category,
                location=dto.location,
                featured_only=dto.featured,
            )
        )
        logger.debug(f"providers.search: {len(providers)} result(s)")
        payload = [ProviderDTO.from_entity(p).model_dump(mode="json") for p in providers]
        return jsonify(payload), 200

    def get(self, provider_id: int) -> tuple[Response, int]:
        provider = self._get_use_case.execute(provider_id)
        return jsonify(ProviderDTO.from_entity(provider).model_dump(mode="json")), 200

    def update(self, provider_id: int) -> tuple[Response, int]:
        claims = authenticate(self._tokens)
        try:
            dto = UpdateProviderRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        changes = dto.model_dump(exclude_unset=True)
        provider = self._update_use_case.execute(
            provider_id=provider_id, user_id=claims.user_id, changes=changes
        )
        audit_log(
            AuditAction.PROVIDER_UPDATED,
            user_id=claims.user_id,
            ip_address=get_client_ip(),
            details={"provider_id": provider_id, "fields": sorted(changes)},
        )
        return jsonify(ProviderDTO.from_entity(provider).model_dump(mode="json")), 200

    def submit_review(self, provider_id: int) -> tuple[Response, int]:
        claims = authenticate(self._tokens)
        try:
            dto = SubmitReviewRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        review, provider = self._submit_review_use_case.execute(
            provider_id=provider_id,
            author_id=claims.user_id,
            rating=dto.rating,
            comment=dto.comentario,
            service_id=dto.service_id,
        )
        audit_log(
            AuditAction.REVIEW_SUBMITTED,
            user_id=claims.user_id,
            ip_address=get_client_ip(),
            details={"provider_id": provider_id, "rating": dto.rating},
        )
        logger.info(
            f"providers.review: provider_id={provider_id} rating={provider.rating} "
            f"reviews={provider.reviews}"
        )
        return jsonify(ReviewCreatedDTO.build(review, provider).model_dump(mode="json")), 201

    def list_reviews(self, provider_id: int) -> tuple[Response, int]:
        reviews = self._list_reviews_use_case.execute(provider_id)
        return jsonify([ReviewDTO.from_entity(r).model_dump(mode="json") for r in reviews]), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("providers", __name__, url_prefix="/api/prestadores")
        bp.add_url_rule("", view_func=self.create, methods=["POST"])
        bp.add_url_rule("", view_func=self.search, methods=["GET"])
        bp.add_url_rule("/<int:provider_id>", view_func=self.get, methods=["GET"])
        bp.add_url_rule("/<int:provider_id>", view_func=self.update, methods=["PATCH"])
        bp.add_url_rule(
            "/<int:provider_id>/avaliacoes", view_func=self.submit_review, methods=["POST"]
        )
        bp.add_url_rule(
            "/<int:provider_id>/avaliacoes", view_func=self.list_reviews, methods=["GET"]
        )
        return bp
