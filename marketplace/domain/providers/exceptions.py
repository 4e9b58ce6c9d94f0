# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from marketplace.shared.errors.base import DomainError


class ProviderNotFoundError(DomainError):
    code = "provider_not_found"
    status = HTTPStatus.NOT_FOUND

    def __init__(self, provider_id: int) -> None:
        super().__init__(context={"provider_id": provider_id})


class ProviderAlreadyExistsError(DomainError):
    code = "provider_already_exists"
    status = HTTPStatus.CONFLICT
    message = "Usuário já possui um cadastro de prestador."


class SelfReviewError(DomainError):
    code = "self_review_forbidden"
    status = HTTPStatus.FORBIDDEN
    message = "Prestadores não podem avaliar o próprio serviço."


class ProviderOwnershipError(DomainError):
    code = "not_provider_owner"
    status = HTTPStatus.FORBIDDEN
    message = "Apenas o dono do cadastro pode alterá-lo."
