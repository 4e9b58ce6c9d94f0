# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from marketplace.shared.errors.base import DomainError


class EmailAlreadyRegisteredError(DomainError):
    code = "email_already_registered"
    status = HTTPStatus.CONFLICT
    message = "E-mail já cadastrado."


class InvalidCredentialsError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.UNAUTHORIZED
    message = "Credenciais inválidas."


class InvalidTokenError(DomainError):
    code = "unauthorized"
    status = HTTPStatus.UNAUTHORIZED
