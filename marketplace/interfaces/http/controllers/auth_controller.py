# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from marketplace.application.use_cases.users.get_current_user import GetCurrentUserUseCase
from marketplace.application.use_cases.users.login_user import LoginUserUseCase
from marketplace.application.use_cases.users.register_user import RegisterUserUseCase
from marketplace.domain.users.exceptions import (EmailAlreadyRegisteredError,
                                                 InvalidCredentialsError)
from marketplace.domain.users.repositories import TokenIssuer
from marketplace.infrastructure.audit import AuditAction, audit_log
from marketplace.interfaces.http.authentication import authenticate, get_client_ip
from marketplace.interfaces.http.dto.auth import (CurrentUserDTO, LoginRequestDTO,
                                                  LoginResponseDTO, RegisterRequestDTO,
                                                  UserDTO)
from marketplace.shared.errors.validation import raise_validation_error
from marketplace.shared.logging import logger
from marketplace.shared.middleware.rate_limit import rate_limit


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        current_user_use_case: GetCurrentUserUseCase,
        tokens: TokenIssuer,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._current_user_use_case = current_user_use_case
        self._tokens = tokens

    @rate_limit()
    def register(self) -> tuple[Response, int]:
        try:
            dto = RegisterRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = get_client_ip()
        try:
            user = self._register_use_case.execute(dto.nome, dto.email, dto.senha, dto.telefone)
        except EmailAlreadyRegisteredError:
            audit_log(
                AuditAction.REGISTER_FAILED,
                ip_address=ip_address,
                details={"email": dto.email, "reason": "email_already_registered"},
                success=False,
            )
            raise

        audit_log(
            AuditAction.REGISTER,
            user_id=user.id,
            ip_address=ip_address,
            details={"email": dto.email},
            success=True,
        )
        logger.info(f"auth.register: ok user_id={user.id}")
        return jsonify(UserDTO.from_entity(user).model_dump()), 201

    @rate_limit()
    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        ip_address = get_client_ip()

        try:
            issued, user = self._login_use_case.execute(dto.email, dto.senha)
        except InvalidCredentialsError:
            audit_log(
                AuditAction.LOGIN_FAILED,
                ip_address=ip_address,
                details={"email": dto.email},
                success=False,
            )
            raise

        audit_log(
            AuditAction.LOGIN_SUCCESS,
            user_id=user.id,
            ip_address=ip_address,
            details={"email": dto.email},
            success=True,
        )
        logger.info(f"auth.login: ok user_id={user.id} expires_at={issued.expires_at.isoformat()}")
        return jsonify(LoginResponseDTO.build(issued, user).model_dump()), 200

    def me(self) -> tuple[Response, int]:
        claims = authenticate(self._tokens)
        user = self._current_user_use_case.execute(claims.user_id)
        return jsonify(CurrentUserDTO.from_entity(user).model_dump()), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api")
        bp.add_url_rule("/usuarios", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/me", view_func=self.me, methods=["GET"])
        return bp
