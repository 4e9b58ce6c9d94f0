# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Stateless session tokens signed with PyJWT."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from marketplace.domain.users.entities import IssuedToken, TokenClaims, User
from marketplace.domain.users.exceptions import InvalidTokenError
from marketplace.domain.users.repositories import TokenIssuer


class JwtTokenIssuer(TokenIssuer):
    def __init__(
        self,
        *,
        secret: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("token signing secret is required")
        self._secret = secret
        self._algorithm = algorithm
        self._lifetime = lifetime
        self._clock = clock or (lambda: datetime.now(UTC))

    def issue(self, user: User) -> IssuedToken:
        now = self._clock().replace(microsecond=0)
        expires_at = now + self._lifetime
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "iat": now,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self._secret, algorithm=self._algorithm)
        return IssuedToken(user_id=user.id, token=token, expires_at=expires_at)

    def decode(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
            user_id = int(payload["sub"])
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as exc:
            raise InvalidTokenError() from exc
        return TokenClaims(
            user_id=user_id,
            email=payload.get("email"),
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )


__all__ = ["JwtTokenIssuer"]
