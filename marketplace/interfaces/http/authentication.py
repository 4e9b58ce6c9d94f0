# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import g, request

from marketplace.domain.users.entities import TokenClaims
from marketplace.domain.users.exceptions import InvalidTokenError
from marketplace.domain.users.repositories import TokenIssuer
from marketplace.shared.errors import UnauthorizedError
from marketplace.shared.logging import logger


def get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


def bearer_token() -> str:
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def authenticate(tokens: TokenIssuer) -> TokenClaims:
    """Verify the bearer token of the current request and remember its user on ``g``."""

    token = bearer_token()
    if not token:
        logger.warning(
            f"No Authorization header on {request.method} {request.path} from {get_client_ip()}"
        )
        raise UnauthorizedError()
    try:
        claims = tokens.decode(token)
    except InvalidTokenError:
        logger.warning(f"Auth failed (invalid/expired token) on {request.method} {request.path}")
        raise

    g.user_id = claims.user_id
    logger.debug(f"Auth OK: user={claims.user_id} {request.method} {request.path}")
    return claims


__all__ = ["authenticate", "bearer_token", "get_client_ip"]
