# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from typing import Any

from flask import Flask, g, request

from marketplace.shared.logging import clear_correlation_id, logger, set_correlation_id


def _get_client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    return request.remote_addr or "unknown"


def _get_user_id() -> int | None:
    return getattr(g, "user_id", None)


def _sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    sensitive_headers = {"authorization", "cookie", "x-api-key", "x-auth-token"}

    sanitized = {}
    for key, value in headers.items():
        if key.lower() in sensitive_headers:
            sanitized[key] = f"<hashed:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"
        else:
            sanitized[key] = value

    return sanitized


def _sanitize_query_params(params: dict[str, Any]) -> dict[str, Any]:
    sensitive_params = {"password", "senha", "token", "key", "secret", "auth"}

    sanitized = {}
    for key, value in params.items():
        key_lower = key.lower()
        if any(sensitive in key_lower for sensitive in sensitive_params):
            sanitized[key] = "<redacted>"
        else:
            sanitized[key] = value

    return sanitized


def _log_request_start(debug_mode: bool) -> None:
    ip_address = _get_client_ip()

    if debug_mode:
        headers = _sanitize_headers(dict(request.headers))
        query_params = _sanitize_query_params(dict(request.args))

        logger.debug(
            f"Request started: {request.method} {request.path} "
            f"from {ip_address}, query={query_params}, headers={headers}, "
            f"body_size={request.content_length or 0}"
        )
    else:
        logger.info(f"Request: {request.method} {request.path} from {ip_address}")


def _log_request_end(debug_mode: bool, status_code: int, start_time: float) -> None:
    duration = time.perf_counter() - start_time

    if debug_mode:
        logger.info(
            f"Request completed: {request.method} {request.path} "
            f"status={status_code}, duration={duration:.3f}s, "
            f"from {_get_client_ip()}, user={_get_user_id()}"
        )
    else:
        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={status_code}, duration={duration:.3f}s"
        )


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    @app.before_request
    def _before_request() -> None:
        correlation_id = request.headers.get("X-Request-ID") or secrets.token_urlsafe(8)
        set_correlation_id(correlation_id)
        g.correlation_id = correlation_id
        g.request_start_time = time.perf_counter()

        _log_request_start(debug_mode)

    @app.after_request
    def _after_request(response):
        start_time = getattr(g, "request_start_time", time.perf_counter())
        _log_request_end(debug_mode, response.status_code, start_time)
        correlation_id = getattr(g, "correlation_id", None)
        if correlation_id:
            response.headers.setdefault("X-Request-ID", correlation_id)
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(
                f"Request error: {type(exc).__name__} on "
                f"{request.method} {request.path}"
            )

        clear_correlation_id()


__all__ = ["configure_request_logging"]
