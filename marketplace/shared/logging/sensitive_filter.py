# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

SENSITIVE_PATTERNS = [
    # Signing secrets
    (r"(jwt[_-]?secret\s*[:=]\s*['\"]?)([^'\"\s]{6,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"(secret[_-]?key\s*[:=]\s*['\"]?)([a-zA-Z0-9_\-]{20,})(['\"]?)", r"\1***REDACTED***\3"),

    # Tokens
    (r"(bearer\s+)([a-zA-Z0-9_\-\.]{20,})", r"\1***REDACTED***", re.IGNORECASE),
    (r"(token\s*[:=]\s*['\"]?)([a-zA-Z0-9_\-\.]{20,})(['\"]?)", r"\1***REDACTED***\3"),
    (r"\beyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+", r"***JWT***"),

    # Passwords (pt-BR field name included)
    (r"(password\s*[:=]\s*['\"]?)([^'\"]{6,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
    (r"(senha\s*[:=]\s*['\"]?)([^'\"]{1,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),

    # bcrypt hashes
    (r"\$2[aby]\$\d{2}\$[./A-Za-z0-9]{53}", r"***BCRYPT***"),

    # Database URLs with credentials
    (r"(postgres(?:ql)?(?:\+\w+)?|mysql(?:\+\w+)?)://([^:/@]+):([^@]+)@", r"\1://\2:***REDACTED***@"),

    # Email addresses (partial masking)
    (r"([a-zA-Z0-9._%+-]+)@([a-zA-Z0-9.-]+\.[a-zA-Z]{2,})", r"***@\2"),

    # Phone numbers
    (r"(telefone\s*[:=]\s*['\"]?)(\+?[\d\s()\-]{7,20})(['\"]?)", r"\1***\3", re.IGNORECASE),

    # Authorization headers
    (r"(authorization\s*:\s*['\"]?)([^'\"]{10,})(['\"]?)", r"\1***REDACTED***\3", re.IGNORECASE),
]


def sanitize_message(message: str) -> str:
    sanitized = message

    for pattern_tuple in SENSITIVE_PATTERNS:
        if len(pattern_tuple) == 2:
            pattern, replacement = pattern_tuple
            flags = 0
        else:
            pattern, replacement, flags = pattern_tuple

        sanitized = re.sub(pattern, replacement, sanitized, flags=flags)

    return sanitized


def sanitize_record(record: dict[str, Any]) -> bool:
    if "message" in record:
        record["message"] = sanitize_message(record["message"])
    return True
