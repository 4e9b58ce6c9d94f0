# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .exceptions import DomainError, InvariantViolation
from .providers.entities import (
    ALL_CATEGORIES,
    DEFAULT_PRICE,
    Provider,
    ProviderQuery,
    Review,
)

__all__ = [
    "ALL_CATEGORIES",
    "DEFAULT_PRICE",
    "DomainError",
    "InvariantViolation",
    "Provider",
    "ProviderQuery",
    "Review",
]
