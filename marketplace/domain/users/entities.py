# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True, frozen=True)
class User:

    id: int
    name: str
    email: str
    password_hash: str
    created_at: datetime
    phone: str | None = None

    def public_view(self) -> dict[str, object]:
        return {"id": self.id, "nome": self.name, "email": self.email}


@dataclass(slots=True, frozen=True)
class IssuedToken:

    user_id: int
    token: str
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class TokenClaims:

    user_id: int
    email: str | None
    issued_at: datetime
    expires_at: datetime
