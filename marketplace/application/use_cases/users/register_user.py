# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from marketplace.domain.users.entities import User
from marketplace.domain.users.exceptions import EmailAlreadyRegisteredError
from marketplace.domain.users.repositories import PasswordHasher, UserRepository


class RegisterUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(
        self, name: str, email: str, password: str, phone: str | None = None
    ) -> User:
        email = email.strip()
        existing = self._users.find_by_email(email)
        if existing:
            raise EmailAlreadyRegisteredError()
        now = datetime.now(UTC)
        hashed = self._password_hasher.hash(password)
        user = User(
            id=0,
            name=name.strip(),
            email=email,
            password_hash=hashed,
            phone=phone,
            created_at=now,
        )
        return self._users.add(user)
