# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from marketplace.domain.users.entities import IssuedToken, User
from marketplace.domain.users.exceptions import InvalidCredentialsError
from marketplace.domain.users.repositories import PasswordHasher, TokenIssuer, UserRepository


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        password_hasher: PasswordHasher,
        tokens: TokenIssuer,
    ) -> None:
        self._users = users
        self._password_hasher = password_hasher
        self._tokens = tokens

    def execute(self, email: str, password: str) -> tuple[IssuedToken, User]:
        user = self._users.find_by_email(email.strip())
        # Unknown e-mails still pay for a bcrypt comparison.
        password_valid = self._password_hasher.verify(
            password, user.password_hash if user else None
        )

        if user is None or not password_valid:
            raise InvalidCredentialsError()

        return self._tokens.issue(user), user
