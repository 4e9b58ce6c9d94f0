# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from marketplace.domain.users.entities import User
from marketplace.domain.users.exceptions import InvalidTokenError
from marketplace.domain.users.repositories import UserRepository


class GetCurrentUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: int) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            # Token outlived its account.
            raise InvalidTokenError()
        return user
