"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from marketplace.domain.users.repositories import PasswordHasher
from marketplace.infrastructure.resilience import BoundedExecutor

# bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, *, rounds: int = 10, executor: BoundedExecutor | None = None) -> None:
        self._rounds = rounds
        self._executor = executor
        # Compared against when the email is unknown so both failure paths cost the same.
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds))

    def hash(self, password: str) -> str:
        return self._run(self._hash, password, operation="password_hash")

    def verify(self, password: str, hashed: str | None) -> bool:
        return self._run(self._verify, password, hashed, operation="password_verify")

    def _hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(self._rounds)).decode("utf-8")

    def _verify(self, password: str, hashed: str | None) -> bool:
        if not hashed:
            bcrypt.checkpw(_encode(password), self._dummy_hash)
            return False
        try:
            return bool(bcrypt.checkpw(_encode(password), hashed.encode("utf-8")))
        except ValueError:
            # Malformed stored hash
            return False

    def _run(self, func, *args, operation: str):
        if self._executor is None:
            return func(*args)
        return self._executor.call(func, *args, operation=operation)
