from __future__ import annotations

import threading

import pytest

from marketplace.infrastructure.resilience import BoundedExecutor
from marketplace.infrastructure.security.password_hashing import BcryptPasswordHasher
from marketplace.shared.errors import OperationTimeoutError


@pytest.fixture()
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=4)


def test_hash_is_salted_bcrypt(hasher: BcryptPasswordHasher) -> None:
    first = hasher.hash("segredo1")
    second = hasher.hash("segredo1")

    assert first != "segredo1"
    assert first != second
    assert first.startswith("$2b$04$")


def test_default_work_factor_is_ten() -> None:
    assert BcryptPasswordHasher().hash("segredo1").startswith("$2b$10$")


def test_verify(hasher: BcryptPasswordHasher) -> None:
    hashed = hasher.hash("segredo1")

    assert hasher.verify("segredo1", hashed) is True
    assert hasher.verify("errada", hashed) is False
    assert hasher.verify("segredo1", None) is False
    assert hasher.verify("segredo1", "not-a-bcrypt-hash") is False


def test_hashing_runs_on_bounded_executor() -> None:
    executor = BoundedExecutor(max_workers=1, timeout=5.0, name="test-hash")
    try:
        hasher = BcryptPasswordHasher(rounds=4, executor=executor)
        assert hasher.verify("segredo1", hasher.hash("segredo1")) is True
    finally:
        executor.shutdown()


def test_executor_timeout_surfaces_as_503() -> None:
    release = threading.Event()
    executor = BoundedExecutor(max_workers=1, timeout=0.1, name="test-timeout")
    try:
        with pytest.raises(OperationTimeoutError) as exc_info:
            executor.call(release.wait, 5, operation="password_hash")
    finally:
        release.set()
        executor.shutdown()

    assert exc_info.value.status == 503
    assert exc_info.value.to_dict() == {
        "error": "operation_timeout",
        "context": {"operation": "password_hash"},
    }
