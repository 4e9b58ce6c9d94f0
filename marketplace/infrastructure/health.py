# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from marketplace.infrastructure.db import Database
from marketplace.shared.errors import StorageUnavailableError
from marketplace.shared.logging import logger


def check_database(database: Database) -> bool:
    try:
        return database.ping()
    except StorageUnavailableError as exc:
        cause = exc.__cause__
        logger.error(f"health: database ping failed: {type(cause).__name__}: {cause}")
        return False


__all__ = ["check_database"]
