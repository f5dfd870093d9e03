from __future__ import annotations

import logging
from typing import Optional

from .enums import StorageErrorCode

logger = logging.getLogger(__name__)


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a record is absent or not visible to the caller's tenant."""


class ConflictError(DomainError):
    """Raised when a write collides with a uniqueness constraint."""


class ForbiddenError(DomainError):
    """Raised when a user lacks permission for an action."""


class AuthenticationError(DomainError):
    """Raised when the request carries no acting user or tenant."""


class OperationFailedError(DomainError):
    """Raised for store failures that have no domain meaning."""


class HardCapExceededError(ForbiddenError):
    code = "av30.hard_cap"

    def __init__(self, org_id: str):
        super().__init__("AV30 hard cap reached; action blocked")
        self.org_id = org_id


class StorageError(Exception):
    """Raised by repositories; carries a StorageErrorCode instead of driver details."""

    def __init__(self, code: StorageErrorCode, message: str = "", *, errno: Optional[int] = None):
        super().__init__(message or code.value)
        self.code = code
        self.errno = errno


def translate_storage_error(exc: StorageError, *, entity: str, action: str) -> DomainError:
    """Map a StorageError onto the domain taxonomy.

    This is the only place storage codes are interpreted; services call it
    from their ``except StorageError`` blocks and raise the result.
    """

    if exc.code == StorageErrorCode.NOT_FOUND:
        return NotFoundError(f"{entity.capitalize()} not found")
    if exc.code == StorageErrorCode.UNIQUE_VIOLATION:
        logger.warning("unique violation on %s %s (errno=%s)", action, entity, exc.errno)
        return ConflictError(f"Duplicate {entity} violates a unique constraint")
    if exc.code == StorageErrorCode.FOREIGN_KEY_VIOLATION:
        logger.warning("foreign key violation on %s %s (errno=%s)", action, entity, exc.errno)
        return ValidationError(f"Invalid reference on {action} {entity}")

    logger.error("storage failure on %s %s: %s", action, entity, exc, exc_info=exc)
    return OperationFailedError(f"Failed to {action} {entity}")
