"""Domain error taxonomy.

Each error carries a stable ``code`` that the service layer copies into
:class:`~petpassport.services.result.ServiceError`.
"""

from __future__ import annotations

from typing import ClassVar


class PassportError(Exception):
    """Base class for passport domain errors."""

    code: ClassVar[str] = "PASSPORT_ERROR"


class InsufficientPermissionsError(PassportError):
    """The caller is not allowed to perform the operation on this passport."""

    code = "INSUFFICIENT_PERMISSIONS"


class InvalidPassportError(PassportError):
    """Reserved for structural-validity enforcement. Not raised by any operation."""

    code = "INVALID_PASSPORT"
