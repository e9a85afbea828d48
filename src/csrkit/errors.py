"""
Error handling for csrkit.

Every failure is a caller-side contract violation detected at call entry,
before any result buffer is allocated. Errors carry a numeric code so that
callers wrapping csrkit behind another API can map them without parsing
messages.
"""

from __future__ import annotations

from typing import Optional


# =============================================================================
# Error Codes
# =============================================================================

# Success
CSRKIT_OK = 0

# Argument errors (10-19)
CSRKIT_ERROR_INVALID_ARGUMENT = 10
CSRKIT_ERROR_DIMENSION_MISMATCH = 11
CSRKIT_ERROR_DOMAIN_ERROR = 12
CSRKIT_ERROR_INDEX_OUT_OF_BOUNDS = 14

# Type errors (20-29)
CSRKIT_ERROR_TYPE_ERROR = 20


_ERROR_MESSAGES = {
    CSRKIT_OK: "Success",
    CSRKIT_ERROR_INVALID_ARGUMENT: "Invalid argument",
    CSRKIT_ERROR_DIMENSION_MISMATCH: "Dimension mismatch",
    CSRKIT_ERROR_DOMAIN_ERROR: "Domain error",
    CSRKIT_ERROR_INDEX_OUT_OF_BOUNDS: "Index out of bounds",
    CSRKIT_ERROR_TYPE_ERROR: "Type error",
}


# =============================================================================
# Exception Classes
# =============================================================================

class CsrKitError(Exception):
    """
    Base exception for all csrkit errors.

    Subclasses pin a default code; the base class accepts any code from
    the table above.
    """

    OK = CSRKIT_OK
    ERROR_INVALID_ARGUMENT = CSRKIT_ERROR_INVALID_ARGUMENT
    ERROR_DIMENSION_MISMATCH = CSRKIT_ERROR_DIMENSION_MISMATCH
    ERROR_DOMAIN_ERROR = CSRKIT_ERROR_DOMAIN_ERROR
    ERROR_INDEX_OUT_OF_BOUNDS = CSRKIT_ERROR_INDEX_OUT_OF_BOUNDS
    ERROR_TYPE_ERROR = CSRKIT_ERROR_TYPE_ERROR

    def __init__(self, code: int, message: Optional[str] = None):
        """
        Create a csrkit exception.

        Args:
            code: Error code
            message: Optional detailed message (looked up from the code if not provided)
        """
        self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(code, f"Unknown error (code={code})")
        self.message = message
        super().__init__(f"csrkit error {code}: {message}")

    @classmethod
    def from_code(cls, code: int, context: str = "") -> "CsrKitError":
        """Create exception from error code with optional context."""
        base_msg = _ERROR_MESSAGES.get(code, "Unknown error")
        msg = f"{context}: {base_msg}" if context else base_msg
        # Subclasses change the constructor signature; bypass it.
        err = cls.__new__(cls)
        CsrKitError.__init__(err, code, msg)
        return err


class UnsupportedKindError(CsrKitError, TypeError):
    """Element or index kind outside the supported closed set."""

    def __init__(self, message: str):
        super().__init__(CSRKIT_ERROR_TYPE_ERROR, message)


class ShapeMismatchError(CsrKitError, ValueError):
    """Buffer lengths or shapes violate the CSR layout."""

    def __init__(self, message: str, code: int = CSRKIT_ERROR_DIMENSION_MISMATCH):
        super().__init__(code, message)


class MonotonicityError(CsrKitError, ValueError):
    """Row pointer buffer decreases somewhere.

    Attributes:
        position: First index ``k`` with ``indptr[k + 1] < indptr[k]``.
    """

    position: int = -1

    def __init__(self, message: str, position: int = -1):
        self.position = position
        super().__init__(CSRKIT_ERROR_DOMAIN_ERROR, message)


class InvalidArgumentError(CsrKitError, ValueError):
    """Bad operation name, option, or operation parameter."""

    def __init__(self, message: str):
        super().__init__(CSRKIT_ERROR_INVALID_ARGUMENT, message)


__all__ = [
    "CSRKIT_OK",
    "CSRKIT_ERROR_INVALID_ARGUMENT",
    "CSRKIT_ERROR_DIMENSION_MISMATCH",
    "CSRKIT_ERROR_DOMAIN_ERROR",
    "CSRKIT_ERROR_INDEX_OUT_OF_BOUNDS",
    "CSRKIT_ERROR_TYPE_ERROR",
    "CsrKitError",
    "UnsupportedKindError",
    "ShapeMismatchError",
    "MonotonicityError",
    "InvalidArgumentError",
]
