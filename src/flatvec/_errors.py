"""
Error handling for flatvec.

Every failure in the core is a programming-contract failure detected at
the call boundary, before any destination is written. Each error kind
carries a stable numeric code and also derives from the closest builtin
exception so callers can catch either.
"""

from __future__ import annotations

from typing import Any, Optional, Type


# =============================================================================
# Error Codes
# =============================================================================

FLATVEC_OK = 0

# General errors (1-9)
FLATVEC_ERROR_UNKNOWN = 1

# Argument errors (10-19)
FLATVEC_ERROR_LENGTH_MISMATCH = 11
FLATVEC_ERROR_DOMAIN_VIOLATION = 12
FLATVEC_ERROR_RANGE_VIOLATION = 13

# Type errors (20-29)
FLATVEC_ERROR_CONTRACT_VIOLATION = 20


_ERROR_MESSAGES = {
    FLATVEC_OK: "Success",
    FLATVEC_ERROR_UNKNOWN: "Unknown error",
    FLATVEC_ERROR_LENGTH_MISMATCH: "Length mismatch",
    FLATVEC_ERROR_DOMAIN_VIOLATION: "Domain violation",
    FLATVEC_ERROR_RANGE_VIOLATION: "Range violation",
    FLATVEC_ERROR_CONTRACT_VIOLATION: "Contract violation",
}


# =============================================================================
# Exception Classes
# =============================================================================

class FlatvecError(Exception):
    """
    Base exception for all flatvec errors.

    Attributes:
        code: Numeric error code (see module constants)
        message: Human readable detail
    """

    OK = FLATVEC_OK
    ERROR_UNKNOWN = FLATVEC_ERROR_UNKNOWN
    ERROR_LENGTH_MISMATCH = FLATVEC_ERROR_LENGTH_MISMATCH
    ERROR_DOMAIN_VIOLATION = FLATVEC_ERROR_DOMAIN_VIOLATION
    ERROR_RANGE_VIOLATION = FLATVEC_ERROR_RANGE_VIOLATION
    ERROR_CONTRACT_VIOLATION = FLATVEC_ERROR_CONTRACT_VIOLATION

    code = FLATVEC_ERROR_UNKNOWN

    def __init__(self, message: Optional[str] = None, code: Optional[int] = None):
        if code is not None:
            self.code = code
        if message is None:
            message = _ERROR_MESSAGES.get(self.code, f"Unknown error (code={self.code})")
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"flatvec error {self.code}: {self.message}"


class ContractViolationError(FlatvecError, TypeError):
    """An argument lacks a capability the call requires."""
    code = FLATVEC_ERROR_CONTRACT_VIOLATION


class LengthMismatchError(FlatvecError, ValueError):
    """Slice or array counts disagree where equality is required."""
    code = FLATVEC_ERROR_LENGTH_MISMATCH


class RangeViolationError(FlatvecError, IndexError):
    """A descriptor addresses indices outside its container's valid range."""
    code = FLATVEC_ERROR_RANGE_VIOLATION


class DomainViolationError(FlatvecError, ValueError):
    """The requested operation is numerically undefined for its input."""
    code = FLATVEC_ERROR_DOMAIN_VIOLATION


_ERROR_CLASSES = {
    FLATVEC_ERROR_LENGTH_MISMATCH: LengthMismatchError,
    FLATVEC_ERROR_DOMAIN_VIOLATION: DomainViolationError,
    FLATVEC_ERROR_RANGE_VIOLATION: RangeViolationError,
    FLATVEC_ERROR_CONTRACT_VIOLATION: ContractViolationError,
}


# =============================================================================
# Helpers
# =============================================================================

def bad_argument(position: int, name: str, func: str, detail: str) -> str:
    """Format the standard message for a rejected argument."""
    return f"bad argument #{position} '{name}' to {func} ({detail})"


def error_from_code(code: int, message: Optional[str] = None) -> FlatvecError:
    """
    Build the exception matching an error code.

    Args:
        code: One of the FLATVEC_ERROR_* constants
        message: Optional detail

    Returns:
        Exception instance (not raised)
    """
    cls = _ERROR_CLASSES.get(code, FlatvecError)
    return cls(message, code=code)


def check(condition: Any, error_cls: Type[FlatvecError], message: str) -> None:
    """
    Raise ``error_cls(message)`` when condition is falsy.

    Example:
        >>> check(n > 0, DomainViolationError, "count must be positive")
    """
    if not condition:
        raise error_cls(message)


def check_equal_counts(func: str, counts: "dict[str, int]") -> int:
    """
    Verify that every named count is equal.

    Args:
        func: Calling function name (for the message)
        counts: Mapping of argument name to resolved count, in argument order

    Returns:
        The common count

    Raises:
        LengthMismatchError: If counts differ
    """
    items = list(counts.items())
    first_name, first = items[0]
    for position, (name, count) in enumerate(items[1:], start=2):
        if count != first:
            raise LengthMismatchError(bad_argument(
                position, name, func,
                f"count {count} does not match '{first_name}' count {first}"
            ))
    return first


__all__ = [
    'FLATVEC_OK',
    'FLATVEC_ERROR_UNKNOWN',
    'FLATVEC_ERROR_LENGTH_MISMATCH',
    'FLATVEC_ERROR_DOMAIN_VIOLATION',
    'FLATVEC_ERROR_RANGE_VIOLATION',
    'FLATVEC_ERROR_CONTRACT_VIOLATION',
    'FlatvecError',
    'ContractViolationError',
    'LengthMismatchError',
    'RangeViolationError',
    'DomainViolationError',
    'bad_argument',
    'error_from_code',
    'check',
    'check_equal_counts',
]
