"""
flatvec Capability Contracts.

This module defines the capability protocols every container must satisfy
to take part in flatvec operations. There is no common base type: any
object that implements the needed methods for a given call qualifies.

    - Readable:  bounded read at index plus a length query
    - Writable:  bounded write at index
    - Resizable: append and pop (optional, only push/pop kernels need it)

A container's valid index range is ``range(len(obj))`` for host-native
Arrays. Sequences whose range does not start at 0 expose it through an
``index_range`` attribute instead.

Kernels check capabilities at the call boundary and raise
ContractViolationError naming the missing capability and the argument.

Example:
    >>> from flatvec._typing import require_readable, index_range
    >>>
    >>> def my_kernel(src, dest):
    ...     require_readable(src, 1, 'src', 'my_kernel')
    ...     require_writable(dest, 2, 'dest', 'my_kernel')
    ...     for i in index_range(src):
    ...         ...
"""

from __future__ import annotations

from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
    Union,
    runtime_checkable,
)

from ._errors import ContractViolationError, bad_argument

if TYPE_CHECKING:
    import numpy as np
    from ._array import Array
    from ._dtypes import DType
    from ._slice import Slice


# =============================================================================
# Type Variables
# =============================================================================

T = TypeVar("T")


# =============================================================================
# Protocol Definitions
# =============================================================================

@runtime_checkable
class Readable(Protocol):
    """Protocol for readable containers.

    Any object implementing __getitem__ and __len__ can be read by
    every kernel.
    """

    def __getitem__(self, index: int) -> Any:
        """Element access."""
        ...

    def __len__(self) -> int:
        """Number of valid indices."""
        ...


@runtime_checkable
class Writable(Protocol):
    """Protocol for writable containers (kernel destinations)."""

    def __setitem__(self, index: int, value: Any) -> None:
        """Element assignment."""
        ...


@runtime_checkable
class Resizable(Protocol):
    """Protocol for containers that can grow and shrink at the end."""

    def append(self, value: Any) -> None:
        """Add one element after the last valid index."""
        ...

    def pop(self) -> Any:
        """Remove and return the element at the last valid index."""
        ...


@runtime_checkable
class SequenceLike(Readable, Protocol):
    """Protocol for Sequences valid over an arbitrary index range.

    The range is a ``range`` with step 1, fixed for the lifetime of the
    object.
    """

    @property
    def index_range(self) -> range:
        """Valid indices."""
        ...


# =============================================================================
# Type Aliases
# =============================================================================

# Anything usable as a kernel source
ReadableInput = Union[
    "Array",
    "np.ndarray",
    Sequence[Any],
    Readable,
]

# Anything usable as a kernel destination
WritableInput = Union[
    "Array",
    "np.ndarray",
    "list",
    Writable,
]

# Slice arguments accept descriptors, (container, start[, count]) tuples
# and bare containers
SliceInput = Union["Slice", Tuple[Any, int], Tuple[Any, int, int], ReadableInput]

# Construction hook: (element type, length) -> Readable + Writable container
ContainerFactory = Callable[["DType", int], Any]


# =============================================================================
# Capability Queries
# =============================================================================

def is_readable(obj: Any) -> bool:
    """Check whether obj supports indexed read and a length/range query."""
    if not hasattr(obj, '__getitem__'):
        return False
    return hasattr(obj, 'index_range') or hasattr(obj, '__len__')


def is_writable(obj: Any) -> bool:
    """Check whether obj supports indexed write.

    Views over read-only sources report ``writable = False``.
    """
    return hasattr(obj, '__setitem__') and getattr(obj, 'writable', True) is not False


def is_resizable(obj: Any) -> bool:
    """Check whether obj can append and pop."""
    return isinstance(obj, Resizable)


def index_range(obj: Any) -> range:
    """
    Get the valid index range of a container.

    Args:
        obj: Readable container or Sequence

    Returns:
        range of valid indices (step 1)
    """
    rng = getattr(obj, 'index_range', None)
    if rng is not None:
        return rng
    return range(len(obj))


def first_index(obj: Any) -> int:
    """First valid index of a container."""
    return index_range(obj).start


def length(obj: Any) -> int:
    """Number of valid indices of a container."""
    return len(index_range(obj))


# =============================================================================
# Capability Checks
# =============================================================================

def require_readable(obj: Any, position: int, name: str, func: str) -> None:
    """
    Raise ContractViolationError unless obj is Readable.

    Args:
        obj: Candidate argument
        position: 1-based argument position in the caller's signature
        name: Argument name
        func: Calling function name
    """
    if not is_readable(obj):
        raise ContractViolationError(bad_argument(
            position, name, func,
            f"Readable expected, got {type(obj).__name__}"
        ))


def require_writable(obj: Any, position: int, name: str, func: str) -> None:
    """Raise ContractViolationError unless obj is Readable and Writable."""
    require_readable(obj, position, name, func)
    if not is_writable(obj):
        raise ContractViolationError(bad_argument(
            position, name, func,
            f"Writable expected, got {type(obj).__name__}"
        ))


def require_resizable(obj: Any, position: int, name: str, func: str) -> None:
    """Raise ContractViolationError unless obj is Resizable."""
    if not is_resizable(obj):
        raise ContractViolationError(bad_argument(
            position, name, func,
            f"Resizable expected, got {type(obj).__name__}"
        ))


def require_callable(obj: Any, position: int, name: str, func: str) -> None:
    """Raise ContractViolationError unless obj is callable."""
    if not callable(obj):
        raise ContractViolationError(bad_argument(
            position, name, func,
            f"callable expected, got {type(obj).__name__}"
        ))


__all__ = [
    "Readable",
    "Writable",
    "Resizable",
    "SequenceLike",
    "ReadableInput",
    "WritableInput",
    "SliceInput",
    "ContainerFactory",
    "is_readable",
    "is_writable",
    "is_resizable",
    "index_range",
    "first_index",
    "length",
    "require_readable",
    "require_writable",
    "require_resizable",
    "require_callable",
]
