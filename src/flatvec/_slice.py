"""
Slice Descriptors

A Slice is the uniform way every extended-form kernel addresses a
sub-range: ``(container, start, count)``. Construction is free: nothing
is validated until a kernel resolves the slice, at which point the whole
addressed range is checked against the container's valid range before
any element is touched.

Example:
    >>> s = Slice([1, 2, 3, 4, 5], 1, 3)   # elements 2, 3, 4
    >>> s.resolve()
    (1, 3)
    >>> Slice([1, 2, 3], 1).resolve()      # count omitted: rest of range
    (1, 2)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from ._errors import (
    ContractViolationError,
    LengthMismatchError,
    RangeViolationError,
    bad_argument,
)
from ._typing import index_range, is_readable

__all__ = ['Slice', 'as_slice', 'resolve_slices', 'resolve_exact']


@dataclass(frozen=True)
class Slice:
    """
    Non-owning descriptor of a sub-range of a container.

    Attributes:
        container: Array, Sequence or View being addressed
        start: First addressed index (None: the container's first index)
        count: Number of addressed indices (None: every remaining index)
    """

    container: Any
    start: Optional[int] = None
    count: Optional[int] = None

    def resolve(self, position: int = 1, name: str = 'slice',
                func: str = 'resolve') -> Tuple[int, int]:
        """
        Validate the slice against its container's current range.

        Args:
            position: Argument position for error messages
            name: Argument name for error messages
            func: Calling function name for error messages

        Returns:
            (start, count) with defaults filled in

        Raises:
            ContractViolationError: If the container is not Readable
            RangeViolationError: If any addressed index is invalid
        """
        if not is_readable(self.container):
            raise ContractViolationError(bad_argument(
                position, name, func,
                f"Readable expected, got {type(self.container).__name__}"))

        valid = index_range(self.container)
        start = valid.start if self.start is None else self.start
        count = valid.stop - start if self.count is None else self.count

        if count < 0:
            raise RangeViolationError(bad_argument(
                position, name, func, f"count {count} is negative"))
        if count > 0 and (start < valid.start or start + count > valid.stop):
            raise RangeViolationError(bad_argument(
                position, name, func,
                f"range [{start}, {start + count}) outside valid range "
                f"[{valid.start}, {valid.stop})"))
        if count == 0 and not valid.start <= start <= valid.stop:
            raise RangeViolationError(bad_argument(
                position, name, func,
                f"start {start} outside valid range [{valid.start}, {valid.stop}]"))
        return start, count

    def indices(self) -> range:
        """Addressed indices as a range (validates)."""
        start, count = self.resolve()
        return range(start, start + count)

    def __len__(self) -> int:
        return self.resolve()[1]


def as_slice(value: Any) -> Slice:
    """
    Coerce a kernel argument to a Slice.

    Accepts a Slice, a ``(container, start)`` or ``(container, start,
    count)`` tuple, or a bare container addressing its whole range.
    """
    if isinstance(value, Slice):
        return value
    if (isinstance(value, tuple) and len(value) in (2, 3)
            and is_readable(value[0]) and not isinstance(value[0], (str, bytes))
            and all(isinstance(v, int) or v is None for v in value[1:])):
        return Slice(*value)
    return Slice(value)


def resolve_slices(func: str, *, positions: Optional[Sequence[int]] = None,
                   **named: Any) -> Tuple[Tuple[Any, int, int], ...]:
    """
    Coerce and resolve several slice arguments at once.

    Args:
        func: Calling function name (for error messages)
        positions: Argument positions of ``named`` when they are not 1, 2, ...
        **named: Slice arguments in signature order

    Returns:
        Tuple of (container, start, count) per argument

    Raises:
        ContractViolationError, RangeViolationError
    """
    if positions is None:
        positions = range(1, len(named) + 1)
    resolved = []
    for position, (name, value) in zip(positions, named.items()):
        s = as_slice(value)
        start, count = s.resolve(position, name, func)
        resolved.append((s.container, start, count))
    return tuple(resolved)


def resolve_exact(func: str, position: int, name: str, value: Any, n: int) -> Tuple[Any, int]:
    """
    Resolve a slice argument that must address exactly ``n`` elements.

    A slice given without a count addresses ``n`` elements from its start.

    Returns:
        (container, start)

    Raises:
        LengthMismatchError: If the slice states a different count
        RangeViolationError: If the ``n`` elements leave the valid range
    """
    s = as_slice(value)
    if s.count is not None and s.count != n:
        raise LengthMismatchError(bad_argument(
            position, name, func, f"count {s.count} given where exactly {n} is required"))
    start, _ = Slice(s.container, s.start, n).resolve(position, name, func)
    return s.container, start
