"""
Zero-Copy Views

Views present an alternate index mapping over one or more underlying
containers without copying elements. They satisfy the same capability
contracts as the containers they wrap, so every kernel accepts them, and
they compose: a view may wrap another view.

View Kinds:

    slice       k -> index + k
    stride      k -> index + k * stride
    reverse     k -> last - k
    interleave  k -> index + (k // group_size) * stride + k % group_size
    constant    k -> value                         (read-only)
    join        k -> k-th element of the concatenated sources
    offset      re-bases a container so its range starts at ``first``

Every view is fixed-length: its range is declared at construction and
never grows, even over a resizable source. Views are writable when their
source is; constant views never are.

Ownership:
    A view holds a plain reference to its source(s) and never copies.
    Resizing a source after a view was built, or mutating it through
    another alias while iterating the view, is undefined: the view does
    not observe or guard against either.

Example:
    >>> from flatvec import view, ops
    >>> data = [1, 2, 3, 4, 5, 6]
    >>> list(view.reverse(data))
    [6, 5, 4, 3, 2, 1]
    >>> xs = view.interleave(data, 0, 1, 2, 3)   # every other element
    >>> ops.reduce_sum(xs)
    9
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from bisect import bisect_right
from typing import Any, Callable, Iterator, List, Optional, Tuple

from ._errors import (
    ContractViolationError,
    DomainViolationError,
    RangeViolationError,
    bad_argument,
)
from ._slice import Slice
from ._typing import index_range, is_writable, require_readable

__all__ = [
    'View',
    'SliceView',
    'StrideView',
    'ReverseView',
    'InterleaveView',
    'ConstantView',
    'JoinView',
    'OffsetView',
    'slice',
    'stride',
    'reverse',
    'interleave',
    'constant',
    'join',
    'offset',
    'fixed_slice',
    'get_slice',
]


# =============================================================================
# Base Classes
# =============================================================================

class View(ABC):
    """
    Abstract base class for all views.

    Subclasses implement ``_map`` translating a view index into
    ``(container, index)`` of an underlying element. The base class
    provides bounds-checked reads, the length and range queries, and
    rejects growth.
    """

    __slots__ = ('_count',)

    def __init__(self, count: int):
        self._count = count

    @abstractmethod
    def _map(self, k: int) -> Tuple[Any, int]:
        """Underlying (container, index) of valid view index k."""

    @property
    def index_range(self) -> range:
        """Valid indices of the view."""
        return range(self._count)

    def __len__(self) -> int:
        return self._count

    def _check(self, k: int) -> int:
        rng = self.index_range
        try:
            k = operator.index(k)
        except TypeError:
            raise IndexError(f"{type(self).__name__} indices must be integers, got {k!r}") from None
        if k not in rng:
            raise IndexError(
                f"Index {k!r} out of bounds [{rng.start}, {rng.stop}) of {type(self).__name__}")
        return k

    def __getitem__(self, k: int) -> Any:
        container, index = self._map(self._check(k))
        return container[index]

    def __iter__(self) -> Iterator[Any]:
        for k in self.index_range:
            container, index = self._map(k)
            yield container[index]

    def tolist(self) -> List[Any]:
        """Read the whole view into a list."""
        return list(self)

    def append(self, value: Any) -> None:
        """Views are fixed-length."""
        raise ContractViolationError(
            f"{type(self).__name__} is fixed-length and cannot be appended to")

    def extend(self, values: Any) -> None:
        """Views are fixed-length."""
        raise ContractViolationError(
            f"{type(self).__name__} is fixed-length and cannot be extended")

    def __repr__(self) -> str:
        values = self.tolist()
        if len(values) > 6:
            values = values[:3] + ['...'] + values[-3:]
        return f"{type(self).__name__}({values})"


class MappedView(View):
    """View whose elements are writable when its sources are."""

    __slots__ = ()

    @property
    @abstractmethod
    def sources(self) -> Tuple[Any, ...]:
        """Underlying containers."""

    @property
    def writable(self) -> bool:
        """True when every source accepts writes."""
        return all(is_writable(s) for s in self.sources)

    def __setitem__(self, k: int, value: Any) -> None:
        container, index = self._map(self._check(k))
        if not is_writable(container):
            raise ContractViolationError(
                f"{type(self).__name__} source {type(container).__name__} is not Writable")
        container[index] = value


def _check_index_span(src: Any, lo: int, hi: int, func: str) -> None:
    """Raise RangeViolationError unless [lo, hi] lies inside src's range."""
    valid = index_range(src)
    if lo < valid.start or hi >= valid.stop:
        raise RangeViolationError(bad_argument(
            1, 'src', func,
            f"view touches indices [{lo}, {hi}] outside valid range "
            f"[{valid.start}, {valid.stop})"))


# =============================================================================
# View Kinds
# =============================================================================

class SliceView(MappedView):
    """Contiguous window ``src[index : index + count]``."""

    __slots__ = ('_src', '_start')

    def __init__(self, src: Any, start: int, count: int):
        super().__init__(count)
        self._src = src
        self._start = start

    @property
    def sources(self) -> Tuple[Any, ...]:
        return (self._src,)

    def _map(self, k: int) -> Tuple[Any, int]:
        return self._src, self._start + k


class StrideView(MappedView):
    """Every ``stride``-th element starting at ``index``."""

    __slots__ = ('_src', '_start', '_stride')

    def __init__(self, src: Any, start: int, stride: int, count: int):
        super().__init__(count)
        self._src = src
        self._start = start
        self._stride = stride

    @property
    def sources(self) -> Tuple[Any, ...]:
        return (self._src,)

    @property
    def stride(self) -> int:
        return self._stride

    def _map(self, k: int) -> Tuple[Any, int]:
        return self._src, self._start + k * self._stride


class ReverseView(StrideView):
    """Elements read backwards from ``last``; a stride view with stride -1."""

    __slots__ = ()

    def __init__(self, src: Any, last: int, count: int):
        super().__init__(src, last, -1, count)


class InterleaveView(MappedView):
    """
    Groups of ``group_size`` consecutive elements, groups ``stride`` apart.

    Selecting the first two components of packed ``(x, y, z)`` records is
    ``interleave(src, 0, 2, 3, 2 * n)``.
    """

    __slots__ = ('_src', '_start', '_group', '_stride')

    def __init__(self, src: Any, start: int, group_size: int, stride: int, count: int):
        super().__init__(count)
        self._src = src
        self._start = start
        self._group = group_size
        self._stride = stride

    @property
    def sources(self) -> Tuple[Any, ...]:
        return (self._src,)

    def _map(self, k: int) -> Tuple[Any, int]:
        group, within = divmod(k, self._group)
        return self._src, self._start + group * self._stride + within


class ConstantView(View):
    """Read-only view repeating one value ``count`` times."""

    __slots__ = ('_value',)

    def __init__(self, value: Any, count: int):
        super().__init__(count)
        self._value = value

    @property
    def value(self) -> Any:
        return self._value

    def _map(self, k: int) -> Tuple[Any, int]:
        return (self._value,), 0

    def __getitem__(self, k: int) -> Any:
        self._check(k)
        return self._value

    def __iter__(self) -> Iterator[Any]:
        for _ in self.index_range:
            yield self._value


class JoinView(MappedView):
    """Concatenation of several containers; length is the sum of theirs."""

    __slots__ = ('_sources', '_offsets', '_firsts')

    def __init__(self, sources: Tuple[Any, ...]):
        ranges = [index_range(s) for s in sources]
        offsets = []
        total = 0
        for rng in ranges:
            offsets.append(total)
            total += len(rng)
        super().__init__(total)
        self._sources = tuple(sources)
        self._offsets = offsets
        self._firsts = [rng.start for rng in ranges]

    @property
    def sources(self) -> Tuple[Any, ...]:
        return self._sources

    def _map(self, k: int) -> Tuple[Any, int]:
        # Empty sources share an offset with their successor; bisect_right
        # skips past them to the last source starting at or before k
        i = bisect_right(self._offsets, k) - 1
        return self._sources[i], self._firsts[i] + k - self._offsets[i]


class OffsetView(MappedView):
    """
    A container re-based so that its valid range starts at ``first``.

    Turns any Array into a Sequence valid over ``[first, first + n)``;
    conversely, ``offset(seq, 0)`` presents a Sequence as a 0-based Array.
    """

    __slots__ = ('_src', '_first', '_src_first')

    def __init__(self, src: Any, first: int):
        rng = index_range(src)
        super().__init__(len(rng))
        self._src = src
        self._first = first
        self._src_first = rng.start

    @property
    def sources(self) -> Tuple[Any, ...]:
        return (self._src,)

    @property
    def index_range(self) -> range:
        return range(self._first, self._first + self._count)

    def _map(self, k: int) -> Tuple[Any, int]:
        return self._src, self._src_first + k - self._first


# =============================================================================
# Constructors
# =============================================================================

def slice(src: Any, index: Optional[int] = None, count: Optional[int] = None) -> SliceView:
    """
    Contiguous window view.

    Args:
        src: Readable container
        index: First index (default: first valid index)
        count: Number of elements (default: rest of range)

    Raises:
        RangeViolationError: If the window leaves the valid range
    """
    require_readable(src, 1, 'src', 'view.slice')
    start, count = Slice(src, index, count).resolve(1, 'src', 'view.slice')
    return SliceView(src, start, count)


def get_slice(container: Any, index: Optional[int] = None,
              count: Optional[int] = None) -> SliceView:
    """
    Validate a Slice eagerly and return it as a view.

    Example:
        >>> seq = offset([10, 20, 30], 6)      # valid over 6..8
        >>> get_slice(seq, 2, 3)
        Traceback (most recent call last):
        ...
        flatvec._errors.RangeViolationError: ...
    """
    require_readable(container, 1, 'container', 'get_slice')
    start, count = Slice(container, index, count).resolve(1, 'container', 'get_slice')
    return SliceView(container, start, count)


def stride(src: Any, index: int, stride: int, count: int) -> StrideView:
    """
    View of ``count`` elements ``stride`` apart starting at ``index``.

    Raises:
        DomainViolationError: If stride is zero
        RangeViolationError: If any mapped index is invalid
    """
    require_readable(src, 1, 'src', 'view.stride')
    if stride == 0:
        raise DomainViolationError(bad_argument(3, 'stride', 'view.stride', "stride must be nonzero"))
    if count < 0:
        raise RangeViolationError(bad_argument(4, 'count', 'view.stride', f"count {count} is negative"))
    if count:
        last = index + (count - 1) * stride
        _check_index_span(src, min(index, last), max(index, last), 'view.stride')
    return StrideView(src, index, stride, count)


def reverse(src: Any, index: Optional[int] = None, count: Optional[int] = None) -> ReverseView:
    """
    View reading backwards.

    Args:
        src: Readable container
        index: Index read first (default: last valid index)
        count: Number of elements (default: down to the first valid index)

    Example:
        >>> list(reverse([1, 2, 3]))
        [3, 2, 1]
        >>> list(reverse([1, 2, 3, 4], 2))
        [3, 2, 1]
    """
    require_readable(src, 1, 'src', 'view.reverse')
    valid = index_range(src)
    last = valid.stop - 1 if index is None else index
    if count is None:
        count = last - valid.start + 1
    if count < 0:
        raise RangeViolationError(bad_argument(3, 'count', 'view.reverse', f"count {count} is negative"))
    if count:
        _check_index_span(src, last - count + 1, last, 'view.reverse')
    return ReverseView(src, last, count)


def interleave(src: Any, index: int, group_size: int, stride: int, count: int) -> InterleaveView:
    """
    View of groups of ``group_size`` elements, successive groups ``stride`` apart.

    Raises:
        DomainViolationError: If group_size < 1 or stride is zero
        RangeViolationError: If any mapped index is invalid
    """
    require_readable(src, 1, 'src', 'view.interleave')
    if group_size < 1:
        raise DomainViolationError(bad_argument(
            3, 'group_size', 'view.interleave', "group_size must be positive"))
    if stride == 0:
        raise DomainViolationError(bad_argument(4, 'stride', 'view.interleave', "stride must be nonzero"))
    if count < 0:
        raise RangeViolationError(bad_argument(5, 'count', 'view.interleave', f"count {count} is negative"))
    if count:
        # Extremes lie in the first or the last group
        last_group = index + ((count - 1) // group_size) * stride
        last_end = last_group + (count - 1) % group_size
        first_end = index + min(group_size, count) - 1
        _check_index_span(src, min(index, last_group), max(first_end, last_end), 'view.interleave')
    return InterleaveView(src, index, group_size, stride, count)


def constant(value: Any, count: int) -> ConstantView:
    """Read-only view of ``count`` copies of ``value``."""
    if count < 0:
        raise RangeViolationError(bad_argument(2, 'count', 'view.constant', f"count {count} is negative"))
    return ConstantView(value, count)


def join(*sources: Any) -> JoinView:
    """
    Concatenate containers without copying.

    Example:
        >>> list(join([1, 2], [3], [4, 5]))
        [1, 2, 3, 4, 5]
    """
    for position, src in enumerate(sources, start=1):
        require_readable(src, position, f'sources[{position - 1}]', 'view.join')
    return JoinView(sources)


def offset(src: Any, first: int) -> OffsetView:
    """Present ``src`` as a Sequence valid over ``[first, first + len(src))``."""
    require_readable(src, 1, 'src', 'view.offset')
    return OffsetView(src, first)


# =============================================================================
# Fixed-Count Slices
# =============================================================================

def fixed_slice(n: int) -> Callable[..., SliceView]:
    """
    Build the fixed-count slice constructor for ``n`` elements.

    The returned function takes ``(src, index=None)`` and always views
    exactly ``n`` elements.
    """
    name = f'slice_{n}'

    def slice_n(src: Any, index: Optional[int] = None) -> SliceView:
        require_readable(src, 1, 'src', f'view.{name}')
        start, count = Slice(src, index, n).resolve(1, 'src', f'view.{name}')
        return SliceView(src, start, count)

    slice_n.__name__ = slice_n.__qualname__ = name
    slice_n.__doc__ = f"View of exactly {n} consecutive elements starting at index."
    return slice_n


for _n in range(2, 17):
    globals()[f'slice_{_n}'] = fixed_slice(_n)
    __all__.append(f'slice_{_n}')
del _n
