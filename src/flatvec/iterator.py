"""
Grouped Iteration

Iterate a flat slice N elements at a time, e.g. the (x, y) pairs of an
interleaved point buffer. Each step yields the 0-based group index
followed by the N values of the group.

    group_N(src)        whole container
    group_N_ex(src)     any slice argument
    zip_N(a, b)         two slices in lock step: (i, a1..aN, b1..bN)
    groups(src, n)      general form for any n >= 1

The slice count must be a multiple of N; this is checked when the
iterator is created, not when it runs out.

Example:
    >>> for i, x, y in group_2([1, 2, 3, 4]):
    ...     print(i, x, y)
    0 1 2
    1 3 4
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Tuple

from ._errors import DomainViolationError, LengthMismatchError, bad_argument, check_equal_counts
from ._slice import resolve_slices
from ._typing import index_range, require_readable

__all__ = ['groups', 'zip_groups']

MIN_GROUP = 2
MAX_GROUP = 16


def _group_values(c: Any, start: int, count: int, n: int) -> Iterator[Tuple[Any, ...]]:
    for g in range(count // n):
        base = start + g * n
        yield (g,) + tuple(c[base + k] for k in range(n))


def _check_multiple(func: str, position: int, name: str, count: int, n: int) -> None:
    if count % n:
        raise LengthMismatchError(bad_argument(
            position, name, func, f"count {count} is not a multiple of {n}"))


def groups(src: Any, n: int) -> Iterator[Tuple[Any, ...]]:
    """
    Iterator over consecutive groups of ``n`` elements of a slice.

    Yields:
        ``(group_index, v1, ..., vn)``

    Raises:
        DomainViolationError: If ``n`` < 1
        LengthMismatchError: If the slice count is not a multiple of ``n``
    """
    if n < 1:
        raise DomainViolationError(bad_argument(2, 'n', 'groups', f"group size {n} must be positive"))
    ((c, start, count),) = resolve_slices('groups', src=src)
    _check_multiple('groups', 1, 'src', count, n)
    return _group_values(c, start, count, n)


def zip_groups(a: Any, b: Any, n: int) -> Iterator[Tuple[Any, ...]]:
    """
    Iterate two slices ``n`` elements at a time in lock step.

    Yields:
        ``(group_index, a1..an, b1..bn)``
    """
    if n < 1:
        raise DomainViolationError(bad_argument(3, 'n', 'zip_groups', f"group size {n} must be positive"))
    (ac, ai, an), (bc, bi, bn) = resolve_slices('zip_groups', a=a, b=b)
    count = check_equal_counts('zip_groups', {'a': an, 'b': bn})
    _check_multiple('zip_groups', 1, 'a', count, n)

    def pairs():
        for g in range(count // n):
            yield ((g,) + tuple(ac[ai + g * n + k] for k in range(n))
                   + tuple(bc[bi + g * n + k] for k in range(n)))

    return pairs()


def _make_group(n: int) -> Tuple[Callable, ...]:
    name = f'group_{n}'

    def group_n(src: Any) -> Iterator[Tuple[Any, ...]]:
        require_readable(src, 1, 'src', name)
        rng = index_range(src)
        _check_multiple(name, 1, 'src', len(rng), n)
        return _group_values(src, rng.start, len(rng), n)

    def group_n_ex(src: Any) -> Iterator[Tuple[Any, ...]]:
        ((c, start, count),) = resolve_slices(f'{name}_ex', src=src)
        _check_multiple(f'{name}_ex', 1, 'src', count, n)
        return _group_values(c, start, count, n)

    def zip_n(a: Any, b: Any) -> Iterator[Tuple[Any, ...]]:
        return zip_groups(a, b, n)

    group_n.__doc__ = f"Iterate a container {n} elements at a time: (i, v1..v{n})."
    group_n_ex.__doc__ = f"Iterate a slice {n} elements at a time: (i, v1..v{n})."
    zip_n.__doc__ = f"Iterate two slices {n} elements at a time: (i, a1..a{n}, b1..b{n})."
    return group_n, group_n_ex, zip_n


for _n in range(MIN_GROUP, MAX_GROUP + 1):
    for _public, _function in zip((f'group_{_n}', f'group_{_n}_ex', f'zip_{_n}'), _make_group(_n)):
        _function.__name__ = _function.__qualname__ = _public
        globals()[_public] = _function
        __all__.append(_public)
del _n, _public, _function
