"""
Fixed-Count Fast Paths

For every count ``N`` in 2..16 this module provides kernels taking and
returning ``N`` individual scalars (a tuple) instead of containers:

    get_N(src, index)          -> (v1, ..., vN)
    set_N(dest, index, *v)     writes exactly N values
    unpack_N(src)              src must hold exactly N elements
    push_N(dest, *v) / pop_N(src)
    fill_N(value)              -> (value,) * N
    add_N(*a, *b)              -> N-tuple; likewise sub, mul, div,
                                  minimum, maximum
    add_N_ex(a, b, dest)       same on N-element slices
    negate_N(*a)               -> N-tuple
    sum_N / prod_N / min_N / max_N(*a) -> scalar
    dot_N(*a, *b)              -> scalar
    map_N(fn, s1, ..., sN)     ops.map over exactly N sources
    map_N_ex(fn, sources, dest)

The families are built once at import by one parameterized constructor
per kind, rather than written out per count. Every function agrees
exactly with the general kernel in ``flatvec.ops`` at the same count:
both use the same scalar primitives in the same order.

Example:
    >>> from flatvec import fixed
    >>> fixed.add_3(1, 2, 3, 10, 20, 30)
    (11, 22, 33)
    >>> fixed.get_2([5, 6, 7], 1)
    (6, 7)
    >>> fixed.op('dot', 2)(1, 2, 3, 4)
    11
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from ._errors import DomainViolationError, LengthMismatchError, bad_argument
from ._slice import Slice, resolve_exact
from ._typing import (
    ContainerFactory,
    index_range,
    require_readable,
    require_resizable,
    require_writable,
)
from . import ops
from .ops import dot_values, fold, scalar_max, scalar_min

MIN_ARITY = 2
MAX_ARITY = 16

__all__ = ['MIN_ARITY', 'MAX_ARITY', 'op', 'FAMILIES']


def _expect(func: str, expected: int, values: Tuple[Any, ...]) -> None:
    if len(values) != expected:
        raise LengthMismatchError(
            f"{func} expects exactly {expected} values, got {len(values)}")


# =============================================================================
# Container Access
# =============================================================================

def _make_get(n: int) -> Callable:
    func = f'get_{n}'

    def get_n(src: Any, index: int = None) -> Tuple[Any, ...]:
        require_readable(src, 1, 'src', func)
        start, _ = Slice(src, index, n).resolve(1, 'src', func)
        return tuple(src[start + k] for k in range(n))

    get_n.__doc__ = f"Read {n} consecutive elements starting at index (default: first)."
    return get_n


def _make_set(n: int) -> Callable:
    func = f'set_{n}'

    def set_n(dest: Any, index: int, *values: Any) -> None:
        _expect(func, n, values)
        require_writable(dest, 1, 'dest', func)
        start, _ = Slice(dest, index, n).resolve(1, 'dest', func)
        for k in range(n):
            dest[start + k] = values[k]

    set_n.__doc__ = f"Write exactly {n} values starting at index."
    return set_n


def _make_unpack(n: int) -> Callable:
    func = f'unpack_{n}'

    def unpack_n(src: Any) -> Tuple[Any, ...]:
        require_readable(src, 1, 'src', func)
        rng = index_range(src)
        if len(rng) != n:
            raise LengthMismatchError(bad_argument(
                1, 'src', func, f"exactly {n} elements required, got {len(rng)}"))
        return tuple(src[k] for k in rng)

    unpack_n.__doc__ = f"All elements of a container holding exactly {n}."
    return unpack_n


def _make_push(n: int) -> Callable:
    func = f'push_{n}'

    def push_n(dest: Any, *values: Any) -> None:
        _expect(func, n, values)
        require_resizable(dest, 1, 'dest', func)
        for v in values:
            dest.append(v)

    push_n.__doc__ = f"Append exactly {n} values to a Resizable container."
    return push_n


def _make_pop(n: int) -> Callable:
    func = f'pop_{n}'

    def pop_n(src: Any) -> Tuple[Any, ...]:
        require_resizable(src, 1, 'src', func)
        rng = index_range(src)
        if len(rng) < n:
            raise LengthMismatchError(bad_argument(
                1, 'src', func, f"cannot pop {n} of {len(rng)} elements"))
        values = tuple(src[k] for k in range(rng.stop - n, rng.stop))
        for _ in range(n):
            src.pop()
        return values

    pop_n.__doc__ = f"Remove the last {n} elements; returns them in stored order."
    return pop_n


def _make_fill(n: int) -> Callable:
    def fill_n(value: Any) -> Tuple[Any, ...]:
        return (value,) * n

    fill_n.__doc__ = f"Tuple of {n} copies of value."
    return fill_n


# =============================================================================
# Tuple Arithmetic
# =============================================================================

_BINARY = {
    'add': (operator.add, False),
    'sub': (operator.sub, False),
    'mul': (operator.mul, False),
    'div': (operator.truediv, True),
    'minimum': (scalar_min, False),
    'maximum': (scalar_max, False),
}

_FOLDS = {
    'sum': operator.add,
    'prod': operator.mul,
    'min': scalar_min,
    'max': scalar_max,
}


def _make_binary(name: str, n: int) -> Callable:
    fn, nonzero = _BINARY[name]
    func = f'{name}_{n}'

    def binary_n(*args: Any) -> Tuple[Any, ...]:
        _expect(func, 2 * n, args)
        if nonzero:
            for k in range(n):
                if args[n + k] == 0:
                    raise DomainViolationError(f"{func}: division by zero at offset {k}")
        return tuple(fn(args[k], args[n + k]) for k in range(n))

    binary_n.__doc__ = f"Element-wise {name} of two {n}-tuples passed as {2 * n} scalars."
    return binary_n


def _make_binary_ex(name: str, n: int) -> Callable:
    fn, nonzero = _BINARY[name]
    func = f'{name}_{n}_ex'

    def binary_n_ex(a: Any, b: Any, dest: Any) -> None:
        ac, ai = resolve_exact(func, 1, 'a', a, n)
        bc, bi = resolve_exact(func, 2, 'b', b, n)
        dc, di = resolve_exact(func, 3, 'dest', dest, n)
        require_writable(dc, 3, 'dest', func)
        values = tuple(ac[ai + k] for k in range(n)) + tuple(bc[bi + k] for k in range(n))
        if nonzero:
            for k in range(n):
                if values[n + k] == 0:
                    raise DomainViolationError(f"{func}: division by zero at offset {k}")
        results = tuple(fn(values[k], values[n + k]) for k in range(n))
        for k in range(n):
            dc[di + k] = results[k]

    binary_n_ex.__doc__ = f"Element-wise {name} of two {n}-element slices written into dest."
    return binary_n_ex


def _make_negate(n: int) -> Callable:
    func = f'negate_{n}'

    def negate_n(*args: Any) -> Tuple[Any, ...]:
        _expect(func, n, args)
        return tuple(-v for v in args)

    negate_n.__doc__ = f"Negate {n} scalars."
    return negate_n


def _make_fold(name: str, n: int) -> Callable:
    fn = _FOLDS[name]
    func = f'{name}_{n}'

    def fold_n(*args: Any) -> Any:
        _expect(func, n, args)
        return fold(fn, args)

    fold_n.__doc__ = f"Left-to-right {name} of {n} scalars."
    return fold_n


def _make_dot(n: int) -> Callable:
    func = f'dot_{n}'

    def dot_n(*args: Any) -> Any:
        _expect(func, 2 * n, args)
        return dot_values(args[:n], args[n:])

    dot_n.__doc__ = f"Inner product of two {n}-tuples passed as {2 * n} scalars."
    return dot_n


# =============================================================================
# Mapping
# =============================================================================

def _make_map(n: int) -> Callable:
    func = f'map_{n}'

    def map_n(fn: Callable, *sources: Any, dtype: Any = None,
              factory: Optional[ContainerFactory] = None) -> Any:
        _expect(func, n, sources)
        return ops.map(fn, *sources, dtype=dtype, factory=factory)

    map_n.__doc__ = (f"Apply a {n}-argument ``fn`` across exactly {n} equal-length "
                     f"containers; same result as ``ops.map``.")
    return map_n


def _make_map_ex(n: int) -> Callable:
    func = f'map_{n}_ex'

    def map_n_ex(fn: Callable, sources: Sequence[Any], dest: Any) -> None:
        _expect(func, n, tuple(sources))
        ops.map_ex(fn, sources, dest)

    map_n_ex.__doc__ = f"Slice form of ``map_{n}``: exactly {n} source slices into dest."
    return map_n_ex


# =============================================================================
# Family Registration
# =============================================================================

FAMILIES: Dict[str, Callable[[int], Callable]] = {
    'get': _make_get,
    'set': _make_set,
    'unpack': _make_unpack,
    'push': _make_push,
    'pop': _make_pop,
    'fill': _make_fill,
    'negate': _make_negate,
    'dot': _make_dot,
    'map': _make_map,
    'map_ex': _make_map_ex,
}
for _name in _BINARY:
    FAMILIES[_name] = (lambda name: lambda n: _make_binary(name, n))(_name)
    FAMILIES[f'{_name}_ex'] = (lambda name: lambda n: _make_binary_ex(name, n))(_name)
for _name in _FOLDS:
    FAMILIES[_name] = (lambda name: lambda n: _make_fold(name, n))(_name)

_REGISTRY: Dict[Tuple[str, int], Callable] = {}

for _family, _build in FAMILIES.items():
    for _n in range(MIN_ARITY, MAX_ARITY + 1):
        if _family.endswith('_ex'):
            _public = f'{_family[:-3]}_{_n}_ex'
        else:
            _public = f'{_family}_{_n}'
        _function = _build(_n)
        _function.__name__ = _function.__qualname__ = _public
        _function.__module__ = __name__
        _REGISTRY[(_family, _n)] = _function
        globals()[_public] = _function
        __all__.append(_public)
del _name, _family, _build, _n, _public, _function


def op(family: str, n: int) -> Callable:
    """
    Look up a fast path by family name and count.

    Args:
        family: One of ``FAMILIES`` ('add', 'get', 'sum', 'add_ex', ...)
        n: Count in MIN_ARITY..MAX_ARITY

    Raises:
        KeyError: For unknown families or counts out of range

    Example:
        >>> op('add', 2)(1, 2, 3, 4)
        (4, 6)
    """
    try:
        return _REGISTRY[(family, n)]
    except KeyError:
        raise KeyError(
            f"no fast path {family!r} for count {n} "
            f"(counts {MIN_ARITY}..{MAX_ARITY}, families {sorted(FAMILIES)})") from None
