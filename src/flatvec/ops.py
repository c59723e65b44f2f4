"""
flatvec Ops - Array Kernel Library

Generic element-wise, reduction, copy, fill and permutation kernels over
any container satisfying the capability contracts.

Every kernel comes in two forms:

    basic     ``add(a, b)``              whole containers in, a new
                                         container out (allocated through
                                         the construction hook)
    extended  ``add_ex(a, b, dest)``     Slice descriptors in, results
                                         written into ``dest``, returns None

Extended forms accept a ``Slice``, a ``(container, start[, count])``
tuple, or a bare container for every slice argument. They validate every
range and every count before the first write: a call either processes
the whole requested range or writes nothing.

Binary operations additionally offer ``_constant`` forms whose second
operand is a scalar, or a container cycled over the first operand (its
length must divide the first operand's length).

Reductions fold left to right in index order, so floating-point results
are reproducible and agree exactly with the fixed-count fast paths in
``flatvec.fixed``.

Example:
    >>> from flatvec import ops, Slice
    >>> ops.add([1, 2, 3], [3, 4, 5])
    [4, 6, 8]
    >>> dest = [0, 0, 0, 0]
    >>> ops.mul_constant_ex(Slice([1, 2, 3, 4], 1), 10, Slice(dest, 1))
    >>> dest
    [0, 20, 30, 40]
    >>> ops.reduce_sum([0.5, 0.25, 0.125])
    0.875
"""

from __future__ import annotations

import math
import numbers
import operator
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple

from ._config import get_config, new_container, resolve_epsilon
from ._dtypes import (
    DType,
    dtype_itemsize,
    element_type_of,
    is_int_dtype,
    normalize_dtype,
    promote_types,
    scalar_dtype,
)
from ._errors import (
    DomainViolationError,
    LengthMismatchError,
    RangeViolationError,
    bad_argument,
    check_equal_counts,
)
from ._slice import Slice, as_slice, resolve_slices
from ._typing import (
    ContainerFactory,
    first_index,
    index_range,
    is_readable,
    require_callable,
    require_readable,
    require_resizable,
    require_writable,
)
from . import view as _view

__all__ = [
    # Creation
    'zeros', 'fill', 'fill_ex', 'irange', 'irange_ex', 'generate', 'generate_ex',
    # Copy / permutation
    'copy', 'copy_ex', 'reverse', 'reverse_ex', 'join', 'join_ex',
    # Resizable containers
    'push', 'pop', 'extend',
    # Unary / n-ary
    'negate', 'negate_ex', 'abs', 'abs_ex', 'sqrt', 'sqrt_ex', 'map', 'map_ex',
    'almost_equal', 'almost_equal_ex', 'almost_equal_constant', 'almost_equal_constant_ex',
    'mul_add', 'mul_add_ex', 'mul_add_constant', 'mul_add_constant_ex', 'lerp', 'lerp_ex',
    # Reductions
    'reduce', 'reduce_ex', 'reduce_sum', 'reduce_sum_ex', 'reduce_prod', 'reduce_prod_ex',
    'reduce_min', 'reduce_min_ex', 'reduce_max', 'reduce_max_ex',
    'dot', 'dot_ex', 'norm', 'norm_ex', 'norm_squared', 'norm_squared_ex',
    # Predicates
    'all_equal', 'all_equal_ex', 'all_almost_equal', 'all_almost_equal_ex',
    'all_equal_constant', 'all_equal_constant_ex',
    'all_almost_equal_constant', 'all_almost_equal_constant_ex',
]


# =============================================================================
# Scalar Primitives (shared with flatvec.fixed)
# =============================================================================

def scalar_min(x, y):
    """Smaller of two values; ties keep ``x``."""
    return y if y < x else x


def scalar_max(x, y):
    """Larger of two values; ties keep ``x``."""
    return y if y > x else x


def fold(fn: Callable[[Any, Any], Any], values: Iterable[Any]) -> Any:
    """Left fold of a non-empty iterable."""
    it = iter(values)
    acc = next(it)
    for v in it:
        acc = fn(acc, v)
    return acc


def dot_values(a: Sequence[Any], b: Sequence[Any]) -> Any:
    """Left-to-right sum of products of two equal-length tuples."""
    acc = a[0] * b[0]
    for k in range(1, len(a)):
        acc = acc + a[k] * b[k]
    return acc


# =============================================================================
# Internal Helpers
# =============================================================================

def _whole(func: str, position: int, name: str, value: Any) -> Tuple[Any, int, int]:
    """Check a basic-form argument and return (container, first, count)."""
    require_readable(value, position, name, func)
    rng = index_range(value)
    return value, rng.start, len(rng)


def _is_container(value: Any) -> bool:
    if isinstance(value, Slice):
        return True
    return is_readable(value) and not isinstance(value, (str, bytes))


def _operand(func: str, position: int, name: str, value: Any, n: int,
             cyclic: bool) -> Tuple[Callable[[int], Any], DType]:
    """
    Accessor ``k -> value`` for a scalar-or-container operand.

    Containers must have exactly ``n`` elements, or with ``cyclic`` a
    nonzero length dividing ``n`` (their elements then repeat).
    """
    if not _is_container(value):
        return (lambda k: value), scalar_dtype(value)

    s = as_slice(value)
    c = s.container
    start, count = s.resolve(position, name, func)
    if cyclic:
        if (count == 0 and n) or (count and n % count):
            raise LengthMismatchError(bad_argument(
                position, name, func,
                f"count {count} does not divide operand count {n}"))
    elif count != n:
        raise LengthMismatchError(bad_argument(
            position, name, func, f"count {count} does not match operand count {n}"))

    dtype = element_type_of(c)
    if count == n:
        return (lambda k: c[start + k]), dtype
    return (lambda k: c[start + k % count]), dtype


_FLOAT_KINDS = (DType.float32, DType.float64, DType.object)


def _result_dtype(rule: str, *dtypes: DType,
                  readers: Sequence[Callable[[int], Any]] = (), n: int = 0) -> DType:
    """
    Element type of a kernel result.

    Rules: ``bool`` for comparisons, ``float`` for division-like results,
    ``promote`` for arithmetic, and ``pow``, which promotes unless an
    integer base meets a negative exponent.
    """
    if rule == 'bool':
        return DType.bool
    dtype = promote_types(*dtypes)
    if rule == 'float' and dtype not in _FLOAT_KINDS:
        return DType.float64
    if rule == 'pow' and dtype not in _FLOAT_KINDS:
        exponent = readers[-1]
        if any(exponent(k) < 0 for k in range(n)):
            return DType.float64
    return dtype


def _int_bounds(dtype: DType) -> Tuple[int, int]:
    bits = 8 * dtype_itemsize(dtype)
    if dtype.value.startswith('uint'):
        return 0, (1 << bits) - 1
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def _check_storable(func: str, position: int, dest: Any, values: Sequence[Any]) -> None:
    """Typed integer destinations only receive in-range integers."""
    dtype = getattr(dest, 'dtype', None)
    if dtype is None:
        return
    try:
        dtype = normalize_dtype(dtype)
    except (TypeError, ValueError):
        return
    if not is_int_dtype(dtype):
        return
    lo, hi = _int_bounds(dtype)
    for k, v in enumerate(values):
        integral = isinstance(v, numbers.Integral) or scalar_dtype(v) is DType.bool
        if not integral or not lo <= v <= hi:
            raise DomainViolationError(bad_argument(
                position, 'dest', func,
                f"value {v!r} at offset {k} is not representable as {dtype.value}"))


def _store(func: str, position: int, dest: Any, di: int, values: Sequence[Any]) -> None:
    """Write precomputed ``values`` from ``dest[di]`` on, all or nothing."""
    _check_storable(func, position, dest, values)
    for k, v in enumerate(values):
        dest[di + k] = v


def _write(func: str, position: int, fn: Callable,
           readers: Sequence[Callable[[int], Any]], dest: Any, di: int, n: int) -> None:
    """dest[di + k] = fn(r(k) for each reader), every result computed first."""
    if len(readers) == 1:
        (ra,) = readers
        values = tuple(fn(ra(k)) for k in range(n))
    elif len(readers) == 2:
        ra, rb = readers
        values = tuple(fn(ra(k), rb(k)) for k in range(n))
    else:
        values = tuple(fn(*[r(k) for r in readers]) for k in range(n))
    _store(func, position, dest, di, values)


def _reader(container: Any, start: int) -> Callable[[int], Any]:
    return lambda k: container[start + k]


def _check_nonzero(func: str, names: Sequence[str],
                   readers: Sequence[Callable[[int], Any]], n: int) -> None:
    divisor = readers[-1]
    for k in range(n):
        if divisor(k) == 0:
            raise DomainViolationError(bad_argument(
                len(readers), names[-1], func, f"division by zero at offset {k}"))


def _check_power(func: str, names: Sequence[str],
                 readers: Sequence[Callable[[int], Any]], n: int) -> None:
    base, exponent = readers[0], readers[-1]
    for k in range(n):
        if base(k) == 0 and exponent(k) < 0:
            raise DomainViolationError(bad_argument(
                len(readers), names[-1], func,
                f"zero raised to a negative power at offset {k}"))


def _allocate(dtype: DType, n: int, factory: Optional[ContainerFactory]) -> Tuple[Any, int]:
    dest = new_container(dtype, n, factory)
    return dest, first_index(dest)


# =============================================================================
# Creation
# =============================================================================

def zeros(count: int, dtype: Any = None, *,
          factory: Optional[ContainerFactory] = None) -> Any:
    """
    New container of ``count`` zeros.

    Args:
        count: Number of elements
        dtype: Element type (default: configured default dtype)
        factory: Construction hook override
    """
    if count < 0:
        raise RangeViolationError(bad_argument(1, 'count', 'zeros', f"count {count} is negative"))
    if dtype is None:
        dtype = get_config().default_dtype
    return new_container(dtype, count, factory)


def fill(value: Any, count: int, dtype: Any = None, *,
         factory: Optional[ContainerFactory] = None) -> Any:
    """New container holding ``count`` copies of ``value``."""
    if count < 0:
        raise RangeViolationError(bad_argument(2, 'count', 'fill', f"count {count} is negative"))
    dtype = scalar_dtype(value) if dtype is None else normalize_dtype(dtype)
    dest, di = _allocate(dtype, count, factory)
    for k in range(count):
        dest[di + k] = value
    return dest


def fill_ex(value: Any, dest: Any) -> None:
    """Set every element of the ``dest`` slice to ``value``."""
    ((dc, di, dn),) = resolve_slices('fill_ex', positions=[2], dest=dest)
    require_writable(dc, 2, 'dest', 'fill_ex')
    _store('fill_ex', 2, dc, di, (value,) * dn)


def _irange_count(start, stop, step) -> int:
    if step == 0:
        raise DomainViolationError(bad_argument(3, 'step', 'irange', "step must be nonzero"))
    if (stop - start) * step < 0:
        raise DomainViolationError(bad_argument(
            3, 'step', 'irange', f"step {step} does not lead from {start} to {stop}"))
    return int(math.floor((stop - start) / step)) + 1


def irange(start, stop, step=None, dtype: Any = None, *,
           factory: Optional[ContainerFactory] = None) -> Any:
    """
    Inclusive arithmetic progression ``start, start + step, ...`` up to ``stop``.

    Args:
        start: First value
        stop: Last value, included when reached exactly
        step: Increment (default: 1 or -1 toward ``stop``)
        dtype: Element type (default: promoted from the arguments)

    Raises:
        DomainViolationError: If step is zero or points away from stop

    Example:
        >>> irange(1, 5)
        [1, 2, 3, 4, 5]
        >>> irange(1, 0, -0.25)
        [1.0, 0.75, 0.5, 0.25, 0.0]
    """
    if step is None:
        step = 1 if stop >= start else -1
    n = _irange_count(start, stop, step)
    if dtype is None:
        dtype = promote_types(scalar_dtype(start), scalar_dtype(step))
    dest, di = _allocate(normalize_dtype(dtype), n, factory)
    for k in range(n):
        dest[di + k] = start + k * step
    return dest


def irange_ex(start, step, dest: Any) -> None:
    """Write ``start + k * step`` to each element ``k`` of the ``dest`` slice."""
    if step == 0:
        raise DomainViolationError(bad_argument(2, 'step', 'irange_ex', "step must be nonzero"))
    ((dc, di, dn),) = resolve_slices('irange_ex', positions=[3], dest=dest)
    require_writable(dc, 3, 'dest', 'irange_ex')
    _store('irange_ex', 3, dc, di, tuple(start + k * step for k in range(dn)))


def generate(count: int, fn: Callable[[int], Any], dtype: Any = None, *,
             factory: Optional[ContainerFactory] = None) -> Any:
    """
    New container with element ``k`` set to ``fn(k)``.

    The element type is taken from ``dtype`` or from the first generated
    value. ``fn`` is called once per element in ascending order.
    """
    require_callable(fn, 2, 'fn', 'generate')
    if count < 0:
        raise RangeViolationError(bad_argument(1, 'count', 'generate', f"count {count} is negative"))
    if count == 0:
        return zeros(0, dtype, factory=factory)
    first = fn(0)
    dtype = scalar_dtype(first) if dtype is None else normalize_dtype(dtype)
    dest, di = _allocate(dtype, count, factory)
    dest[di] = first
    for k in range(1, count):
        dest[di + k] = fn(k)
    return dest


def generate_ex(dest: Any, fn: Callable[[int], Any]) -> None:
    """Set element ``k`` of the ``dest`` slice to ``fn(k)``."""
    require_callable(fn, 2, 'fn', 'generate_ex')
    ((dc, di, dn),) = resolve_slices('generate_ex', dest=dest)
    require_writable(dc, 1, 'dest', 'generate_ex')
    _store('generate_ex', 1, dc, di, tuple(fn(k) for k in range(dn)))


# =============================================================================
# Copy and Permutation
# =============================================================================

def _copy_values(func: str, position: int, sc: Any, si: int, dc: Any, di: int, n: int) -> None:
    # Reading every source element first makes overlapping ranges safe
    _store(func, position, dc, di, tuple(sc[si + k] for k in range(n)))


def copy(src: Any, *, dtype: Any = None,
         factory: Optional[ContainerFactory] = None) -> Any:
    """
    New container holding the elements of ``src``.

    Example:
        >>> copy(view.reverse([1, 2, 3]))
        [3, 2, 1]
    """
    sc, si, n = _whole('copy', 1, 'src', src)
    dtype = element_type_of(sc) if dtype is None else normalize_dtype(dtype)
    dest, di = _allocate(dtype, n, factory)
    _copy_values('copy', 2, sc, si, dest, di, n)
    return dest


def copy_ex(src: Any, dest: Any) -> None:
    """
    Copy the ``src`` slice into the ``dest`` slice.

    Overlapping slices of the same container are handled like memmove.

    Raises:
        LengthMismatchError: If the slice counts differ
    """
    (sc, si, sn), (dc, di, dn) = resolve_slices('copy_ex', src=src, dest=dest)
    require_writable(dc, 2, 'dest', 'copy_ex')
    n = check_equal_counts('copy_ex', {'src': sn, 'dest': dn})
    _copy_values('copy_ex', 2, sc, si, dc, di, n)


def reverse(src: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
    """New container holding the elements of ``src`` in reverse order."""
    require_readable(src, 1, 'src', 'reverse')
    return copy(_view.reverse(src), dtype=element_type_of(src), factory=factory)


def reverse_ex(src: Any, dest: Any) -> None:
    """
    Write the ``src`` slice into the ``dest`` slice in reverse order.

    ``src`` and ``dest`` may address the same range (in-place reversal).
    """
    (sc, si, sn), (dc, di, dn) = resolve_slices('reverse_ex', src=src, dest=dest)
    require_writable(dc, 2, 'dest', 'reverse_ex')
    n = check_equal_counts('reverse_ex', {'src': sn, 'dest': dn})
    _copy_values('reverse_ex', 2, _view.ReverseView(sc, si + n - 1, n), 0, dc, di, n)


def join(*sources: Any, factory: Optional[ContainerFactory] = None) -> Any:
    """
    New container concatenating ``sources``.

    Example:
        >>> join([1, 2], [3], [4, 5])
        [1, 2, 3, 4, 5]
    """
    joined = _view.join(*sources)
    dtypes = [element_type_of(s) for s in sources if len(index_range(s))]
    dtype = promote_types(*dtypes) if dtypes else None
    return copy(joined, dtype=dtype, factory=factory)


def join_ex(sources: Sequence[Any], dest: Any) -> None:
    """Write the concatenation of the ``sources`` slices into ``dest``."""
    named = {f'sources[{i}]': s for i, s in enumerate(sources)}
    resolved = resolve_slices('join_ex', **named, dest=dest)
    (dc, di, dn) = resolved[-1]
    require_writable(dc, len(resolved), 'dest', 'join_ex')
    parts = [_view.SliceView(c, start, count) for c, start, count in resolved[:-1]]
    joined = _view.JoinView(tuple(parts))
    n = check_equal_counts('join_ex', {'sources': len(joined), 'dest': dn})
    _copy_values('join_ex', len(resolved), joined, 0, dc, di, n)


# =============================================================================
# Resizable Containers
# =============================================================================

def push(dest: Any, *values: Any) -> None:
    """Append ``values`` to a Resizable container, in order."""
    require_resizable(dest, 1, 'dest', 'push')
    for v in values:
        dest.append(v)


def pop(src: Any, count: int = 1) -> Tuple[Any, ...]:
    """
    Remove the last ``count`` elements of a Resizable container.

    Returns:
        The removed values in stored order

    Raises:
        RangeViolationError: If ``src`` holds fewer than ``count`` elements
    """
    require_resizable(src, 1, 'src', 'pop')
    rng = index_range(src)
    if count < 0 or count > len(rng):
        raise RangeViolationError(bad_argument(
            2, 'count', 'pop', f"cannot pop {count} of {len(rng)} elements"))
    values = tuple(src[k] for k in range(rng.stop - count, rng.stop))
    for _ in range(count):
        src.pop()
    return values


def extend(dest: Any, *sources: Any) -> Any:
    """
    Append every element of each source slice to ``dest``.

    Returns:
        ``dest``
    """
    require_resizable(dest, 1, 'dest', 'extend')
    named = {f'sources[{i}]': s for i, s in enumerate(sources)}
    resolved = resolve_slices('extend', positions=range(2, len(named) + 2), **named)
    for c, start, count in resolved:
        # Fixed bounds: extending a container with itself appends one copy
        for k in range(count):
            dest.append(c[start + k])
    return dest


# =============================================================================
# Element-wise Kernels
# =============================================================================

def _elementwise(func: str, fn: Callable, operands: Sequence[Tuple[str, Any]],
                 rule: str, cyclic_last: bool, factory: Optional[ContainerFactory],
                 check: Optional[Callable] = None) -> Any:
    """Basic form: first operand is a whole container, others operands."""
    (name0, value0) = operands[0]
    c0, s0, n = _whole(func, 1, name0, value0)
    readers = [_reader(c0, s0)]
    dtypes = [element_type_of(c0)]
    for position, (name, value) in enumerate(operands[1:], start=2):
        cyclic = cyclic_last and position == len(operands)
        if not cyclic:
            require_readable(value, position, name, func)
        reader, dtype = _operand(func, position, name, value, n, cyclic)
        readers.append(reader)
        dtypes.append(dtype)
    if check is not None:
        check(func, [name for name, _ in operands], readers, n)
    dtype = _result_dtype(rule, *dtypes, readers=readers, n=n)
    dest, di = _allocate(dtype, n, factory)
    _write(func, len(operands) + 1, fn, readers, dest, di, n)
    return dest


def _elementwise_ex(func: str, fn: Callable, operands: Sequence[Tuple[str, Any]],
                    dest: Any, cyclic_last: bool, check: Optional[Callable] = None) -> None:
    """Extended form: slices (or a trailing scalar-or-cycled operand) into dest."""
    fixed = operands[:-1] if cyclic_last else operands
    named = dict(fixed)
    dest_position = len(operands) + 1
    positions = list(range(1, len(fixed) + 1)) + [dest_position]
    resolved = resolve_slices(func, positions=positions, **named, dest=dest)
    dc, di, dn = resolved[-1]
    require_writable(dc, dest_position, 'dest', func)
    counts = {name: r[2] for name, r in zip(named, resolved[:-1])}
    counts['dest'] = dn
    n = check_equal_counts(func, counts)
    readers = [_reader(c, s) for c, s, _ in resolved[:-1]]
    if cyclic_last:
        name, value = operands[-1]
        reader, _ = _operand(func, len(operands), name, value, n, True)
        readers.append(reader)
    if check is not None:
        check(func, [name for name, _ in operands], readers, n)
    _write(func, dest_position, fn, readers, dc, di, n)


def _pow(x, y):
    # Integer bases meet negative exponents as floats
    if y < 0 and isinstance(x, numbers.Integral):
        x = float(x)
    return x ** y


_BINARY_OPS = [
    # name, scalar function, result rule, domain pre-check
    ('add', operator.add, 'promote', None),
    ('sub', operator.sub, 'promote', None),
    ('mul', operator.mul, 'promote', None),
    ('div', operator.truediv, 'float', _check_nonzero),
    ('mod', operator.mod, 'promote', _check_nonzero),
    ('pow', _pow, 'pow', _check_power),
    ('minimum', scalar_min, 'promote', None),
    ('maximum', scalar_max, 'promote', None),
    ('equal', operator.eq, 'bool', None),
    ('not_equal', operator.ne, 'bool', None),
    ('less_than', operator.lt, 'bool', None),
    ('less_than_or_equal', operator.le, 'bool', None),
    ('greater_than', operator.gt, 'bool', None),
    ('greater_than_or_equal', operator.ge, 'bool', None),
]


def _make_binary(name: str, fn: Callable, rule: str, check: Optional[Callable]):
    """Build the four public forms of one binary operation."""

    def basic(a: Any, b: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
        return _elementwise(name, fn, [('a', a), ('b', b)], rule, False, factory, check)

    def ex(a: Any, b: Any, dest: Any) -> None:
        _elementwise_ex(f'{name}_ex', fn, [('a', a), ('b', b)], dest, False, check)

    def constant(a: Any, c: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
        return _elementwise(f'{name}_constant', fn, [('a', a), ('c', c)], rule, True,
                            factory, check)

    def constant_ex(a: Any, c: Any, dest: Any) -> None:
        _elementwise_ex(f'{name}_constant_ex', fn, [('a', a), ('c', c)], dest, True, check)

    basic.__doc__ = (f"Element-wise ``{name}`` of two equal-length containers.\n\n"
                     f"Raises:\n    LengthMismatchError: If the lengths differ")
    ex.__doc__ = f"Element-wise ``{name}`` of slices ``a`` and ``b`` written into ``dest``."
    constant.__doc__ = (f"Element-wise ``{name}`` of ``a`` with a scalar, or with a "
                        f"container cycled over ``a``.")
    constant_ex.__doc__ = f"Slice form of ``{name}_constant`` written into ``dest``."

    forms = {name: basic, f'{name}_ex': ex,
             f'{name}_constant': constant, f'{name}_constant_ex': constant_ex}
    for public, function in forms.items():
        function.__name__ = function.__qualname__ = public
    return forms


for _spec in _BINARY_OPS:
    for _public, _function in _make_binary(*_spec).items():
        globals()[_public] = _function
        __all__.append(_public)
del _spec, _public, _function


def almost_equal(a: Any, b: Any, eps: Optional[float] = None, nan_equal: bool = False, *,
                 factory: Optional[ContainerFactory] = None) -> Any:
    """
    Element-wise ``|a - b| <= eps``.

    Args:
        eps: Tolerance (default: configured epsilon)
        nan_equal: Treat two NaNs as equal
    """
    fn = _almost(resolve_epsilon(eps), nan_equal)
    return _elementwise('almost_equal', fn, [('a', a), ('b', b)], 'bool', False, factory)


def almost_equal_ex(a: Any, b: Any, dest: Any, eps: Optional[float] = None,
                    nan_equal: bool = False) -> None:
    """Slice form of ``almost_equal``."""
    fn = _almost(resolve_epsilon(eps), nan_equal)
    _elementwise_ex('almost_equal_ex', fn, [('a', a), ('b', b)], dest, False)


def almost_equal_constant(a: Any, c: Any, eps: Optional[float] = None, nan_equal: bool = False,
                          *, factory: Optional[ContainerFactory] = None) -> Any:
    """``almost_equal`` against a scalar or a cycled container."""
    fn = _almost(resolve_epsilon(eps), nan_equal)
    return _elementwise('almost_equal_constant', fn, [('a', a), ('c', c)], 'bool', True, factory)


def almost_equal_constant_ex(a: Any, c: Any, dest: Any, eps: Optional[float] = None,
                             nan_equal: bool = False) -> None:
    """Slice form of ``almost_equal_constant``."""
    fn = _almost(resolve_epsilon(eps), nan_equal)
    _elementwise_ex('almost_equal_constant_ex', fn, [('a', a), ('c', c)], dest, True)


def _almost(eps: float, nan_equal: bool) -> Callable[[Any, Any], bool]:
    if nan_equal:
        def fn(x, y):
            if x != x and y != y:
                return True
            return builtin_abs(x - y) <= eps
    else:
        def fn(x, y):
            return builtin_abs(x - y) <= eps
    return fn


builtin_abs = operator.abs


def _unary(func: str, fn: Callable, src: Any, factory: Optional[ContainerFactory],
           rule: str = 'promote') -> Any:
    return _elementwise(func, fn, [('src', src)], rule, False, factory)


def negate(src: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
    """Element-wise ``-x``."""
    return _unary('negate', operator.neg, src, factory)


def negate_ex(src: Any, dest: Any) -> None:
    """Slice form of ``negate``."""
    _elementwise_ex('negate_ex', operator.neg, [('src', src)], dest, False)


def abs(src: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
    """Element-wise absolute value."""
    return _unary('abs', operator.abs, src, factory)


def abs_ex(src: Any, dest: Any) -> None:
    """Slice form of ``abs``."""
    _elementwise_ex('abs_ex', operator.abs, [('src', src)], dest, False)


def _check_non_negative(func: str, container: Any, start: int, n: int) -> None:
    for k in range(n):
        if container[start + k] < 0:
            raise DomainViolationError(bad_argument(
                1, 'src', func, f"square root of negative value at offset {k}"))


def sqrt(src: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
    """
    Element-wise square root.

    Raises:
        DomainViolationError: If any element is negative
    """
    sc, si, n = _whole('sqrt', 1, 'src', src)
    _check_non_negative('sqrt', sc, si, n)
    return _unary('sqrt', math.sqrt, src, factory, rule='float')


def sqrt_ex(src: Any, dest: Any) -> None:
    """Slice form of ``sqrt``."""
    (sc, si, sn), = resolve_slices('sqrt_ex', src=src)
    _check_non_negative('sqrt_ex', sc, si, sn)
    _elementwise_ex('sqrt_ex', math.sqrt, [('src', src)], dest, False)


def map(fn: Callable, *sources: Any, dtype: Any = None,
        factory: Optional[ContainerFactory] = None) -> Any:
    """
    Apply ``fn`` across equal-length containers.

    Element ``k`` of the result is ``fn(s0[k], s1[k], ...)``. The element
    type is ``dtype`` when given, else the type of the first result.

    Example:
        >>> map(lambda x, y: x * 10 + y, [1, 2], [3, 4])
        [13, 24]
    """
    require_callable(fn, 1, 'fn', 'map')
    if not sources:
        raise LengthMismatchError("bad argument #2 'sources' to map (at least one source required)")
    whole = [_whole('map', i, f'sources[{i - 2}]', s) for i, s in enumerate(sources, start=2)]
    n = check_equal_counts('map', {f'sources[{i}]': w[2] for i, w in enumerate(whole)})
    readers = [_reader(c, s) for c, s, _ in whole]
    if n == 0:
        return zeros(0, dtype, factory=factory)
    first = fn(*[r(0) for r in readers])
    dtype = scalar_dtype(first) if dtype is None else normalize_dtype(dtype)
    dest, di = _allocate(dtype, n, factory)
    dest[di] = first
    for k in range(1, n):
        dest[di + k] = fn(*[r(k) for r in readers])
    return dest


def map_ex(fn: Callable, sources: Sequence[Any], dest: Any) -> None:
    """Apply ``fn`` across equal-count slices, writing into ``dest``."""
    require_callable(fn, 1, 'fn', 'map_ex')
    operands = [(f'sources[{i}]', s) for i, s in enumerate(sources)]
    if not operands:
        raise LengthMismatchError("bad argument #2 'sources' to map_ex (at least one source required)")
    _elementwise_ex('map_ex', fn, operands, dest, False)


def _mul_add(x, y, z):
    return x + y * z


def mul_add(a: Any, b: Any, c: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
    """
    Element-wise ``a + b * c``.

    ``c`` may be a scalar or a container of the same length.
    """
    return _elementwise('mul_add', _mul_add, [('a', a), ('b', b), ('c', c)], 'promote',
                        not _is_container(c), factory)


def mul_add_ex(a: Any, b: Any, c: Any, dest: Any) -> None:
    """Slice form of ``mul_add``; ``c`` may be a scalar."""
    _elementwise_ex('mul_add_ex', _mul_add, [('a', a), ('b', b), ('c', c)], dest,
                    not _is_container(c))


def mul_add_constant(a: Any, b: Any, c: Any, *,
                     factory: Optional[ContainerFactory] = None) -> Any:
    """
    Element-wise ``a + b * c`` with ``c`` a scalar or a container cycled over ``a``.

    Example:
        >>> mul_add_constant([0, 0, 0, 0], [1, 2, 3, 4], [1, 10])
        [1, 20, 3, 40]
    """
    return _elementwise('mul_add_constant', _mul_add, [('a', a), ('b', b), ('c', c)],
                        'promote', True, factory)


def mul_add_constant_ex(a: Any, b: Any, c: Any, dest: Any) -> None:
    """Slice form of ``mul_add_constant``."""
    _elementwise_ex('mul_add_constant_ex', _mul_add, [('a', a), ('b', b), ('c', c)], dest, True)


def lerp(a: Any, b: Any, t: Any, *, factory: Optional[ContainerFactory] = None) -> Any:
    """
    Element-wise linear interpolation ``a * (1 - t) + b * t``.

    ``t`` may be a scalar or a container of the same length.
    """
    return _elementwise('lerp', _lerp, [('a', a), ('b', b), ('t', t)], 'float',
                        not _is_container(t), factory)


def lerp_ex(a: Any, b: Any, t: Any, dest: Any) -> None:
    """Slice form of ``lerp``."""
    _elementwise_ex('lerp_ex', _lerp, [('a', a), ('b', b), ('t', t)], dest,
                    not _is_container(t))


def _lerp(x, y, t):
    return x * (1 - t) + y * t


# =============================================================================
# Reductions
# =============================================================================

def _values(func: str, src: Any, extended: bool) -> Tuple[Any, ...]:
    if extended:
        ((c, s, n),) = resolve_slices(func, src=src)
    else:
        c, s, n = _whole(func, 1, 'src', src)
    return tuple(c[s + k] for k in range(n))


def reduce(fn: Callable[[Any, Any], Any], src: Any, initial: Any = None) -> Any:
    """
    Left fold of ``fn`` over ``src``.

    Raises:
        DomainViolationError: If ``src`` is empty and no initial value is given
    """
    require_callable(fn, 1, 'fn', 'reduce')
    c, s, n = _whole('reduce', 2, 'src', src)
    return _fold_range(fn, c, s, n, initial, 'reduce')


def reduce_ex(fn: Callable[[Any, Any], Any], src: Any, initial: Any = None) -> Any:
    """Slice form of ``reduce``."""
    require_callable(fn, 1, 'fn', 'reduce_ex')
    ((c, start, n),) = resolve_slices('reduce_ex', positions=[2], src=src)
    return _fold_range(fn, c, start, n, initial, 'reduce_ex')


def _fold_range(fn, c, s, n, initial, func):
    if initial is None:
        if n == 0:
            raise DomainViolationError(bad_argument(
                2, 'src', func, "empty range and no initial value"))
        acc, first = c[s], 1
    else:
        acc, first = initial, 0
    for k in range(first, n):
        acc = fn(acc, c[s + k])
    return acc


def _sum(values: Tuple[Any, ...]) -> Any:
    return fold(operator.add, values) if values else 0


def _prod(values: Tuple[Any, ...]) -> Any:
    return fold(operator.mul, values) if values else 1


def _extreme(fn: Callable, func: str, values: Tuple[Any, ...]) -> Any:
    if not values:
        raise DomainViolationError(bad_argument(1, 'src', func, "empty range has no extreme"))
    return fold(fn, values)


def reduce_sum(src: Any) -> Any:
    """Sum of all elements, accumulated left to right (0 when empty)."""
    return _sum(_values('reduce_sum', src, False))


def reduce_sum_ex(src: Any) -> Any:
    """Slice form of ``reduce_sum``."""
    return _sum(_values('reduce_sum_ex', src, True))


def reduce_prod(src: Any) -> Any:
    """Product of all elements, accumulated left to right (1 when empty)."""
    return _prod(_values('reduce_prod', src, False))


def reduce_prod_ex(src: Any) -> Any:
    """Slice form of ``reduce_prod``."""
    return _prod(_values('reduce_prod_ex', src, True))


def reduce_min(src: Any) -> Any:
    """Smallest element (first one on ties)."""
    return _extreme(scalar_min, 'reduce_min', _values('reduce_min', src, False))


def reduce_min_ex(src: Any) -> Any:
    """Slice form of ``reduce_min``."""
    return _extreme(scalar_min, 'reduce_min_ex', _values('reduce_min_ex', src, True))


def reduce_max(src: Any) -> Any:
    """Largest element (first one on ties)."""
    return _extreme(scalar_max, 'reduce_max', _values('reduce_max', src, False))


def reduce_max_ex(src: Any) -> Any:
    """Slice form of ``reduce_max``."""
    return _extreme(scalar_max, 'reduce_max_ex', _values('reduce_max_ex', src, True))


def _dot(func: str, a: Any, b: Any, extended: bool) -> Any:
    if extended:
        (ac, ai, an), (bc, bi, bn) = resolve_slices(func, a=a, b=b)
    else:
        ac, ai, an = _whole(func, 1, 'a', a)
        bc, bi, bn = _whole(func, 2, 'b', b)
    n = check_equal_counts(func, {'a': an, 'b': bn})
    if n == 0:
        return 0
    return dot_values(tuple(ac[ai + k] for k in range(n)),
                      tuple(bc[bi + k] for k in range(n)))


def dot(a: Any, b: Any) -> Any:
    """
    Inner product of two equal-length containers.

    Example:
        >>> dot([1, 2, 3], [4, 5, 6])
        32
    """
    return _dot('dot', a, b, False)


def dot_ex(a: Any, b: Any) -> Any:
    """Slice form of ``dot``."""
    return _dot('dot_ex', a, b, True)


def norm_squared(src: Any) -> Any:
    """Squared Euclidean norm."""
    return _dot('norm_squared', src, src, False)


def norm_squared_ex(src: Any) -> Any:
    """Slice form of ``norm_squared``."""
    return _dot('norm_squared_ex', src, src, True)


def norm(src: Any) -> float:
    """Euclidean norm."""
    return math.sqrt(norm_squared(src))


def norm_ex(src: Any) -> float:
    """Slice form of ``norm``."""
    return math.sqrt(norm_squared_ex(src))


# =============================================================================
# Predicates
# =============================================================================

def _all(func: str, pred: Callable[[Any, Any], bool], a: Any, b: Any,
         extended: bool, constant: bool) -> bool:
    if constant:
        if extended:
            ((ac, ai, an),) = resolve_slices(func, a=a)
        else:
            ac, ai, an = _whole(func, 1, 'a', a)
        reader, _ = _operand(func, 2, 'c', b, an, True)
    elif extended:
        (ac, ai, an), (bc, bi, bn) = resolve_slices(func, a=a, b=b)
        check_equal_counts(func, {'a': an, 'b': bn})
        reader = _reader(bc, bi)
    else:
        ac, ai, an = _whole(func, 1, 'a', a)
        bc, bi, bn = _whole(func, 2, 'b', b)
        # Containers of different length are simply not equal
        if an != bn:
            return False
        reader = _reader(bc, bi)
    return all(pred(ac[ai + k], reader(k)) for k in range(an))


def all_equal(a: Any, b: Any) -> bool:
    """True when both containers have the same length and equal elements."""
    return _all('all_equal', operator.eq, a, b, False, False)


def all_equal_ex(a: Any, b: Any) -> bool:
    """Slice form of ``all_equal``; the slice counts must match."""
    return _all('all_equal_ex', operator.eq, a, b, True, False)


def all_almost_equal(a: Any, b: Any, eps: Optional[float] = None,
                     nan_equal: bool = False) -> bool:
    """True when lengths match and every pair differs by at most ``eps``."""
    return _all('all_almost_equal', _almost(resolve_epsilon(eps), nan_equal), a, b, False, False)


def all_almost_equal_ex(a: Any, b: Any, eps: Optional[float] = None,
                        nan_equal: bool = False) -> bool:
    """Slice form of ``all_almost_equal``."""
    return _all('all_almost_equal_ex', _almost(resolve_epsilon(eps), nan_equal), a, b, True, False)


def all_equal_constant(a: Any, c: Any) -> bool:
    """True when every element equals ``c`` (scalar or cycled container)."""
    return _all('all_equal_constant', operator.eq, a, c, False, True)


def all_equal_constant_ex(a: Any, c: Any) -> bool:
    """Slice form of ``all_equal_constant``."""
    return _all('all_equal_constant_ex', operator.eq, a, c, True, True)


def all_almost_equal_constant(a: Any, c: Any, eps: Optional[float] = None) -> bool:
    """True when every element is within ``eps`` of ``c``."""
    return _all('all_almost_equal_constant', _almost(resolve_epsilon(eps), False), a, c, False, True)


def all_almost_equal_constant_ex(a: Any, c: Any, eps: Optional[float] = None) -> bool:
    """Slice form of ``all_almost_equal_constant``."""
    return _all('all_almost_equal_constant_ex', _almost(resolve_epsilon(eps), False),
                a, c, True, True)
