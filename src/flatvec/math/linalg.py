"""
Linear Algebra Kernels.

Vectors are flat fixed-length containers. Matrices are flat fixed-length
containers in column-major order: a matrix of ``C`` columns and ``R`` rows
occupies ``C * R`` slots and column ``c`` sits at ``[c * R, (c + 1) * R)``.
Names follow ``matCxR`` (columns first), so ``mat2x3`` has 2 columns of 3
rows and ``matN`` is square.

Every kernel has a basic form returning a tuple and an ``_ex`` form
writing into a destination slice. Tuple-only kernels take scalars:

    dot_3(1, 0, 0, 0, 1, 0)                 -> 0
    cross_3(1, 2, 3, 4, 5, 6)               -> (-3, 6, -3)
    add_vec3([1, 2, 3], [4, 5, 6])          -> (5, 7, 9)
    add_vec3_ex(a, b, (dest, 3))            writes dest[3:6]
    matmul_mat3x3_mat3x3(I, I)              -> I
    matmul_mat2x1_mat1x2([1, 2], [4, 2])    -> (8,)

The fixed-size kernels are the general ``matmul``/``transpose`` kernels
with their index plans computed once at import; element arithmetic is
shared with ``flatvec.fixed``, so fixed and general results agree exactly.

Example:
    >>> import flatvec.math as fm
    >>> fm.normalize_3(3, 0, 4)
    (0.6, 0.0, 0.8)
    >>> fm.transpose_mat2x3([1, 2, 3, 4, 5, 6])
    (1, 4, 2, 5, 3, 6)
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Any, Callable, Optional, Sequence, Tuple

from .. import fixed
from .._config import resolve_epsilon
from .._errors import DomainViolationError, LengthMismatchError, bad_argument
from .._slice import resolve_exact, resolve_slices
from .._typing import index_range, require_readable, require_writable
from ..ops import dot_values

__all__ = [
    'cross_3', 'cross', 'cross_ex', 'cross_vec3', 'cross_vec3_ex',
    'normalize', 'normalize_ex', 'length',
    'matmul', 'matmul_ex', 'transpose', 'transpose_ex',
]

VECTOR_SIZES = (2, 3, 4)
MATRIX_SIZES = (1, 2, 3, 4)


# =============================================================================
# Argument Helpers
# =============================================================================

def read_exact(func: str, position: int, name: str, value: Any, n: int,
               extended: bool = False) -> Tuple[Any, ...]:
    """
    Read exactly ``n`` values from an argument.

    Basic forms pass whole containers which must hold exactly ``n``
    elements; extended forms pass slices addressing ``n`` elements.
    """
    if extended:
        c, start = resolve_exact(func, position, name, value, n)
        return tuple(c[start + k] for k in range(n))
    require_readable(value, position, name, func)
    rng = index_range(value)
    if len(rng) != n:
        raise LengthMismatchError(bad_argument(
            position, name, func, f"exactly {n} elements required, got {len(rng)}"))
    return tuple(value[i] for i in rng)


def write_exact(func: str, position: int, dest: Any, values: Sequence[Any]) -> None:
    """Write ``values`` into a destination slice of exactly ``len(values)``."""
    dc, di = resolve_exact(func, position, 'dest', dest, len(values))
    require_writable(dc, position, 'dest', func)
    for k, v in enumerate(values):
        dc[di + k] = v


def _register(name: str, function: Callable, doc: Optional[str] = None) -> None:
    function.__name__ = function.__qualname__ = name
    function.__module__ = __name__
    if doc is not None:
        function.__doc__ = doc
    globals()[name] = function
    __all__.append(name)


# =============================================================================
# Tuple Vector Kernels
# =============================================================================

def _length_squared(values: Tuple[Any, ...]) -> Any:
    return dot_values(values, values)


def _normalized(func: str, values: Tuple[Any, ...]) -> Tuple[float, ...]:
    norm = math.sqrt(_length_squared(values))
    if norm == 0:
        raise DomainViolationError(f"{func}: cannot normalize a zero-length vector")
    return tuple(v / norm for v in values)


def _equals(values: Tuple[Any, ...], n: int, eps: float) -> bool:
    return all(abs(values[k] - values[n + k]) <= eps for k in range(n))


def cross_3(ax, ay, az, bx, by, bz) -> Tuple[Any, Any, Any]:
    """
    Cross product of two 3-vectors given as scalars.

    Example:
        >>> cross_3(1, 2, 3, 4, 5, 6)
        (-3, 6, -3)
    """
    return (ay * bz - az * by,
            az * bx - ax * bz,
            ax * by - ay * bx)


def _tuple_kernels(n: int) -> None:
    # Element-wise tuple arithmetic is the fixed-count fast path itself
    for name in ('add', 'sub', 'mul', 'div', 'negate', 'dot'):
        globals()[f'{name}_{n}'] = fixed.op(name, n)
        __all__.append(f'{name}_{n}')

    def length_squared_n(*v):
        if len(v) != n:
            raise LengthMismatchError(f"length_squared_{n} expects exactly {n} values, got {len(v)}")
        return _length_squared(v)

    def length_n(*v):
        return math.sqrt(length_squared_n(*v))

    def normalize_n(*v):
        if len(v) != n:
            raise LengthMismatchError(f"normalize_{n} expects exactly {n} values, got {len(v)}")
        return _normalized(f"normalize_{n}", v)

    def equals_n(*args, eps: Optional[float] = None):
        if len(args) != 2 * n:
            raise LengthMismatchError(f"equals_{n} expects exactly {2 * n} values, got {len(args)}")
        return _equals(args, n, resolve_epsilon(eps))

    _register(f'length_squared_{n}', length_squared_n, f"Squared length of {n} scalars.")
    _register(f'length_{n}', length_n, f"Euclidean length of {n} scalars.")
    _register(f'normalize_{n}', normalize_n,
              f"Unit vector of {n} scalars.\n\n"
              f"Raises:\n    DomainViolationError: For the zero vector")
    _register(f'equals_{n}', equals_n,
              f"True when two {n}-tuples (as {2 * n} scalars) differ by at most eps.")


# =============================================================================
# Container Vector Kernels
# =============================================================================

def _vector_kernels(n: int) -> None:
    vec = f'vec{n}'

    for name in ('add', 'sub', 'mul', 'div'):
        tuple_op = fixed.op(name, n)

        def basic(a, b, _op=tuple_op, _f=f'{name}_{vec}'):
            return _op(*read_exact(_f, 1, 'a', a, n), *read_exact(_f, 2, 'b', b, n))

        def ex(a, b, dest, _op=tuple_op, _f=f'{name}_{vec}_ex'):
            values = _op(*read_exact(_f, 1, 'a', a, n, True), *read_exact(_f, 2, 'b', b, n, True))
            write_exact(_f, 3, dest, values)

        def constant(a, c, _op=tuple_op, _f=f'{name}_{vec}_constant'):
            return _op(*read_exact(_f, 1, 'a', a, n), *fixed.op('fill', n)(c))

        def constant_ex(a, c, dest, _op=tuple_op, _f=f'{name}_{vec}_constant_ex'):
            values = _op(*read_exact(_f, 1, 'a', a, n, True), *fixed.op('fill', n)(c))
            write_exact(_f, 3, dest, values)

        _register(f'{name}_{vec}', basic, f"Element-wise {name} of two {n}-vectors.")
        _register(f'{name}_{vec}_ex', ex, f"Element-wise {name} of two {n}-vector slices into dest.")
        _register(f'{name}_{vec}_constant', constant, f"Element-wise {name} of a {n}-vector and a scalar.")
        _register(f'{name}_{vec}_constant_ex', constant_ex,
                  f"Element-wise {name} of a {n}-vector slice and a scalar into dest.")

    negate_n = fixed.op('negate', n)
    dot_n = fixed.op('dot', n)

    def negate_vec(a):
        return negate_n(*read_exact(f'negate_{vec}', 1, 'a', a, n))

    def negate_vec_ex(a, dest):
        write_exact(f'negate_{vec}_ex', 2, dest,
                    negate_n(*read_exact(f'negate_{vec}_ex', 1, 'a', a, n, True)))

    def dot_vec(a, b):
        return dot_n(*read_exact(f'dot_{vec}', 1, 'a', a, n), *read_exact(f'dot_{vec}', 2, 'b', b, n))

    def dot_vec_ex(a, b):
        return dot_n(*read_exact(f'dot_{vec}_ex', 1, 'a', a, n, True),
                     *read_exact(f'dot_{vec}_ex', 2, 'b', b, n, True))

    def length_squared_vec(a):
        return _length_squared(read_exact(f'length_squared_{vec}', 1, 'a', a, n))

    def length_squared_vec_ex(a):
        return _length_squared(read_exact(f'length_squared_{vec}_ex', 1, 'a', a, n, True))

    def length_vec(a):
        return math.sqrt(_length_squared(read_exact(f'length_{vec}', 1, 'a', a, n)))

    def length_vec_ex(a):
        return math.sqrt(_length_squared(read_exact(f'length_{vec}_ex', 1, 'a', a, n, True)))

    def normalize_vec(a):
        func = f'normalize_{vec}'
        return _normalized(func, read_exact(func, 1, 'a', a, n))

    def normalize_vec_ex(a, dest):
        func = f'normalize_{vec}_ex'
        write_exact(func, 2, dest, _normalized(func, read_exact(func, 1, 'a', a, n, True)))

    def equals_vec(a, b, eps: Optional[float] = None):
        func = f'equals_{vec}'
        values = read_exact(func, 1, 'a', a, n) + read_exact(func, 2, 'b', b, n)
        return _equals(values, n, resolve_epsilon(eps))

    def equals_vec_ex(a, b, eps: Optional[float] = None):
        func = f'equals_{vec}_ex'
        values = read_exact(func, 1, 'a', a, n, True) + read_exact(func, 2, 'b', b, n, True)
        return _equals(values, n, resolve_epsilon(eps))

    _register(f'negate_{vec}', negate_vec, f"Negated {n}-vector.")
    _register(f'negate_{vec}_ex', negate_vec_ex)
    _register(f'dot_{vec}', dot_vec, f"Inner product of two {n}-vectors.")
    _register(f'dot_{vec}_ex', dot_vec_ex)
    _register(f'length_squared_{vec}', length_squared_vec)
    _register(f'length_squared_{vec}_ex', length_squared_vec_ex)
    _register(f'length_{vec}', length_vec, f"Euclidean length of a {n}-vector.")
    _register(f'length_{vec}_ex', length_vec_ex)
    _register(f'normalize_{vec}', normalize_vec, f"Unit {n}-vector; the zero vector is rejected.")
    _register(f'normalize_{vec}_ex', normalize_vec_ex)
    _register(f'equals_{vec}', equals_vec, f"True when two {n}-vectors differ by at most eps.")
    _register(f'equals_{vec}_ex', equals_vec_ex)


for _n in VECTOR_SIZES:
    _tuple_kernels(_n)
    _vector_kernels(_n)


def cross_vec3(a: Any, b: Any) -> Tuple[Any, Any, Any]:
    """Cross product of two 3-element containers."""
    return cross_3(*read_exact('cross_vec3', 1, 'a', a, 3), *read_exact('cross_vec3', 2, 'b', b, 3))


def cross_vec3_ex(a: Any, b: Any, dest: Any) -> None:
    """Cross product of two 3-element slices written into ``dest``."""
    values = cross_3(*read_exact('cross_vec3_ex', 1, 'a', a, 3, True),
                     *read_exact('cross_vec3_ex', 2, 'b', b, 3, True))
    write_exact('cross_vec3_ex', 3, dest, values)


# =============================================================================
# General Vector Kernels
# =============================================================================

def _whole_values(func: str, position: int, name: str, value: Any) -> Tuple[Any, ...]:
    require_readable(value, position, name, func)
    return tuple(value[i] for i in index_range(value))


def cross(a: Any, b: Any) -> Tuple[Any, Any, Any]:
    """
    Cross product of two containers.

    Raises:
        DomainViolationError: Unless both hold exactly 3 elements
    """
    av = _whole_values('cross', 1, 'a', a)
    bv = _whole_values('cross', 2, 'b', b)
    for position, name, values in ((1, 'a', av), (2, 'b', bv)):
        if len(values) != 3:
            raise DomainViolationError(bad_argument(
                position, name, 'cross', f"cross product needs exactly 3 elements, got {len(values)}"))
    return cross_3(*av, *bv)


def cross_ex(a: Any, b: Any, dest: Any) -> None:
    """Slice form of ``cross``."""
    (ac, ai, an), (bc, bi, bn) = resolve_slices('cross_ex', a=a, b=b)
    for position, name, count in ((1, 'a', an), (2, 'b', bn)):
        if count != 3:
            raise DomainViolationError(bad_argument(
                position, name, 'cross_ex', f"cross product needs exactly 3 elements, got {count}"))
    values = cross_3(*(ac[ai + k] for k in range(3)), *(bc[bi + k] for k in range(3)))
    write_exact('cross_ex', 3, dest, values)


def length(src: Any) -> float:
    """Euclidean length of a container of any size (0.0 when empty)."""
    values = _whole_values('length', 1, 'src', src)
    return math.sqrt(_length_squared(values)) if values else 0.0


def normalize(src: Any) -> Tuple[float, ...]:
    """
    Unit vector in the direction of ``src``.

    Raises:
        DomainViolationError: For a zero-length (or empty) vector
    """
    values = _whole_values('normalize', 1, 'src', src)
    if not values:
        raise DomainViolationError("normalize: cannot normalize an empty vector")
    return _normalized('normalize', values)


def normalize_ex(src: Any, dest: Any) -> None:
    """Slice form of ``normalize``."""
    ((c, start, count),) = resolve_slices('normalize_ex', src=src)
    if count == 0:
        raise DomainViolationError("normalize_ex: cannot normalize an empty vector")
    values = _normalized('normalize_ex', tuple(c[start + k] for k in range(count)))
    write_exact('normalize_ex', 2, dest, values)


# =============================================================================
# Matrix Kernels
# =============================================================================

@lru_cache(maxsize=None)
def _matmul_plan(k: int, r: int, c: int) -> Tuple[Tuple[Tuple[int, int], ...], ...]:
    """
    Index plan of a (k columns x r rows) by (c columns x k rows) product.

    Entry ``col * r + row`` lists the ``(a_index, b_index)`` pairs whose
    products sum to that result element, in ascending ``k`` order.
    """
    return tuple(
        tuple((kk * r + row, col * k + kk) for kk in range(k))
        for col in range(c)
        for row in range(r)
    )


def _apply_matmul(plan, a: Tuple[Any, ...], b: Tuple[Any, ...]) -> Tuple[Any, ...]:
    out = []
    for pairs in plan:
        i, j = pairs[0]
        acc = a[i] * b[j]
        for i, j in pairs[1:]:
            acc = acc + a[i] * b[j]
        out.append(acc)
    return tuple(out)


@lru_cache(maxsize=None)
def _transpose_plan(c: int, r: int) -> Tuple[int, ...]:
    """Source index of each element of the transpose of a (c x r) matrix."""
    return tuple(col * r + row for row in range(r) for col in range(c))


def _check_dims(func: str, **dims: int) -> None:
    for position, (name, value) in enumerate(dims.items(), start=3):
        if value < 1:
            raise DomainViolationError(bad_argument(
                position, name, func, f"matrix dimension must be positive, got {value}"))


def matmul(a: Any, b: Any, a_cols: int, a_rows: int, b_cols: int) -> Tuple[Any, ...]:
    """
    Matrix product of column-major ``a`` (a_cols x a_rows) and ``b``
    (b_cols x a_cols).

    Args:
        a: Left matrix, ``a_cols * a_rows`` elements
        b: Right matrix, ``b_cols * a_cols`` elements
        a_cols: Columns of a, equal to the rows of b
        a_rows: Rows of a and of the result
        b_cols: Columns of b and of the result

    Returns:
        Result matrix (b_cols x a_rows) as a column-major tuple

    Raises:
        LengthMismatchError: If an operand's length disagrees with its dimensions

    Example:
        >>> matmul([2, 4, 3, 1], [5, 1, 2, 6], 2, 2, 2)
        (13, 21, 22, 14)
    """
    _check_dims('matmul', a_cols=a_cols, a_rows=a_rows, b_cols=b_cols)
    av = read_exact('matmul', 1, 'a', a, a_cols * a_rows)
    bv = read_exact('matmul', 2, 'b', b, b_cols * a_cols)
    return _apply_matmul(_matmul_plan(a_cols, a_rows, b_cols), av, bv)


def matmul_ex(a: Any, b: Any, a_cols: int, a_rows: int, b_cols: int, dest: Any) -> None:
    """
    Slice form of ``matmul``; ``dest`` may alias either operand.
    """
    _check_dims('matmul_ex', a_cols=a_cols, a_rows=a_rows, b_cols=b_cols)
    av = read_exact('matmul_ex', 1, 'a', a, a_cols * a_rows, True)
    bv = read_exact('matmul_ex', 2, 'b', b, b_cols * a_cols, True)
    dc, di = resolve_exact('matmul_ex', 6, 'dest', dest, b_cols * a_rows)
    require_writable(dc, 6, 'dest', 'matmul_ex')
    values = _apply_matmul(_matmul_plan(a_cols, a_rows, b_cols), av, bv)
    for k, v in enumerate(values):
        dc[di + k] = v


def transpose(src: Any, cols: int, rows: int) -> Tuple[Any, ...]:
    """
    Transpose of a column-major (cols x rows) matrix.

    Returns:
        The (rows x cols) result as a column-major tuple

    Example:
        >>> transpose([1, 2, 3, 4, 5, 6], 3, 2)
        (1, 3, 5, 2, 4, 6)
    """
    _check_dims('transpose', cols=cols, rows=rows)
    values = read_exact('transpose', 1, 'src', src, cols * rows)
    return tuple(values[i] for i in _transpose_plan(cols, rows))


def transpose_ex(src: Any, cols: int, rows: int, dest: Any) -> None:
    """Slice form of ``transpose``; ``dest`` may alias ``src``."""
    _check_dims('transpose_ex', cols=cols, rows=rows)
    values = read_exact('transpose_ex', 1, 'src', src, cols * rows, True)
    write_exact('transpose_ex', 4, dest, tuple(values[i] for i in _transpose_plan(cols, rows)))


def _fixed_matmul(k: int, r: int, c: int, name: str) -> None:
    plan = _matmul_plan(k, r, c)
    a_n, b_n, out_n = k * r, c * k, c * r

    def basic(a, b):
        return _apply_matmul(plan, read_exact(name, 1, 'a', a, a_n), read_exact(name, 2, 'b', b, b_n))

    def ex(a, b, dest):
        func = f'{name}_ex'
        values = _apply_matmul(plan, read_exact(func, 1, 'a', a, a_n, True),
                               read_exact(func, 2, 'b', b, b_n, True))
        write_exact(func, 3, dest, values)

    doc = (f"Product of a mat{k}x{r} and a mat{c}x{k}; returns {out_n} values "
           f"(mat{c}x{r}, column-major).")
    _register(name, basic, doc)
    _register(f'{name}_ex', ex, doc.replace("returns", "writes").replace("values", "values into dest"))


def _fixed_transpose(c: int, r: int, name: str) -> None:
    plan = _transpose_plan(c, r)
    n = c * r

    def basic(src):
        values = read_exact(name, 1, 'src', src, n)
        return tuple(values[i] for i in plan)

    def ex(src, dest):
        values = read_exact(f'{name}_ex', 1, 'src', src, n, True)
        write_exact(f'{name}_ex', 2, dest, tuple(values[i] for i in plan))

    _register(name, basic, f"Transpose of a mat{c}x{r} (returns a mat{r}x{c}).")
    _register(f'{name}_ex', ex)


for _k in MATRIX_SIZES:
    for _r in MATRIX_SIZES:
        _fixed_transpose(_k, _r, f'transpose_mat{_k}x{_r}')
        for _c in MATRIX_SIZES:
            _fixed_matmul(_k, _r, _c, f'matmul_mat{_k}x{_r}_mat{_c}x{_k}')


def _square_kernels(n: int) -> None:
    mat, nn = f'mat{n}', n * n

    # Square and matrix-vector aliases of the rectangular kernels
    aliases = {
        f'matmul_{mat}_{mat}': f'matmul_mat{n}x{n}_mat{n}x{n}',
        f'matmul_{mat}_vec{n}': f'matmul_mat{n}x{n}_mat1x{n}',
        f'transpose_{mat}': f'transpose_mat{n}x{n}',
    }
    for alias, target in aliases.items():
        for suffix in ('', '_ex'):
            globals()[alias + suffix] = globals()[target + suffix]
            __all__.append(alias + suffix)

    def identity():
        return tuple(1 if col == row else 0 for col in range(n) for row in range(n))

    def zero():
        return (0,) * nn

    _register(f'{mat}_identity', identity, f"{n}x{n} identity matrix.")
    _register(f'{mat}_zero', zero, f"{n}x{n} zero matrix.")

    for name in ('add', 'sub'):
        tuple_op = fixed.op(name, nn)

        def basic(a, b, _op=tuple_op, _f=f'{name}_{mat}'):
            return _op(*read_exact(_f, 1, 'a', a, nn), *read_exact(_f, 2, 'b', b, nn))

        def ex(a, b, dest, _op=tuple_op, _f=f'{name}_{mat}_ex'):
            write_exact(_f, 3, dest, _op(*read_exact(_f, 1, 'a', a, nn, True),
                                         *read_exact(_f, 2, 'b', b, nn, True)))

        _register(f'{name}_{mat}', basic, f"Element-wise {name} of two {n}x{n} matrices.")
        _register(f'{name}_{mat}_ex', ex)

    negate_nn = fixed.op('negate', nn)

    def negate_mat(a):
        return negate_nn(*read_exact(f'negate_{mat}', 1, 'a', a, nn))

    def negate_mat_ex(a, dest):
        func = f'negate_{mat}_ex'
        write_exact(func, 2, dest, negate_nn(*read_exact(func, 1, 'a', a, nn, True)))

    def equals_mat(a, b, eps: Optional[float] = None):
        func = f'equals_{mat}'
        values = read_exact(func, 1, 'a', a, nn) + read_exact(func, 2, 'b', b, nn)
        return _equals(values, nn, resolve_epsilon(eps))

    _register(f'negate_{mat}', negate_mat, f"Negated {n}x{n} matrix.")
    _register(f'negate_{mat}_ex', negate_mat_ex)
    _register(f'equals_{mat}', equals_mat, f"True when two {n}x{n} matrices differ by at most eps.")


for _n in (2, 3, 4):
    _square_kernels(_n)
del _n, _k, _r, _c


def _homogeneous(m: Tuple[Any, ...], v: Tuple[Any, ...], n: int) -> Tuple[Any, ...]:
    plan = _matmul_plan(n, n, 1)
    return _apply_matmul(plan, m, v + (1,))[:n - 1]


def matmul_mat3_vec2(m: Any, v: Any) -> Tuple[Any, Any]:
    """
    Transform a 2-vector by a 3x3 homogeneous matrix (w = 1, w dropped).

    Example:
        >>> matmul_mat3_vec2([1, 2, 3, 4, 5, 6, 7, 8, 9], [1, 2])
        (16, 20)
    """
    func = 'matmul_mat3_vec2'
    return _homogeneous(read_exact(func, 1, 'm', m, 9), read_exact(func, 2, 'v', v, 2), 3)


def matmul_mat3_vec2_ex(m: Any, v: Any, dest: Any) -> None:
    """Slice form of ``matmul_mat3_vec2``."""
    func = 'matmul_mat3_vec2_ex'
    values = _homogeneous(read_exact(func, 1, 'm', m, 9, True),
                          read_exact(func, 2, 'v', v, 2, True), 3)
    write_exact(func, 3, dest, values)


def matmul_mat4_vec3(m: Any, v: Any) -> Tuple[Any, Any, Any]:
    """Transform a 3-vector by a 4x4 homogeneous matrix (w = 1, w dropped)."""
    func = 'matmul_mat4_vec3'
    return _homogeneous(read_exact(func, 1, 'm', m, 16), read_exact(func, 2, 'v', v, 3), 4)


def matmul_mat4_vec3_ex(m: Any, v: Any, dest: Any) -> None:
    """Slice form of ``matmul_mat4_vec3``."""
    func = 'matmul_mat4_vec3_ex'
    values = _homogeneous(read_exact(func, 1, 'm', m, 16, True),
                          read_exact(func, 2, 'v', v, 3, True), 4)
    write_exact(func, 3, dest, values)


__all__ += ['matmul_mat3_vec2', 'matmul_mat3_vec2_ex', 'matmul_mat4_vec3', 'matmul_mat4_vec3_ex',
            'read_exact', 'write_exact']
