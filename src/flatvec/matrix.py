"""
Matrix Facades

``Matrix2``, ``Matrix3`` and ``Matrix4`` wrap N*N column-major elements:
element ``(col, row)`` lives at ``col * N + row``. Like the vector
facades they own a list or view a caller's container, and delegate every
operation to the extended-form kernels of ``flatvec.math.linalg`` /
``flatvec.fixed``, which fill the result's own storage.

``matmul`` accepts a matrix of the same size (result: matrix), an
N-vector (result: vector), or for Matrix3 / Matrix4 a 2- / 3-vector,
which is transformed as a homogeneous point (w = 1).

Example:
    >>> from flatvec import Matrix2, Vector2
    >>> m = Matrix2(2, 4, 3, 1)              # columns (2, 4) and (3, 1)
    >>> (m @ Matrix2(5, 1, 2, 6)).get()
    (13, 21, 22, 14)
    >>> m.get(1, 0)
    3
    >>> (m @ Vector2(1, 1)).get()
    (5, 5)
"""

from __future__ import annotations

import operator
from typing import Any, Optional

from . import fixed
from ._errors import LengthMismatchError, RangeViolationError, bad_argument
from ._slice import Slice, resolve_exact
from ._typing import is_readable, length
from .math import linalg
from .vector import exact_operand, from_kernel, vector_class

__all__ = ['Matrix2', 'Matrix3', 'Matrix4', 'matrix_class']


class _Matrix:
    """Common base of the square column-major matrix facades."""

    SIZE = 0

    __slots__ = ('_data', '_start')

    def __init__(self, *values: Any):
        nn = self.SIZE * self.SIZE
        if not values:
            values = (0,) * nn
        elif len(values) != nn:
            raise LengthMismatchError(
                f"{type(self).__name__} takes exactly {nn} elements, got {len(values)}")
        self._data = list(values)
        self._start = 0

    @classmethod
    def identity(cls):
        return cls(*getattr(linalg, f'mat{cls.SIZE}_identity')())

    @classmethod
    def view(cls, container: Any, index: Optional[int] = None):
        """Matrix over ``container[index : index + N*N]`` without copying."""
        data, start = resolve_exact(f'{cls.__name__}.view', 1, 'container',
                                    Slice(container, index), cls.SIZE * cls.SIZE)
        mat = cls.__new__(cls)
        mat._data = data
        mat._start = start
        return mat

    # -------------------------------------------------------------------------
    # Readable / Writable (flat, column-major)
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return self.SIZE * self.SIZE

    def _flat(self, k: int) -> int:
        k = operator.index(k)
        if not 0 <= k < len(self):
            raise RangeViolationError(
                f"{type(self).__name__} index {k} out of range [0, {len(self)})")
        return self._start + k

    def __getitem__(self, k: int) -> Any:
        return self._data[self._flat(k)]

    def __setitem__(self, k: int, value: Any) -> None:
        self._data[self._flat(k)] = value

    def __iter__(self):
        return iter(self.get())

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def _position(self, col: int, row: int) -> int:
        n = self.SIZE
        for position, (name, value) in enumerate((('col', col), ('row', row)), start=1):
            if not 0 <= value < n:
                raise RangeViolationError(bad_argument(
                    position, name, f'{type(self).__name__}.get',
                    f"{name} {value} out of range [0, {n})"))
        return col * n + row

    def get(self, col: Optional[int] = None, row: Optional[int] = None) -> Any:
        """
        Element ``(col, row)``, or all elements as a column-major tuple when
        called without arguments.
        """
        if col is None and row is None:
            return fixed.op('get', len(self))(self._data, self._start)
        return self[self._position(col, row)]

    def set(self, col: int, row: int, value: Any) -> None:
        self[self._position(col, row)] = value

    def set_all(self, *values: Any) -> None:
        """Overwrite every element, column-major."""
        fixed.op('set', len(self))(self._data, self._start, *values)

    def column(self, col: int):
        """Column ``col`` as a vector view into this matrix's storage."""
        self._position(col, 0)
        return vector_class(self.SIZE).view(self._data, self._start + col * self.SIZE)

    def copy(self):
        return type(self)(*self.get())

    def copy_into(self, dest: Any, index: Optional[int] = None) -> None:
        fixed.op('set', len(self))(dest, index, *self.get())

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def _product(self, other: Any):
        """(kernel, result class) for ``self @ other``."""
        n = self.SIZE
        count = length(other) if is_readable(other) else None
        if count == n * n:
            return getattr(linalg, f'matmul_mat{n}_mat{n}'), type(self)
        if count == n:
            return getattr(linalg, f'matmul_mat{n}_vec{n}'), vector_class(n)
        if n in (3, 4) and count == n - 1:
            return getattr(linalg, f'matmul_mat{n}_vec{n - 1}'), vector_class(n - 1)
        raise LengthMismatchError(bad_argument(
            1, 'other', f'{type(self).__name__}.matmul',
            f"expected {n * n}, {n} elements"
            + (f" or {n - 1}" if n in (3, 4) else "")
            + f", got {count if count is not None else type(other).__name__}"))

    def matmul(self, other: Any):
        """Product with a matrix or a vector (see module docs)."""
        kernel, result = self._product(other)
        return from_kernel(result, getattr(linalg, f'{kernel.__name__}_ex'), self, other)

    def matmul_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        kernel, _ = self._product(other)
        getattr(linalg, f'{kernel.__name__}_ex')(self, other, Slice(dest, index))

    def transpose(self):
        return from_kernel(type(self), getattr(linalg, f'transpose_mat{self.SIZE}_ex'), self)

    def transpose_into(self, dest: Any, index: Optional[int] = None) -> None:
        getattr(linalg, f'transpose_mat{self.SIZE}_ex')(self, Slice(dest, index))

    # -------------------------------------------------------------------------
    # Element-wise Arithmetic
    # -------------------------------------------------------------------------

    def add(self, other: Any):
        exact_operand(f'{type(self).__name__}.add', other, len(self))
        return from_kernel(type(self), getattr(linalg, f'add_mat{self.SIZE}_ex'), self, other)

    def sub(self, other: Any):
        exact_operand(f'{type(self).__name__}.sub', other, len(self))
        return from_kernel(type(self), getattr(linalg, f'sub_mat{self.SIZE}_ex'), self, other)

    def add_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        getattr(linalg, f'add_mat{self.SIZE}_ex')(self, other, Slice(dest, index))

    def sub_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        getattr(linalg, f'sub_mat{self.SIZE}_ex')(self, other, Slice(dest, index))

    def _scaled(self, name: str, c: Any):
        nn = len(self)
        return from_kernel(type(self), fixed.op(f'{name}_ex', nn), self, fixed.op('fill', nn)(c))

    def mul(self, c: Any):
        """Scale every element by a scalar."""
        return self._scaled('mul', c)

    def div(self, c: Any):
        return self._scaled('div', c)

    def negate(self):
        return from_kernel(type(self), getattr(linalg, f'negate_mat{self.SIZE}_ex'), self)

    def equals(self, other: Any, eps: Optional[float] = None) -> bool:
        return getattr(linalg, f'equals_mat{self.SIZE}')(self, other, eps)

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    __matmul__ = matmul
    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __neg__ = negate

    def __rmul__(self, c: Any):
        return self.mul(c)

    def __eq__(self, other: Any) -> bool:
        if not is_readable(other) or len(other) != len(self):
            return NotImplemented
        return self.get() == tuple(other[k] for k in range(len(self)))

    __hash__ = None

    def __repr__(self) -> str:
        n = self.SIZE
        values = self.get()
        cols = ', '.join('(' + ', '.join(repr(v) for v in values[c * n:(c + 1) * n]) + ')'
                         for c in range(n))
        return f"{type(self).__name__}({cols})"


class Matrix2(_Matrix):
    """2x2 column-major matrix."""

    SIZE = 2
    __slots__ = ()


class Matrix3(_Matrix):
    """3x3 column-major matrix; transforms Vector2 points homogeneously."""

    SIZE = 3
    __slots__ = ()


class Matrix4(_Matrix):
    """4x4 column-major matrix; transforms Vector3 points homogeneously."""

    SIZE = 4
    __slots__ = ()


_BY_SIZE = {2: Matrix2, 3: Matrix3, 4: Matrix4}


def matrix_class(n: int) -> type:
    """Matrix facade class for ``n`` x ``n`` (2..4)."""
    try:
        return _BY_SIZE[n]
    except KeyError:
        raise LengthMismatchError(f"no matrix facade for size {n}") from None
