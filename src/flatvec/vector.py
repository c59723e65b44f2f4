"""
Vector Facades

``Vector2``, ``Vector3`` and ``Vector4`` wrap a storage slice of exactly
N elements: their own list, or a window into a caller's container
obtained with ``VectorN.view(container, index)``. Writes through a view
land in the caller's container.

The classes add no arithmetic of their own: every operation delegates to
an extended-form kernel of ``flatvec.math.linalg`` or ``flatvec.fixed``.
Results of arithmetic are new owning vectors filled by that kernel; the
``*_into`` methods run the same kernel against a caller slice.

Example:
    >>> from flatvec import Vector3
    >>> a = Vector3(1, 2, 3)
    >>> (a + Vector3(4, 5, 6)).get()
    (5, 7, 9)
    >>> a.cross(Vector3(4, 5, 6)).get()
    (-3, 6, -3)
    >>> data = [0, 0, 0, 10, 20, 30]
    >>> v = Vector3.view(data, 3)
    >>> v.x = 11
    >>> data
    [0, 0, 0, 11, 20, 30]
"""

from __future__ import annotations

import operator
from typing import Any, Callable, Optional, Tuple

from . import fixed
from ._errors import LengthMismatchError, RangeViolationError, bad_argument
from ._slice import Slice, resolve_exact
from ._typing import is_readable, length
from .math import linalg

__all__ = ['Vector2', 'Vector3', 'Vector4', 'vector_class']

_COMPONENTS = 'xyzw'


def from_kernel(cls: type, kernel_ex: Callable, *operands: Any):
    """New owning ``cls`` filled by an extended-form kernel writing into its storage."""
    result = cls()
    kernel_ex(*operands, result._data)
    return result


def exact_operand(func: str, other: Any, n: int) -> Any:
    """Container operands of a facade method must hold exactly ``n`` elements."""
    if is_readable(other) and length(other) != n:
        raise LengthMismatchError(bad_argument(
            1, 'other', func, f"exactly {n} elements required, got {length(other)}"))
    return other


class _Vector:
    """Common base of the fixed-size vector facades."""

    SIZE = 0

    __slots__ = ('_data', '_start')

    def __init__(self, *values: Any):
        n = self.SIZE
        if not values:
            values = (0,) * n
        elif len(values) != n:
            raise LengthMismatchError(
                f"{type(self).__name__} takes exactly {n} components, got {len(values)}")
        self._data = list(values)
        self._start = 0

    @classmethod
    def view(cls, container: Any, index: Optional[int] = None):
        """
        Vector over ``container[index : index + N]`` without copying.

        Raises:
            RangeViolationError: If the N elements leave the container's range
        """
        data, start = resolve_exact(f'{cls.__name__}.view', 1, 'container',
                                    Slice(container, index), cls.SIZE)
        vec = cls.__new__(cls)
        vec._data = data
        vec._start = start
        return vec

    # -------------------------------------------------------------------------
    # Readable / Writable
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return self.SIZE

    def _check(self, k: int) -> int:
        k = operator.index(k)
        if not 0 <= k < self.SIZE:
            raise RangeViolationError(
                f"{type(self).__name__} index {k} out of range [0, {self.SIZE})")
        return k

    def __getitem__(self, k: int) -> Any:
        return self._data[self._start + self._check(k)]

    def __setitem__(self, k: int, value: Any) -> None:
        self._data[self._start + self._check(k)] = value

    def __iter__(self):
        return iter(self.get())

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def get(self) -> Tuple[Any, ...]:
        """All components as a tuple."""
        return fixed.op('get', self.SIZE)(self._data, self._start)

    def set(self, *values: Any) -> None:
        """Overwrite all components."""
        fixed.op('set', self.SIZE)(self._data, self._start, *values)

    def swizzle(self, names: str) -> Tuple[Any, ...]:
        """
        Components selected by letter, e.g. ``v.swizzle('zyx')``.

        Raises:
            RangeViolationError: For letters beyond this vector's size
        """
        out = []
        for ch in names:
            k = _COMPONENTS.find(ch)
            if k < 0 or k >= self.SIZE:
                raise RangeViolationError(bad_argument(
                    1, 'names', 'swizzle', f"no component {ch!r} in {type(self).__name__}"))
            out.append(self[k])
        return tuple(out)

    def copy(self):
        """Owning copy of this vector."""
        return type(self)(*self.get())

    def copy_into(self, dest: Any, index: Optional[int] = None) -> None:
        """Write the components into ``dest[index : index + N]``."""
        fixed.op('set', self.SIZE)(dest, index, *self.get())

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _kernel(self, name: str, other: Any):
        vec = f'vec{self.SIZE}'
        if is_readable(other):
            return getattr(linalg, f'{name}_{vec}'), other
        return getattr(linalg, f'{name}_{vec}_constant'), other

    def _kernel_ex(self, name: str, other: Any):
        exact_operand(f'{type(self).__name__}.{name}', other, self.SIZE)
        kernel, operand = self._kernel(name, other)
        return getattr(linalg, f'{kernel.__name__}_ex'), operand

    def _binary(self, name: str, other: Any):
        kernel_ex, operand = self._kernel_ex(name, other)
        return from_kernel(type(self), kernel_ex, self, operand)

    def _binary_into(self, name: str, other: Any, dest: Any, index: Optional[int]) -> None:
        kernel_ex, operand = self._kernel_ex(name, other)
        kernel_ex(self, operand, Slice(dest, index))

    def add(self, other: Any):
        """Sum with a vector (any N-element container) or a scalar."""
        return self._binary('add', other)

    def sub(self, other: Any):
        return self._binary('sub', other)

    def mul(self, other: Any):
        """Component-wise product with a vector, or scale by a scalar."""
        return self._binary('mul', other)

    def div(self, other: Any):
        return self._binary('div', other)

    def add_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        self._binary_into('add', other, dest, index)

    def sub_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        self._binary_into('sub', other, dest, index)

    def mul_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        self._binary_into('mul', other, dest, index)

    def div_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        self._binary_into('div', other, dest, index)

    def negate(self):
        return from_kernel(type(self), getattr(linalg, f'negate_vec{self.SIZE}_ex'), self)

    def dot(self, other: Any) -> Any:
        """Inner product."""
        return getattr(linalg, f'dot_vec{self.SIZE}')(self, other)

    def length(self) -> float:
        return getattr(linalg, f'length_vec{self.SIZE}')(self)

    def length_squared(self) -> Any:
        return getattr(linalg, f'length_squared_vec{self.SIZE}')(self)

    def normalize(self):
        """
        Unit vector in this direction.

        Raises:
            DomainViolationError: For the zero vector
        """
        return from_kernel(type(self), getattr(linalg, f'normalize_vec{self.SIZE}_ex'), self)

    def normalize_into(self, dest: Any, index: Optional[int] = None) -> None:
        getattr(linalg, f'normalize_vec{self.SIZE}_ex')(self, Slice(dest, index))

    def equals(self, other: Any, eps: Optional[float] = None) -> bool:
        """Component-wise comparison within ``eps`` (default: configured epsilon)."""
        return getattr(linalg, f'equals_vec{self.SIZE}')(self, other, eps)

    # -------------------------------------------------------------------------
    # Operators
    # -------------------------------------------------------------------------

    __add__ = add
    __sub__ = sub
    __mul__ = mul
    __truediv__ = div
    __neg__ = negate

    def __radd__(self, other: Any):
        return self.add(other)

    def __rmul__(self, other: Any):
        return self.mul(other)

    def __eq__(self, other: Any) -> bool:
        if not is_readable(other) or len(other) != self.SIZE:
            return NotImplemented
        return self.get() == tuple(other[k] for k in range(self.SIZE))

    __hash__ = None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(repr(v) for v in self.get())})"


def _component(k: int) -> property:
    def fget(self):
        return self[k]

    def fset(self, value):
        self[k] = value

    return property(fget, fset, doc=f"Component {_COMPONENTS[k]}.")


class Vector2(_Vector):
    """Two-component vector."""

    SIZE = 2
    __slots__ = ()

    x = _component(0)
    y = _component(1)


class Vector3(_Vector):
    """Three-component vector."""

    SIZE = 3
    __slots__ = ()

    x = _component(0)
    y = _component(1)
    z = _component(2)

    def cross(self, other: Any) -> Vector3:
        """Cross product ``self x other``."""
        exact_operand('Vector3.cross', other, 3)
        return from_kernel(Vector3, linalg.cross_vec3_ex, self, other)

    def cross_into(self, other: Any, dest: Any, index: Optional[int] = None) -> None:
        linalg.cross_vec3_ex(self, other, Slice(dest, index))


class Vector4(_Vector):
    """Four-component vector."""

    SIZE = 4
    __slots__ = ()

    x = _component(0)
    y = _component(1)
    z = _component(2)
    w = _component(3)


_BY_SIZE = {2: Vector2, 3: Vector3, 4: Vector4}


def vector_class(n: int) -> type:
    """Vector facade class for ``n`` components (2..4)."""
    try:
        return _BY_SIZE[n]
    except KeyError:
        raise LengthMismatchError(f"no vector facade for {n} components") from None
