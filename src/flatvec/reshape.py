"""
Reshape Helpers

The only bridge between flat containers and caller-side nested
structures. Nested structures are lists (or tuples, read-only) of lists,
traversed depth first, row-major: the last axis varies fastest.

The only validation is that the total element counts agree; any
disagreement raises LengthMismatchError before anything is written.

Example:
    >>> reshape([1, 2, 3, 4, 5, 6], (2, 3))
    [[1, 2, 3], [4, 5, 6]]
    >>> flatten([[1, 2], [3, 4]])
    [1, 2, 3, 4]
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Sequence, Tuple, Union

from ._config import new_container
from ._dtypes import element_type_of
from ._errors import LengthMismatchError, bad_argument
from ._slice import resolve_slices
from ._typing import ContainerFactory, first_index, require_writable

__all__ = ['reshape', 'reshape_into', 'flatten', 'flatten_into', 'leaf_count']

Shape = Union[int, Sequence[int]]


def _is_branch(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _leaves(nested: Any) -> Iterator[Any]:
    for item in nested:
        if _is_branch(item):
            yield from _leaves(item)
        else:
            yield item


def leaf_count(nested: Any) -> int:
    """Number of non-list elements anywhere inside ``nested``."""
    return sum(leaf_count(item) if _is_branch(item) else 1 for item in nested)


def _shape_tuple(shape: Shape) -> Tuple[int, ...]:
    if isinstance(shape, int):
        return (shape,)
    return tuple(shape)


def _product(dims: Tuple[int, ...]) -> int:
    total = 1
    for d in dims:
        total *= d
    return total


def _build(values: Sequence[Any], offset: int, dims: Tuple[int, ...]) -> List[Any]:
    if len(dims) == 1:
        return [values[offset + k] for k in range(dims[0])]
    step = _product(dims[1:])
    return [_build(values, offset + k * step, dims[1:]) for k in range(dims[0])]


def reshape(src: Any, shape: Shape) -> List[Any]:
    """
    Nested lists of ``shape`` filled from a flat slice, row-major.

    Args:
        src: Slice argument (container, Slice or tuple)
        shape: Dimensions, outermost first

    Raises:
        LengthMismatchError: If the product of ``shape`` differs from the
            slice count
    """
    ((c, start, count),) = resolve_slices('reshape', src=src)
    dims = _shape_tuple(shape)
    total = _product(dims) if dims else 0
    if not dims or total != count or any(d < 0 for d in dims):
        raise LengthMismatchError(bad_argument(
            2, 'shape', 'reshape', f"shape {dims} does not hold {count} elements"))
    values = tuple(c[start + k] for k in range(count))
    return _build(values, 0, dims)


def reshape_into(src: Any, dest: List[Any]) -> None:
    """
    Overwrite the leaves of an existing nested list structure, in order.

    Raises:
        LengthMismatchError: If ``dest`` holds a different number of leaves
    """
    ((c, start, count),) = resolve_slices('reshape_into', src=src)
    n = leaf_count(dest)
    if n != count:
        raise LengthMismatchError(bad_argument(
            2, 'dest', 'reshape_into', f"{n} leaves cannot take {count} elements"))

    values = iter(c[start + k] for k in range(count))

    def fill(node: List[Any]) -> None:
        for i, item in enumerate(node):
            if _is_branch(item):
                fill(item)
            else:
                node[i] = next(values)

    fill(dest)


def flatten(nested: Any, dtype: Any = None, *,
            factory: Optional[ContainerFactory] = None) -> Any:
    """
    New flat container holding the leaves of ``nested`` depth first.

    Example:
        >>> flatten([[1, 2, 3], [4, 5, 6]])
        [1, 2, 3, 4, 5, 6]
    """
    values = tuple(_leaves(nested))
    if dtype is None:
        dtype = element_type_of(values)
    dest = new_container(dtype, len(values), factory)
    di = first_index(dest)
    for k, v in enumerate(values):
        dest[di + k] = v
    return dest


def flatten_into(nested: Any, dest: Any) -> None:
    """
    Write the leaves of ``nested`` into the ``dest`` slice.

    Raises:
        LengthMismatchError: If the leaf count differs from the slice count
    """
    ((dc, di, dn),) = resolve_slices('flatten_into', positions=[2], dest=dest)
    require_writable(dc, 2, 'dest', 'flatten_into')
    values = tuple(_leaves(nested))
    if len(values) != dn:
        raise LengthMismatchError(bad_argument(
            2, 'dest', 'flatten_into', f"count {dn} cannot take {len(values)} leaves"))
    for k, v in enumerate(values):
        dc[di + k] = v
