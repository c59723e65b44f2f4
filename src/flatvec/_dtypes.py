"""
Element Type Definitions

Provides type-safe element-type constants, normalization and inference.
Every container handled by flatvec is homogeneous: one element type
for the whole range.
"""

from typing import Any, Union
from enum import Enum

__all__ = [
    'DType',
    'float32', 'float64',
    'int8', 'int16', 'int32', 'int64',
    'uint8', 'uint16', 'uint32', 'uint64',
    'bool_', 'object_',
    'normalize_dtype', 'validate_dtype', 'element_type_of',
    'scalar_dtype', 'promote_types',
    'is_float_dtype', 'is_int_dtype', 'dtype_itemsize',
]


class DType(Enum):
    """
    flatvec Element Type Enumeration.

    Provides type-safe constants for container creation.

    Example:
        >>> from flatvec import DType, Array
        >>> arr = Array.zeros(100, dtype=DType.float32)
        >>>
        >>> # Or use module-level constants
        >>> import flatvec as fv
        >>> arr = Array.zeros(100, dtype=fv.float32)
    """

    float32 = 'float32'
    float64 = 'float64'
    int8 = 'int8'
    int16 = 'int16'
    int32 = 'int32'
    int64 = 'int64'
    uint8 = 'uint8'
    uint16 = 'uint16'
    uint32 = 'uint32'
    uint64 = 'uint64'
    bool = 'bool'
    object = 'object'

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"DType.{self.name}"


# =============================================================================
# Module-Level Constants (For Clean Syntax)
# =============================================================================

float32 = DType.float32
float64 = DType.float64
int8 = DType.int8
int16 = DType.int16
int32 = DType.int32
int64 = DType.int64
uint8 = DType.uint8
uint16 = DType.uint16
uint32 = DType.uint32
uint64 = DType.uint64
bool_ = DType.bool
object_ = DType.object


# Python scalar types map onto the widest matching element type
_PY_TYPE_MAP = {
    float: DType.float64,
    int: DType.int64,
    bool: DType.bool,
}


# =============================================================================
# Type Utilities
# =============================================================================

def normalize_dtype(dtype: Any) -> DType:
    """
    Normalize an element type argument to a DType.

    Args:
        dtype: DType enum, dtype string, Python scalar type (float, int,
            bool) or anything with a ``name`` attribute naming a dtype
            (numpy dtypes and scalar types)

    Returns:
        DType member

    Raises:
        TypeError: If the argument cannot be interpreted

    Example:
        >>> normalize_dtype('float32')
        DType.float32
        >>> normalize_dtype(float)
        DType.float64
    """
    if isinstance(dtype, DType):
        return dtype
    if isinstance(dtype, str):
        validate_dtype(dtype)
        return DType(dtype)
    if dtype in _PY_TYPE_MAP:
        return _PY_TYPE_MAP[dtype]

    # numpy.dtype instances and numpy scalar types
    if isinstance(dtype, type):
        name = dtype.__name__
    else:
        name = getattr(dtype, 'name', None)
    if isinstance(name, str):
        if name == 'bool_':
            name = 'bool'
        if name in _VALID:
            return DType(name)
    raise TypeError(f"dtype must be str, DType or a scalar type, got {dtype!r}")


_VALID = frozenset(e.value for e in DType)


def validate_dtype(dtype: str) -> None:
    """
    Validate dtype string.

    Args:
        dtype: Data type string

    Raises:
        ValueError: If dtype is not supported
    """
    if dtype not in _VALID:
        raise ValueError(f"Invalid dtype: {dtype}. Valid: {sorted(_VALID)}")


def element_type_of(container: Any, default: Union[str, DType, None] = None) -> DType:
    """
    Report the element type of a container.

    A ``dtype`` attribute wins (flatvec Arrays, numpy arrays). Otherwise the
    Python type of the first element decides. Empty containers without a
    dtype fall back to ``default`` or the configured default dtype.
    """
    dtype = getattr(container, 'dtype', None)
    if dtype is not None:
        try:
            return normalize_dtype(dtype)
        except TypeError:
            return DType.object

    from ._typing import index_range

    rng = index_range(container)
    if len(rng) > 0:
        return scalar_dtype(container[rng.start])

    if default is not None:
        return normalize_dtype(default)

    from ._config import get_config
    return get_config().default_dtype


def scalar_dtype(value: Any) -> DType:
    """Element type of a single scalar value."""
    # bool is a subclass of int, check it first
    for py_type in (bool, int, float):
        if isinstance(value, py_type):
            return _PY_TYPE_MAP[py_type]
    try:
        return normalize_dtype(type(value))
    except TypeError:
        return DType.object


def promote_types(*dtypes: DType) -> DType:
    """
    Element type able to hold the result of arithmetic over ``dtypes``.

    Identical inputs keep their type. Mixing in any float yields float64
    (float32 only when every non-bool input is float32); mixed integers and
    bools yield int64.
    """
    kinds = set(dtypes)
    if len(kinds) == 1:
        return dtypes[0]
    if DType.object in kinds:
        return DType.object
    floats = kinds & {DType.float32, DType.float64}
    if floats:
        if kinds - {DType.bool} == {DType.float32}:
            return DType.float32
        return DType.float64
    return DType.int64


def is_float_dtype(dtype: Union[str, DType]) -> bool:
    """Check if dtype is floating point."""
    return normalize_dtype(dtype) in (DType.float32, DType.float64)


def is_int_dtype(dtype: Union[str, DType]) -> bool:
    """Check if dtype is integer."""
    return normalize_dtype(dtype).value.startswith(('int', 'uint'))


def dtype_itemsize(dtype: Union[str, DType]) -> int:
    """
    Get size in bytes for dtype.

    Args:
        dtype: Data type

    Returns:
        Size in bytes

    Raises:
        ValueError: For ``object`` which has no fixed size
    """
    size_map = {
        'float32': 4,
        'float64': 8,
        'int8': 1,
        'int16': 2,
        'int32': 4,
        'int64': 8,
        'uint8': 1,
        'uint16': 2,
        'uint32': 4,
        'uint64': 8,
        'bool': 1,
    }

    name = normalize_dtype(dtype).value
    if name not in size_map:
        raise ValueError(f"dtype {name} has no fixed item size")
    return size_map[name]
