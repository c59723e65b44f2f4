"""Container Backends.

This module defines the built-in strategies for producing new containers.
A backend is just a construction hook: ``(element_type, length) ->
container`` returning a zero-filled, Readable and Writable container.

Backend Types:
    - LIST: Host-native Python list (default)
    - CTYPES: Typed foreign-memory buffer (flatvec.Array)
    - NUMPY: numpy.ndarray

Any other callable with the same signature is accepted wherever a
factory is expected; these three merely cover the common cases.

Example:
    >>> from flatvec import ops, Backend, get_factory
    >>> ops.add([1, 2], [3, 4], factory=get_factory(Backend.NUMPY))
    array([4, 6])
"""

from enum import Enum
from typing import Any, Callable, Optional, Union

from ._array import Array
from ._dtypes import DType, normalize_dtype

__all__ = [
    'Backend',
    'list_factory',
    'ctypes_factory',
    'numpy_factory',
    'get_factory',
    'backend_of',
    'zero_value',
]


# =============================================================================
# Enumerations
# =============================================================================

class Backend(Enum):
    """Built-in container backend.

    Attributes:
        LIST: Python list. Holds any element type, resizable.
        CTYPES: flatvec.Array over ctypes memory. Fixed length, numeric
                and bool element types only.
        NUMPY: numpy.ndarray. Fixed length, any numpy element type.
    """
    LIST = 'list'
    CTYPES = 'ctypes'
    NUMPY = 'numpy'


# =============================================================================
# Factories
# =============================================================================

def zero_value(element_type: Union[str, DType]) -> Any:
    """Zero of an element type as a Python scalar."""
    dtype = normalize_dtype(element_type)
    if dtype is DType.bool:
        return False
    if dtype is DType.object:
        return None
    if dtype in (DType.float32, DType.float64):
        return 0.0
    return 0


def list_factory(element_type: Union[str, DType], length: int) -> list:
    """Zero-filled Python list."""
    return [zero_value(element_type)] * length


def ctypes_factory(element_type: Union[str, DType], length: int) -> Array:
    """Zero-filled flatvec.Array.

    Raises:
        ValueError: For the ``object`` element type
    """
    dtype = normalize_dtype(element_type)
    if dtype is DType.object:
        raise ValueError("ctypes backend cannot hold object elements")
    return Array.zeros(length, dtype)


def numpy_factory(element_type: Union[str, DType], length: int):
    """Zero-filled numpy.ndarray."""
    import numpy as np

    dtype = normalize_dtype(element_type)
    if dtype is DType.object:
        return np.full(length, None, dtype=object)
    return np.zeros(length, dtype=np.dtype(dtype.value))


_FACTORIES = {
    Backend.LIST: list_factory,
    Backend.CTYPES: ctypes_factory,
    Backend.NUMPY: numpy_factory,
}


def get_factory(backend: Union[Backend, str]) -> Callable[[DType, int], Any]:
    """
    Get the construction hook of a built-in backend.

    Args:
        backend: Backend enum or its string value

    Raises:
        ValueError: For unknown backend names
    """
    return _FACTORIES[Backend(backend)]


def backend_of(factory: Callable) -> Optional[Backend]:
    """Return the Backend a factory belongs to, or None for custom factories."""
    for backend, candidate in _FACTORIES.items():
        if candidate is factory:
            return backend
    return None
