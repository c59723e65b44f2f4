"""
Typed Array Container

Fixed-length, ctypes-backed buffer of one element type. It is the
foreign-memory counterpart of a Python list: Readable and Writable, never
Resizable, with valid indices 0..n-1. Buffers can wrap existing memory
(bytes-like objects, numpy arrays) without copying.
"""

import ctypes
from typing import Union, List, Any, Iterable

from ._dtypes import DType, normalize_dtype

__all__ = ['Array', 'empty', 'zeros', 'from_list', 'from_buffer']


# =============================================================================
# Type Mapping
# =============================================================================

_TYPE_MAP = {
    'float32': (ctypes.c_float, 4),
    'float64': (ctypes.c_double, 8),
    'int8': (ctypes.c_int8, 1),
    'int16': (ctypes.c_int16, 2),
    'int32': (ctypes.c_int32, 4),
    'int64': (ctypes.c_int64, 8),
    'uint8': (ctypes.c_uint8, 1),
    'uint16': (ctypes.c_uint16, 2),
    'uint32': (ctypes.c_uint32, 4),
    'uint64': (ctypes.c_uint64, 8),
    'bool': (ctypes.c_bool, 1),
}


def _get_type_info(dtype: str):
    """Get (ctypes_type, itemsize) for dtype string."""
    if dtype not in _TYPE_MAP:
        raise ValueError(f"Unsupported dtype: {dtype}. "
                         f"Supported: {list(_TYPE_MAP.keys())}")
    return _TYPE_MAP[dtype]


# =============================================================================
# Array Class
# =============================================================================

class Array:
    """
    Contiguous typed array with C-compatible memory layout.

    Features:
    - Zero-copy wrapping of foreign buffers
    - Bounds-checked 0-based element access
    - Conversion to and from numpy

    Attributes:
        dtype (str): Data type ('float32', 'int64', etc.)
        size (int): Number of elements
        nbytes (int): Total bytes

    Example:
        >>> arr = Array.zeros(4, dtype='float32')
        >>> arr[0] = 3.5
        >>> arr.tolist()
        [3.5, 0.0, 0.0, 0.0]
    """

    def __init__(self, size: int, dtype: Union[str, DType] = 'float64'):
        """
        Allocate a zero-filled array.

        Args:
            size: Number of elements
            dtype: Data type (string or DType enum)
        """
        if size < 0:
            raise ValueError(f"Array size must be non-negative, got {size}")

        dtype = normalize_dtype(dtype).value

        self._size = size
        self._dtype = dtype
        self._ctype, self._itemsize = _get_type_info(dtype)
        self._data = (self._ctype * size)()
        self._owner = None

    @property
    def size(self) -> int:
        """Number of elements."""
        return self._size

    @property
    def dtype(self) -> str:
        """Data type string."""
        return self._dtype

    @property
    def nbytes(self) -> int:
        """Total bytes."""
        return self._size * self._itemsize

    @property
    def itemsize(self) -> int:
        """Bytes per element."""
        return self._itemsize

    @property
    def ptr(self) -> int:
        """C pointer address (read-only)."""
        if self._size == 0:
            return 0
        return ctypes.addressof(self._data)

    # -------------------------------------------------------------------------
    # Initialization Methods
    # -------------------------------------------------------------------------

    @classmethod
    def zeros(cls, size: int, dtype: Union[str, DType] = 'float64') -> 'Array':
        """Create zero-initialized array."""
        return cls(size, dtype)

    @classmethod
    def from_list(cls, data: Iterable, dtype: Union[str, DType] = 'float64') -> 'Array':
        """Create array from a Python iterable."""
        data = list(data)
        arr = cls(len(data), dtype)
        for i, val in enumerate(data):
            arr._data[i] = val
        return arr

    @classmethod
    def from_buffer(cls, buffer: Any, dtype: Union[str, DType], size: int) -> 'Array':
        """
        Create array over an existing writable buffer (zero-copy view).

        WARNING: This creates a view, not a copy. The original buffer
        must remain alive while this Array exists; the Array keeps a
        reference to it.

        Args:
            buffer: Writable object supporting the buffer protocol
                (bytearray, numpy array, ctypes array, ...)
            dtype: Data type string
            size: Number of elements

        Raises:
            ValueError: If the buffer is too small
        """
        dtype = normalize_dtype(dtype).value
        ctype, itemsize = _get_type_info(dtype)

        mv = memoryview(buffer)
        if mv.nbytes < size * itemsize:
            raise ValueError(f"Buffer too small: {mv.nbytes} < {size * itemsize}")

        arr = cls.__new__(cls)
        arr._size = size
        arr._dtype = dtype
        arr._ctype = ctype
        arr._itemsize = itemsize
        arr._data = (ctype * size).from_buffer(buffer)
        arr._owner = buffer
        return arr

    @classmethod
    def from_numpy(cls, data: Any, copy: bool = True) -> 'Array':
        """
        Create array from a 1-D numpy array.

        Args:
            data: numpy array
            copy: If False, share memory with ``data`` (must be contiguous
                and writable)
        """
        import numpy as np

        data = np.asarray(data)
        if data.ndim != 1:
            raise ValueError(f"Array requires 1-D data, got ndim={data.ndim}")
        dtype = normalize_dtype(data.dtype).value
        if copy:
            return cls.from_list(data.tolist(), dtype)
        return cls.from_buffer(np.ascontiguousarray(data), dtype, data.shape[0])

    # -------------------------------------------------------------------------
    # Element Access
    # -------------------------------------------------------------------------

    def __getitem__(self, idx: Union[int, slice]):
        """Get element(s) by index."""
        if isinstance(idx, slice):
            start, stop, step = idx.indices(self._size)
            return [self._data[i] for i in range(start, stop, step)]
        if idx < 0:
            idx += self._size
        if idx < 0 or idx >= self._size:
            raise IndexError(f"Index {idx} out of bounds [0, {self._size})")
        return self._data[idx]

    def __setitem__(self, idx: Union[int, slice], value):
        """Set element(s) by index."""
        if isinstance(idx, slice):
            start, stop, step = idx.indices(self._size)
            indices = range(start, stop, step)

            if hasattr(value, '__iter__'):
                for i, v in zip(indices, value):
                    self._data[i] = v
            else:
                for i in indices:
                    self._data[i] = value
            return
        if idx < 0:
            idx += self._size
        if idx < 0 or idx >= self._size:
            raise IndexError(f"Index {idx} out of bounds [0, {self._size})")
        self._data[idx] = value

    def __len__(self) -> int:
        return self._size

    def __iter__(self):
        return iter(self._data)

    def __eq__(self, other) -> bool:
        if isinstance(other, (Array, list, tuple)):
            return len(self) == len(other) and all(
                a == b for a, b in zip(self._data, other))
        return NotImplemented

    __hash__ = None

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def as_memoryview(self) -> memoryview:
        """Get memoryview of the underlying data."""
        return memoryview(self._data)

    def tobytes(self) -> bytes:
        """Convert to bytes."""
        return bytes(self._data)

    def tolist(self) -> List:
        """Convert to Python list."""
        return list(self._data)

    def to_numpy(self, copy: bool = True):
        """
        Convert to numpy array.

        Args:
            copy: If False, return an array sharing this buffer

        Returns:
            numpy.ndarray
        """
        import numpy as np

        np_dtype = np.dtype(self._dtype)
        if self._size == 0:
            return np.array([], dtype=np_dtype)
        shared = np.frombuffer(self._data, dtype=np_dtype, count=self._size)
        return shared.copy() if copy else shared

    # -------------------------------------------------------------------------
    # Copy Operations
    # -------------------------------------------------------------------------

    def copy(self) -> 'Array':
        """Create a deep copy."""
        new = Array(self._size, self._dtype)
        if self._size:
            ctypes.memmove(new._data, self._data, self.nbytes)
        return new

    def fill(self, value):
        """Fill array with a constant value."""
        for i in range(self._size):
            self._data[i] = value

    # -------------------------------------------------------------------------
    # Representation
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        if self._size == 0:
            return f"Array([], dtype={self._dtype})"
        elif self._size <= 6:
            data_str = str(self.tolist())
        else:
            values = self.tolist()
            data_str = str(values[:3] + ['...'] + values[-3:])

        return f"Array({data_str}, dtype={self._dtype})"


# =============================================================================
# Factory Functions
# =============================================================================

def empty(size: int, dtype: Union[str, DType] = 'float64') -> Array:
    """Create array (contents zeroed, as ctypes always initializes)."""
    return Array(size, dtype)


def zeros(size: int, dtype: Union[str, DType] = 'float64') -> Array:
    """Create zero-initialized array."""
    return Array.zeros(size, dtype)


def from_list(data: Iterable, dtype: Union[str, DType] = 'float64') -> Array:
    """Create array from Python list."""
    return Array.from_list(data, dtype)


def from_buffer(buffer: Any, dtype: Union[str, DType], size: int) -> Array:
    """Create array over existing buffer (zero-copy)."""
    return Array.from_buffer(buffer, dtype, size)
