"""
Tests for the ctypes-backed Array container.
"""

import pytest
import numpy as np
from flatvec import Array, DType, is_readable, is_writable, is_resizable
from flatvec._array import empty, zeros, from_list, from_buffer


class TestArrayCreation:
    """Test Array creation methods."""

    def test_array_creation(self):
        """Test allocating a zero-filled array."""
        arr = Array(10, dtype='float32')
        assert arr.size == 10
        assert len(arr) == 10
        assert arr.dtype == 'float32'
        assert arr.nbytes == 40

    def test_array_empty_function(self):
        """Test empty() function."""
        arr = empty(4, dtype='int16')
        assert arr.size == 4
        assert arr.itemsize == 2
        assert arr.tolist() == [0, 0, 0, 0]

    def test_array_zeros(self):
        """Test zeros() function."""
        arr = zeros(10, dtype=DType.float64)
        assert arr.dtype == 'float64'
        assert all(arr[i] == 0.0 for i in range(10))

    def test_array_from_list(self):
        """Test from_list() function."""
        data = [1.0, 2.0, 3.0, 4.0, 5.0]
        arr = from_list(data, dtype='float32')
        assert arr.size == 5
        for i, val in enumerate(data):
            assert arr[i] == pytest.approx(val)

    def test_array_zero_size(self):
        """Test creating zero-sized array."""
        arr = Array(0, dtype='float32')
        assert arr.size == 0
        assert arr.ptr == 0
        assert repr(arr) == "Array([], dtype=float32)"


class TestArrayContracts:
    """Test that Array satisfies Readable and Writable but not Resizable."""

    def test_capabilities(self):
        """Test capability queries."""
        arr = Array(3)
        assert is_readable(arr)
        assert is_writable(arr)
        assert not is_resizable(arr)

    def test_index_bounds(self):
        """Test out-of-bounds access raises IndexError."""
        arr = Array(3)
        with pytest.raises(IndexError):
            arr[3]
        with pytest.raises(IndexError):
            arr[3] = 1.0

    def test_slice_access(self):
        """Test Python slice get and set."""
        arr = from_list([1, 2, 3, 4], dtype='int64')
        assert arr[1:3] == [2, 3]
        arr[0:2] = [9, 8]
        assert arr.tolist() == [9, 8, 3, 4]

    def test_equality(self):
        """Test comparison with lists."""
        assert from_list([1, 2], dtype='int32') == [1, 2]
        assert from_list([1, 2], dtype='int32') != [1, 2, 3]


class TestArrayConversion:
    """Test conversion to and from other containers."""

    def test_to_numpy_copy(self):
        """Test to_numpy() copies by default."""
        arr = from_list([1.0, 2.0], dtype='float64')
        np_arr = arr.to_numpy()
        np_arr[0] = 5.0
        assert arr[0] == 1.0

    def test_to_numpy_shared(self):
        """Test to_numpy(copy=False) shares memory."""
        arr = from_list([1.0, 2.0], dtype='float64')
        np_arr = arr.to_numpy(copy=False)
        np_arr[0] = 5.0
        assert arr[0] == 5.0

    def test_from_buffer_numpy(self):
        """Test zero-copy wrap of a numpy buffer."""
        data = np.arange(4, dtype=np.int32)
        arr = from_buffer(data, 'int32', 4)
        arr[2] = 42
        assert data[2] == 42

    def test_from_buffer_too_small(self):
        """Test buffer size validation."""
        with pytest.raises(ValueError):
            from_buffer(bytearray(4), 'float64', 1)

    def test_from_numpy(self):
        """Test from_numpy() infers dtype."""
        arr = Array.from_numpy(np.array([1, 2, 3], dtype=np.uint8))
        assert arr.dtype == 'uint8'
        assert arr.tolist() == [1, 2, 3]

    def test_copy_and_fill(self):
        """Test copy() is independent and fill() sets every element."""
        arr = from_list([1.0, 2.0, 3.0])
        dup = arr.copy()
        arr.fill(7.0)
        assert arr.tolist() == [7.0, 7.0, 7.0]
        assert dup.tolist() == [1.0, 2.0, 3.0]

    def test_memoryview(self):
        """Test memoryview and bytes export."""
        arr = from_list([1, 2], dtype='uint8')
        assert arr.as_memoryview().nbytes == 2
        assert arr.tobytes() == b'\x01\x02'


class TestArrayErrors:
    """Test error handling."""

    def test_invalid_dtype(self):
        """Test invalid dtype raises ValueError."""
        with pytest.raises(ValueError):
            Array(10, dtype='invalid')

    def test_object_dtype_unsupported(self):
        """Test object elements cannot live in ctypes memory."""
        with pytest.raises(ValueError):
            Array(2, dtype='object')

    def test_negative_size(self):
        """Test negative size raises ValueError."""
        with pytest.raises(ValueError):
            Array(-1)
