"""
Tests for capability contracts, slice descriptors, element types and errors.
"""

import pytest
import numpy as np
from flatvec import (
    Array,
    Slice,
    DType,
    view,
    FlatvecError,
    ContractViolationError,
    LengthMismatchError,
    RangeViolationError,
    DomainViolationError,
    Readable,
    Writable,
    Resizable,
    is_readable,
    is_writable,
    is_resizable,
    index_range,
)
from flatvec._dtypes import normalize_dtype, element_type_of, promote_types, dtype_itemsize
from flatvec._errors import bad_argument, error_from_code, check, check_equal_counts
from flatvec._slice import as_slice, resolve_slices, resolve_exact
from flatvec._typing import require_readable, require_writable, require_resizable


class Readonly:
    """Minimal user container: Readable only."""

    def __init__(self, values):
        self._values = list(values)

    def __getitem__(self, i):
        return self._values[i]

    def __len__(self):
        return len(self._values)


class TestCapabilities:
    """Test capability queries across container kinds."""

    def test_list_is_everything(self):
        """Test Python lists satisfy all three contracts."""
        assert is_readable([1]) and is_writable([1]) and is_resizable([1])
        assert isinstance([1], Readable)
        assert isinstance([1], Writable)
        assert isinstance([1], Resizable)

    def test_tuple_is_readonly(self):
        """Test tuples are Readable but not Writable."""
        assert is_readable((1, 2))
        assert not is_writable((1, 2))

    def test_numpy_array(self):
        """Test numpy arrays are Readable and Writable, not Resizable."""
        data = np.zeros(3)
        assert is_readable(data) and is_writable(data)
        assert not is_resizable(data)

    def test_user_container(self):
        """Test duck-typed containers need no base class."""
        ro = Readonly([1, 2])
        assert is_readable(ro)
        assert not is_writable(ro)

    def test_scalars_are_not_readable(self):
        """Test numbers fail the Readable contract."""
        assert not is_readable(3.0)
        assert not is_readable(None)

    def test_constant_view_not_writable(self):
        """Test read-only views report writable False."""
        assert not is_writable(view.constant(1, 3))
        assert not is_writable(view.reverse((1, 2, 3)))
        assert is_writable(view.reverse([1, 2, 3]))

    def test_require_messages(self):
        """Test failures name the argument and function."""
        with pytest.raises(ContractViolationError, match=r"bad argument #2 'dest' to copy_ex"):
            require_writable((1, 2), 2, 'dest', 'copy_ex')
        with pytest.raises(ContractViolationError):
            require_readable(42, 1, 'src', 'f')
        with pytest.raises(ContractViolationError):
            require_resizable(Array(2), 1, 'dest', 'push')

    def test_index_range(self):
        """Test Arrays are 0-based and Sequences report their own range."""
        assert index_range([1, 2, 3]) == range(0, 3)
        assert index_range(view.offset([1, 2, 3], 6)) == range(6, 9)


class TestSlice:
    """Test Slice descriptor resolution."""

    def test_defaults(self):
        """Test omitted start and count cover the rest of the range."""
        assert Slice([1, 2, 3]).resolve() == (0, 3)
        assert Slice([1, 2, 3], 1).resolve() == (1, 2)
        assert Slice([1, 2, 3, 4, 5], 1, 3).resolve() == (1, 3)

    def test_len_and_indices(self):
        """Test len() and indices() of a slice."""
        s = Slice([1, 2, 3, 4], 1, 2)
        assert len(s) == 2
        assert s.indices() == range(1, 3)

    def test_empty_slice_at_end(self):
        """Test a zero-count slice may start one past the last index."""
        assert Slice([1, 2, 3], 3, 0).resolve() == (3, 0)

    def test_out_of_range(self):
        """Test ranges leaving the container raise RangeViolationError."""
        with pytest.raises(RangeViolationError):
            Slice([1, 2, 3], 2, 2).resolve()
        with pytest.raises(RangeViolationError):
            Slice([1, 2, 3], -1, 1).resolve()
        with pytest.raises(RangeViolationError):
            Slice([1, 2, 3], 0, -1).resolve()

    def test_sequence_range(self):
        """Test slices against a Sequence valid over 6..8."""
        seq = view.offset([10, 20, 30], 6)
        assert Slice(seq, 7, 2).resolve() == (7, 2)
        with pytest.raises(RangeViolationError):
            Slice(seq, 2, 3).resolve()

    def test_not_readable(self):
        """Test non-containers raise ContractViolationError."""
        with pytest.raises(ContractViolationError):
            Slice(5).resolve()

    def test_as_slice(self):
        """Test tuple and bare-container coercion."""
        data = [1, 2, 3, 4]
        assert as_slice((data, 1)) == Slice(data, 1)
        assert as_slice((data, 1, 2)) == Slice(data, 1, 2)
        assert as_slice(data) == Slice(data)

    def test_resolve_slices_positions(self):
        """Test argument positions in messages."""
        with pytest.raises(RangeViolationError, match=r"#2 'b'"):
            resolve_slices('f', a=[1, 2], b=([1, 2], 1, 5))

    def test_resolve_exact(self):
        """Test exact-count resolution."""
        data = [1, 2, 3, 4, 5]
        assert resolve_exact('f', 1, 'a', (data, 2), 3) == (data, 2)
        with pytest.raises(LengthMismatchError):
            resolve_exact('f', 1, 'a', (data, 0, 4), 3)
        with pytest.raises(RangeViolationError):
            resolve_exact('f', 1, 'a', (data, 3), 3)


class TestDTypes:
    """Test element type utilities."""

    def test_normalize(self):
        """Test the accepted spellings."""
        assert normalize_dtype('float32') is DType.float32
        assert normalize_dtype(float) is DType.float64
        assert normalize_dtype(int) is DType.int64
        assert normalize_dtype(np.float32) is DType.float32
        assert normalize_dtype(np.dtype('int16')) is DType.int16
        assert normalize_dtype(np.bool_) is DType.bool

    def test_normalize_invalid(self):
        """Test unknown types are rejected."""
        with pytest.raises(ValueError):
            normalize_dtype('complex256')
        with pytest.raises(TypeError):
            normalize_dtype(object())

    def test_element_type_of(self):
        """Test element type inference."""
        assert element_type_of([1.5, 2.0]) is DType.float64
        assert element_type_of([True]) is DType.bool
        assert element_type_of(Array(2, 'int8')) is DType.int8
        assert element_type_of([], default='int32') is DType.int32
        assert element_type_of([]) is DType.float64

    def test_promote(self):
        """Test arithmetic promotion."""
        assert promote_types(DType.int64, DType.float64) is DType.float64
        assert promote_types(DType.float32, DType.float32) is DType.float32
        assert promote_types(DType.float32, DType.bool) is DType.float32
        assert promote_types(DType.int8, DType.int32) is DType.int64

    def test_itemsize(self):
        """Test item sizes."""
        assert dtype_itemsize('float32') == 4
        assert dtype_itemsize(DType.uint64) == 8
        with pytest.raises(ValueError):
            dtype_itemsize('object')


class TestErrors:
    """Test error classes and codes."""

    def test_builtin_bases(self):
        """Test each error is catchable as its builtin counterpart."""
        assert issubclass(ContractViolationError, TypeError)
        assert issubclass(LengthMismatchError, ValueError)
        assert issubclass(RangeViolationError, IndexError)
        assert issubclass(DomainViolationError, ValueError)
        for cls in (ContractViolationError, LengthMismatchError,
                    RangeViolationError, DomainViolationError):
            assert issubclass(cls, FlatvecError)

    def test_codes(self):
        """Test stable numeric codes."""
        assert LengthMismatchError().code == 11
        assert DomainViolationError().code == 12
        assert RangeViolationError().code == 13
        assert ContractViolationError().code == 20

    def test_error_from_code(self):
        """Test code to exception mapping."""
        err = error_from_code(13, "out of range")
        assert isinstance(err, RangeViolationError)
        assert err.message == "out of range"
        assert "13" in str(err)
        assert type(error_from_code(99)) is FlatvecError

    def test_bad_argument(self):
        """Test the standard message format."""
        assert bad_argument(2, 'dest', 'copy_ex', "count 3") == \
            "bad argument #2 'dest' to copy_ex (count 3)"

    def test_check(self):
        """Test check() raises only on falsy conditions."""
        check(True, DomainViolationError, "unused")
        with pytest.raises(DomainViolationError):
            check(False, DomainViolationError, "bad")

    def test_check_equal_counts(self):
        """Test count agreement."""
        assert check_equal_counts('f', {'a': 3, 'b': 3}) == 3
        with pytest.raises(LengthMismatchError, match=r"#2 'dest'"):
            check_equal_counts('f', {'src': 3, 'dest': 4})
