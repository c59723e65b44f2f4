"""
Tests for reshape helpers.
"""

import pytest
import numpy as np
from flatvec import Array, view, hooks, LengthMismatchError, ContractViolationError
from flatvec.reshape import reshape, reshape_into, flatten, flatten_into, leaf_count


class TestReshape:
    """Test flat to nested conversion."""

    def test_row_major(self):
        """Test the last axis varies fastest."""
        assert reshape([1, 2, 3, 4, 5, 6], (2, 3)) == [[1, 2, 3], [4, 5, 6]]
        assert reshape([1, 2, 3, 4, 5, 6], (3, 2)) == [[1, 2], [3, 4], [5, 6]]

    def test_matches_numpy(self):
        """Test agreement with numpy's C-order reshape."""
        values = list(range(24))
        expected = np.arange(24).reshape(2, 3, 4).tolist()
        assert reshape(values, (2, 3, 4)) == expected

    def test_int_shape(self):
        """Test a scalar shape gives one flat list."""
        assert reshape((7, 8, 9), 3) == [7, 8, 9]

    def test_slice_source(self):
        """Test reshaping a sub-range."""
        assert reshape(([0, 1, 2, 3, 4], 1, 4), (2, 2)) == [[1, 2], [3, 4]]
        assert reshape(view.reverse([1, 2, 3, 4]), [2, 2]) == [[4, 3], [2, 1]]

    def test_count_mismatch(self):
        """Test shapes must hold exactly the slice count."""
        with pytest.raises(LengthMismatchError, match=r"#2 'shape'"):
            reshape([1, 2, 3, 4, 5], (2, 3))
        with pytest.raises(LengthMismatchError):
            reshape([1, 2, 3, 4, 5, 6], (-2, -3))
        with pytest.raises(LengthMismatchError):
            reshape([1], ())

    def test_empty(self):
        """Test an empty source with a zero dimension."""
        assert reshape([], (0,)) == []
        assert reshape([], (2, 0)) == [[], []]


class TestReshapeInto:
    """Test writing into an existing nested structure."""

    def test_fills_leaves_in_order(self):
        """Test leaves are overwritten depth first."""
        dest = [[0, 0], [0, [0, 0]]]
        reshape_into([1, 2, 3, 4, 5], dest)
        assert dest == [[1, 2], [3, [4, 5]]]

    def test_leaf_mismatch(self):
        """Test nothing is written on a leaf count mismatch."""
        dest = [[0, 0], [0, 0]]
        with pytest.raises(LengthMismatchError):
            reshape_into([1, 2, 3], dest)
        assert dest == [[0, 0], [0, 0]]

    def test_leaf_count(self):
        """Test counting leaves of ragged structures."""
        assert leaf_count([[1, 2], [3], [], [[4]]]) == 4
        assert leaf_count([]) == 0


class TestFlatten:
    """Test nested to flat conversion."""

    def test_flatten(self):
        """Test depth-first flattening into a new container."""
        assert flatten([[1, 2, 3], [4, 5, 6]]) == [1, 2, 3, 4, 5, 6]
        assert flatten([1, (2, [3])]) == [1, 2, 3]

    def test_round_trip(self):
        """Test flatten(reshape(x, s)) == x."""
        values = [float(v) for v in range(12)]
        assert flatten(reshape(values, (3, 2, 2))) == values

    def test_flatten_uses_factory(self):
        """Test the construction hook decides the container kind."""
        with hooks.using('ctypes'):
            result = flatten([[1.0, 2.0], [3.0]])
        assert isinstance(result, Array)
        assert result.tolist() == [1.0, 2.0, 3.0]
        arr = flatten([[1, 2]], dtype='float32', factory=lambda dtype, n: np.zeros(n, dtype.value))
        assert arr.dtype == np.float32

    def test_flatten_into(self):
        """Test writing leaves into a slice."""
        dest = [0] * 5
        flatten_into([[1, 2], [3]], (dest, 2))
        assert dest == [0, 0, 1, 2, 3]
        with pytest.raises(LengthMismatchError):
            flatten_into([[1, 2]], dest)
        with pytest.raises(ContractViolationError):
            flatten_into([[1, 2]], view.constant(0, 2))
