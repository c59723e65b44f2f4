"""
Tests for text formatting.
"""

import pytest
from flatvec import Array, view, LengthMismatchError, RangeViolationError
from flatvec import formatting
from flatvec.formatting import Column, format_array, format_slice, format_matrix, tabulated


class TestFormatArray:
    """Test flat formatting."""

    def test_defaults(self):
        """Test str() elements joined by comma and space."""
        assert format_array([1, 2, 3]) == "1, 2, 3"
        assert format_array([]) == ""

    def test_separator_and_spec(self):
        """Test custom separators and format specs."""
        arr = Array.from_list([1.0, 2.5], dtype='float64')
        assert format_array(arr, " | ", ".2f") == "1.00 | 2.50"
        assert format_array([1, 2], fmt=lambda v: f"<{v}>") == "<1>, <2>"

    def test_views(self):
        """Test formatting a view."""
        assert format_array(view.reverse([1, 2, 3])) == "3, 2, 1"

    def test_slice(self):
        """Test formatting a sub-range."""
        assert format_slice(([1, 2, 3, 4], 1, 2)) == "2, 3"
        with pytest.raises(RangeViolationError):
            format_slice(([1, 2], 1, 2))


class TestFormatMatrix:
    """Test matrix formatting."""

    def test_column_major(self):
        """Test rows are read across columns."""
        assert formatting.format_mat2x2([1, 2, 3, 4]) == "1, 3\n2, 4"
        assert format_matrix([1, 2, 3, 4, 5, 6], 3, 2) == "1, 3, 5\n2, 4, 6"

    def test_row_major(self):
        """Test reading row by row."""
        assert format_matrix([1, 2, 3, 4, 5, 6], 3, 2, row_major=True) == "1, 2, 3\n4, 5, 6"

    def test_square_alias(self):
        """Test format_matN is format_matNxN."""
        assert formatting.format_mat3 is formatting.format_mat3x3
        assert formatting.format_mat3([1, 0, 0, 0, 1, 0, 0, 0, 1], ".0f") == \
            "1, 0, 0\n0, 1, 0\n0, 0, 1"

    def test_count_mismatch(self):
        """Test the element count must be cols * rows."""
        with pytest.raises(LengthMismatchError):
            format_matrix([1, 2, 3], 2, 2)
        with pytest.raises(LengthMismatchError):
            formatting.format_mat4([0] * 9)


class TestTabulated:
    """Test side-by-side tables."""

    def test_grouped_column(self):
        """Test a grouped column next to a shorter plain one."""
        table = tabulated(Column([0, 0, 1, 2], 'pos', 2), [1, 1.5])
        assert table.splitlines() == [
            "   pos  -",
            "-----------",
            "0  0 0  1",
            "1  1 2  1.5",
        ]

    def test_headers(self):
        """Test headers relabel columns without mutating them."""
        col = Column([1, 2], 'a')
        table = tabulated(col, [3, 4], headers=['x', 'y'])
        assert table.splitlines()[0] == "   x  y"
        assert col.label == 'a'

    def test_missing_cells(self):
        """Test short columns are padded with '-'."""
        lines = tabulated([1, 2, 3], [9]).splitlines()
        assert lines[-1] == "2  3  -"

    def test_per_column_format(self):
        """Test a column formatter overrides the table formatter."""
        table = tabulated(Column([0.5], 'a', fmt='.1f'), [0.25], fmt='.3f')
        assert table.splitlines()[2] == "0  0.5  0.250"

    def test_header_count(self):
        """Test one header per column."""
        with pytest.raises(LengthMismatchError):
            tabulated([1], [2], headers=['only'])

    def test_empty(self):
        """Test a table without rows has only the header."""
        assert tabulated([], headers=['x']).splitlines() == ["   x", "----"]

    def test_empty_keeps_row_index_column(self):
        """Test the row index column keeps its width when there are no rows."""
        lines = tabulated([], [], headers=['ab', 'c']).splitlines()
        assert lines == ["   ab  c", "--------"]
        assert tabulated([]).splitlines() == ["   -", "----"]
