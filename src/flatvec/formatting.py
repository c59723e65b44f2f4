"""
Text Formatting

Human-readable strings for flat arrays, column-major matrices and
side-by-side tables of several arrays. Element formatting uses either
``str`` (default), a format spec understood by ``format()`` such as
``'.2f'``, or any callable returning a string.

Example:
    >>> format_array([1, 2, 3])
    '1, 2, 3'
    >>> print(format_mat2x2([1, 2, 3, 4]))
    1, 3
    2, 4
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, List, Optional, Sequence, Union

from ._errors import LengthMismatchError, bad_argument
from ._slice import as_slice, resolve_slices
from ._typing import index_range, require_readable

__all__ = ['Column', 'format_array', 'format_slice', 'format_matrix', 'tabulated']

Formatter = Union[None, str, Callable[[Any], str]]


def _formatter(fmt: Formatter) -> Callable[[Any], str]:
    if fmt is None:
        return str
    if callable(fmt):
        return fmt
    return lambda value: format(value, fmt)


def format_array(src: Any, separator: str = ", ", fmt: Formatter = None) -> str:
    """Join every element of a container with ``separator``."""
    require_readable(src, 1, 'src', 'format_array')
    to_str = _formatter(fmt)
    return separator.join(to_str(src[i]) for i in index_range(src))


def format_slice(src: Any, separator: str = ", ", fmt: Formatter = None) -> str:
    """
    Join the elements of a slice with ``separator``.

    Example:
        >>> format_slice(([1, 2, 3, 4], 0, 3))
        '1, 2, 3'
    """
    ((c, start, count),) = resolve_slices('format_slice', src=src)
    to_str = _formatter(fmt)
    return separator.join(to_str(c[start + k]) for k in range(count))


def format_matrix(src: Any, cols: int, rows: int, fmt: Formatter = None,
                  row_major: bool = False) -> str:
    """
    Format a flat matrix as rows of comma-separated values.

    Args:
        src: Slice argument holding exactly ``cols * rows`` elements
        cols: Number of columns
        rows: Number of rows
        fmt: Element formatter
        row_major: Read ``src`` row by row instead of column by column

    Raises:
        LengthMismatchError: If the slice does not hold ``cols * rows`` elements
    """
    ((c, start, count),) = resolve_slices('format_matrix', src=src)
    if count != cols * rows:
        raise LengthMismatchError(bad_argument(
            1, 'src', 'format_matrix', f"count {count} is not {cols} x {rows}"))
    to_str = _formatter(fmt)
    lines = []
    for row in range(rows):
        if row_major:
            cells = (c[start + row * cols + col] for col in range(cols))
        else:
            cells = (c[start + col * rows + row] for col in range(cols))
        lines.append(", ".join(to_str(v) for v in cells))
    return "\n".join(lines)


def _make_format(cols: int, rows: int) -> Callable[..., str]:
    def format_mat(src: Any, fmt: Formatter = None) -> str:
        return format_matrix(src, cols, rows, fmt)

    format_mat.__doc__ = f"Format a column-major mat{cols}x{rows} ({cols} columns, {rows} rows)."
    return format_mat


for _c in range(1, 5):
    for _r in range(1, 5):
        _names = [f'format_mat{_c}x{_r}'] + ([f'format_mat{_c}'] if _c == _r and _c > 1 else [])
        _function = _make_format(_c, _r)
        _function.__name__ = _function.__qualname__ = _names[0]
        for _name in _names:
            globals()[_name] = _function
            __all__.append(_name)
del _c, _r, _names, _name, _function


# =============================================================================
# Tables
# =============================================================================

@dataclass
class Column:
    """
    One column of a ``tabulated`` table.

    Attributes:
        data: Slice argument holding the column's values
        label: Header text
        group_size: Elements shown per row (e.g. 3 for xyz positions)
        fmt: Element formatter, overriding the table-wide one
    """

    data: Any
    label: str = ""
    group_size: int = 1
    fmt: Formatter = None


def tabulated(*columns: Any, headers: Optional[Sequence[str]] = None,
              fmt: Formatter = None) -> str:
    """
    Lay out several arrays side by side.

    Each column is a ``Column`` or a plain slice argument. Row ``i`` shows
    group ``i`` of every column; columns with fewer groups show ``-``.

    Example:
        >>> print(tabulated(Column([0, 0, 1, 2], 'pos', 2), [1, 1.5]))
           pos  -
        -----------
        0  0 0  1
        1  1 2  1.5
    """
    cols: List[Column] = [c if isinstance(c, Column) else Column(c) for c in columns]
    if headers is not None:
        if len(headers) != len(cols):
            raise LengthMismatchError(bad_argument(
                len(cols) + 1, 'headers', 'tabulated',
                f"{len(headers)} headers for {len(cols)} columns"))
        cols = [replace(col, label=header) for col, header in zip(cols, headers)]

    resolved = []
    for position, col in enumerate(cols, start=1):
        s = as_slice(col.data)
        start, count = s.resolve(position, 'columns', 'tabulated')
        resolved.append((s.container, start, count, max(col.group_size, 1)))
    num_rows = max((-(-count // g) for _, _, count, g in resolved), default=0)

    table = [[""] + [col.label or "-" for col in cols]]
    for row in range(num_rows):
        cells = [str(row)]
        for col, (c, start, count, g) in zip(cols, resolved):
            to_str = _formatter(col.fmt if col.fmt is not None else fmt)
            first = row * g
            if first >= count:
                cells.append("-")
            else:
                cells.append(" ".join(to_str(c[start + k])
                                      for k in range(first, min(first + g, count))))
        table.append(cells)

    # The row index column is at least one character wide, even without rows
    widths = [max(1, max(len(r[i]) for r in table)) for i in range(len(table[0]))]
    lines = ["  ".join(cell.ljust(w) for cell, w in zip(r, widths)).rstrip() for r in table]
    lines.insert(1, "-" * max(len(line) for line in lines))
    return "\n".join(lines)
