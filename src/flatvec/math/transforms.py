"""
Homogeneous Transform Builders.

3x3 matrices transform 2D points (w = 1 in the third slot), 4x4 matrices
transform 3D points. All results are column-major tuples, ready for
``linalg.matmul_mat3_vec2`` / ``linalg.matmul_mat4_vec3``.

Example:
    >>> from flatvec.math import transforms, linalg
    >>> t = transforms.mat3_translate(2, 3)
    >>> linalg.matmul_mat3_vec2(t, [1, 1])
    (3, 4)
"""

from __future__ import annotations

import math
from typing import Any, Tuple

from .._errors import DomainViolationError
from .linalg import write_exact

__all__ = [
    'mat3_translate', 'mat3_translate_ex',
    'mat3_scale', 'mat3_scale_ex',
    'mat3_rotate', 'mat3_rotate_ex',
    'mat3_rotate_around_axis', 'mat3_rotate_around_axis_ex',
    'mat4_translate', 'mat4_translate_ex',
    'mat4_scale', 'mat4_scale_ex',
    'mat4_rotate_around_axis', 'mat4_rotate_around_axis_ex',
]


# =============================================================================
# 3x3
# =============================================================================

def mat3_translate(x: Any, y: Any) -> Tuple[Any, ...]:
    """Translation by (x, y) in homogeneous 2D."""
    return (1, 0, 0,
            0, 1, 0,
            x, y, 1)


def mat3_translate_ex(x: Any, y: Any, dest: Any) -> None:
    write_exact('mat3_translate_ex', 3, dest, mat3_translate(x, y))


def mat3_scale(x: Any, y: Any, z: Any = 1) -> Tuple[Any, ...]:
    """Diagonal scale matrix; z defaults to 1 for homogeneous 2D use."""
    return (x, 0, 0,
            0, y, 0,
            0, 0, z)


def mat3_scale_ex(x: Any, y: Any, dest: Any, z: Any = 1) -> None:
    write_exact('mat3_scale_ex', 3, dest, mat3_scale(x, y, z))


def mat3_rotate(angle: float) -> Tuple[float, ...]:
    """Counter-clockwise rotation by ``angle`` radians in homogeneous 2D."""
    c, s = math.cos(angle), math.sin(angle)
    return (c, s, 0.0,
            -s, c, 0.0,
            0.0, 0.0, 1.0)


def mat3_rotate_ex(angle: float, dest: Any) -> None:
    write_exact('mat3_rotate_ex', 2, dest, mat3_rotate(angle))


def _axis_rotation(func: str, angle: float, x: float, y: float, z: float) -> Tuple[float, ...]:
    norm = math.sqrt(x * x + y * y + z * z)
    if norm == 0:
        raise DomainViolationError(f"{func}: rotation axis must be non-zero")
    x, y, z = x / norm, y / norm, z / norm
    c, s = math.cos(angle), math.sin(angle)
    t = 1.0 - c
    return (t * x * x + c, t * x * y + s * z, t * x * z - s * y,
            t * x * y - s * z, t * y * y + c, t * y * z + s * x,
            t * x * z + s * y, t * y * z - s * x, t * z * z + c)


def mat3_rotate_around_axis(angle: float, x: float, y: float, z: float) -> Tuple[float, ...]:
    """
    Rotation by ``angle`` radians about the axis (x, y, z).

    The axis is normalized first.

    Raises:
        DomainViolationError: For a zero axis

    Example:
        >>> m = mat3_rotate_around_axis(math.pi / 2, 0, 0, 1)
        >>> [round(v) for v in m]
        [0, 1, 0, -1, 0, 0, 0, 0, 1]
    """
    return _axis_rotation('mat3_rotate_around_axis', angle, x, y, z)


def mat3_rotate_around_axis_ex(angle: float, x: float, y: float, z: float, dest: Any) -> None:
    write_exact('mat3_rotate_around_axis_ex', 5, dest,
                _axis_rotation('mat3_rotate_around_axis_ex', angle, x, y, z))


# =============================================================================
# 4x4
# =============================================================================

def mat4_translate(x: Any, y: Any, z: Any) -> Tuple[Any, ...]:
    """Translation by (x, y, z) in homogeneous 3D."""
    return (1, 0, 0, 0,
            0, 1, 0, 0,
            0, 0, 1, 0,
            x, y, z, 1)


def mat4_translate_ex(x: Any, y: Any, z: Any, dest: Any) -> None:
    write_exact('mat4_translate_ex', 4, dest, mat4_translate(x, y, z))


def mat4_scale(x: Any, y: Any, z: Any) -> Tuple[Any, ...]:
    """Scale by (x, y, z); w stays 1."""
    return (x, 0, 0, 0,
            0, y, 0, 0,
            0, 0, z, 0,
            0, 0, 0, 1)


def mat4_scale_ex(x: Any, y: Any, z: Any, dest: Any) -> None:
    write_exact('mat4_scale_ex', 4, dest, mat4_scale(x, y, z))


def _embed(m3: Tuple[float, ...]) -> Tuple[float, ...]:
    return (m3[0], m3[1], m3[2], 0.0,
            m3[3], m3[4], m3[5], 0.0,
            m3[6], m3[7], m3[8], 0.0,
            0.0, 0.0, 0.0, 1.0)


def mat4_rotate_around_axis(angle: float, x: float, y: float, z: float) -> Tuple[float, ...]:
    """``mat3_rotate_around_axis`` embedded in a 4x4 homogeneous matrix."""
    return _embed(_axis_rotation('mat4_rotate_around_axis', angle, x, y, z))


def mat4_rotate_around_axis_ex(angle: float, x: float, y: float, z: float, dest: Any) -> None:
    write_exact('mat4_rotate_around_axis_ex', 5, dest,
                _embed(_axis_rotation('mat4_rotate_around_axis_ex', angle, x, y, z)))
