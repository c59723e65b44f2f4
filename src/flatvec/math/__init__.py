"""
flatvec.math - Vector and Matrix Kernels

Flat vectors and column-major flat matrices. See ``linalg`` for the
kernel naming scheme and ``transforms`` for homogeneous transform
builders. Every public name of both submodules is re-exported here.

Example:
    >>> import flatvec.math as fm
    >>> fm.cross_3(1, 2, 3, 4, 5, 6)
    (-3, 6, -3)
    >>> fm.matmul_mat2_mat2(fm.mat2_identity(), [1, 2, 3, 4])
    (1, 2, 3, 4)
"""

from . import linalg, transforms
from .linalg import *  # noqa: F401,F403
from .transforms import *  # noqa: F401,F403

__all__ = ['linalg', 'transforms'] + list(linalg.__all__) + list(transforms.__all__)
