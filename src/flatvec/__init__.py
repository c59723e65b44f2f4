"""
flatvec - Flat Numerical Arrays

Generic array and linear-algebra kernels over any indexable container:
- Capability contracts (Readable, Writable, Resizable) instead of a base class
- Slice descriptors addressing sub-ranges without copying
- Zero-copy views (reverse, stride, interleave, constant, join)
- Basic kernels that allocate and ``_ex`` kernels that write in place
- Fixed-count fast paths for 2..16 elements
- Column-major vector and matrix math

Modules:
- ops: Array kernel library
- fixed: Fixed-count fast paths
- view: Zero-copy views
- math: Vectors, matrices and transforms
- reshape / iterator / formatting: Helpers at the edges
- hooks: Construction hook management (FLATVEC_BACKEND aware)

Architecture:
    ┌──────────────────────────────────────────────┐
    │   Vector2..4 / Matrix2..4  (facades)         │
    ├──────────────────────────────────────────────┤
    │   math.linalg        │   fixed (N = 2..16)   │
    ├──────────────────────────────────────────────┤
    │   ops  (basic + _ex) │   view                │
    ├──────────────────────────────────────────────┤
    │   Slice  │  contracts  │  new_container hook │
    └──────────────────────────────────────────────┘

Example:
    >>> import flatvec as fv
    >>> fv.ops.add([1, 2, 3], [3, 4, 5])
    [4, 6, 8]
    >>> dest = [0.0] * 6
    >>> fv.ops.copy_ex(fv.view.reverse([1, 2, 3]), fv.Slice(dest, 3))
    >>> dest
    [0.0, 0.0, 0.0, 3, 2, 1]
    >>> fv.fixed.dot_3(1, 0, 0, 0, 1, 0)
    0
    >>>
    >>> # Results as numpy arrays instead of lists
    >>> with fv.hooks.using('numpy'):
    ...     fv.ops.mul_constant([1.0, 2.0], 2.0)
    array([2., 4.])
"""

__version__ = '0.1.0'

# Import main modules
from . import ops
from . import fixed
from . import view
from . import math
from . import reshape
from . import iterator
from . import formatting
from . import _hooks as hooks

# Re-export common types
from ._array import Array
from ._backend import Backend, list_factory, ctypes_factory, numpy_factory
from ._config import (
    get_config,
    set_factory,
    set_default_dtype,
    set_epsilon,
    new_container,
)
from ._dtypes import (
    DType,
    float32,
    float64,
    int8,
    int16,
    int32,
    int64,
    uint8,
    uint16,
    uint32,
    uint64,
    bool_,
    object_,
)
from ._errors import (
    FlatvecError,
    ContractViolationError,
    LengthMismatchError,
    RangeViolationError,
    DomainViolationError,
)
from ._slice import Slice
from ._typing import (
    Readable,
    Writable,
    Resizable,
    is_readable,
    is_writable,
    is_resizable,
    index_range,
)
from .view import get_slice
from .vector import Vector2, Vector3, Vector4
from .matrix import Matrix2, Matrix3, Matrix4

__all__ = [
    # Version
    '__version__',

    # Modules
    'ops',
    'fixed',
    'view',
    'math',
    'reshape',
    'iterator',
    'formatting',
    'hooks',

    # Containers and slices
    'Array',
    'Slice',
    'get_slice',

    # Facades
    'Vector2',
    'Vector3',
    'Vector4',
    'Matrix2',
    'Matrix3',
    'Matrix4',

    # Construction hook
    'Backend',
    'list_factory',
    'ctypes_factory',
    'numpy_factory',
    'new_container',
    'get_config',
    'set_factory',
    'set_default_dtype',
    'set_epsilon',

    # Type constants
    'DType',
    'float32',
    'float64',
    'int8',
    'int16',
    'int32',
    'int64',
    'uint8',
    'uint16',
    'uint32',
    'uint64',
    'bool_',
    'object_',

    # Errors
    'FlatvecError',
    'ContractViolationError',
    'LengthMismatchError',
    'RangeViolationError',
    'DomainViolationError',

    # Capability contracts
    'Readable',
    'Writable',
    'Resizable',
    'is_readable',
    'is_writable',
    'is_resizable',
    'index_range',
]

# Apply FLATVEC_BACKEND on import
hooks._auto_install()
