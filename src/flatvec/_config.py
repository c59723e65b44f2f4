"""
Global configuration for flatvec.

Provides:
- The container construction hook used by basic-form kernels
- Default element type for empty inputs
- Default tolerance of the almost-equal kernels

The configuration is process-wide and read-mostly: set it once before
running kernels, from a single thread. Changing it while kernels are
executing elsewhere is undefined. Per-call injection through the
``factory=`` keyword of every basic-form kernel avoids shared state
entirely.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional, Union

from ._backend import list_factory, backend_of
from ._dtypes import DType, normalize_dtype
from ._errors import ContractViolationError, DomainViolationError
from ._typing import is_writable, index_range

if TYPE_CHECKING:
    from ._typing import ContainerFactory

logger = logging.getLogger("flatvec.config")


# =============================================================================
# Global Configuration State
# =============================================================================

class _Config:
    """
    Global configuration singleton.

    Holds the construction hook, default dtype and comparison tolerance.
    """

    def __init__(self):
        self._factory: "ContainerFactory" = list_factory
        self._default_dtype = DType.float64
        self._epsilon = 1e-9

    @property
    def factory(self) -> "ContainerFactory":
        """Get the construction hook."""
        return self._factory

    @factory.setter
    def factory(self, value: Optional["ContainerFactory"]):
        """Set the construction hook (None restores the list backend)."""
        if value is None:
            value = list_factory
        if not callable(value):
            raise ContractViolationError(
                f"container factory must be callable, got {type(value).__name__}")
        self._factory = value
        logger.debug("Container factory set to %r", value)

    @property
    def default_dtype(self) -> DType:
        """Get default element type."""
        return self._default_dtype

    @default_dtype.setter
    def default_dtype(self, value: Union[DType, str, type]):
        """Set default element type."""
        self._default_dtype = normalize_dtype(value)

    @property
    def epsilon(self) -> float:
        """Get default tolerance for almost-equal comparisons."""
        return self._epsilon

    @epsilon.setter
    def epsilon(self, value: float):
        """Set default tolerance for almost-equal comparisons."""
        if not value >= 0:
            raise DomainViolationError(f"epsilon must be non-negative, got {value}")
        self._epsilon = float(value)

    @property
    def backend_name(self) -> str:
        """Name of the configured backend ('custom' for user factories)."""
        backend = backend_of(self._factory)
        return backend.value if backend is not None else 'custom'

    def reset(self) -> None:
        """Restore defaults."""
        self.__init__()

    def __repr__(self) -> str:
        return (f"Config(backend={self.backend_name!r}, "
                f"default_dtype={self._default_dtype.value!r}, "
                f"epsilon={self._epsilon!r})")


# Global config instance
_config = _Config()


# =============================================================================
# Public API
# =============================================================================

def get_config() -> _Config:
    """Get global configuration instance."""
    return _config


def set_factory(factory: Optional["ContainerFactory"]) -> None:
    """
    Set the process-wide construction hook.

    Args:
        factory: Callable ``(element_type, length) -> container``, or None
            for the default list backend
    """
    _config.factory = factory


def set_default_dtype(dtype: Union[DType, str, type]) -> None:
    """Set the element type assumed for empty containers."""
    _config.default_dtype = dtype


def set_epsilon(epsilon: float) -> None:
    """Set the default tolerance of the almost-equal kernels."""
    _config.epsilon = epsilon


def resolve_epsilon(eps: Optional[float]) -> float:
    """Return eps, or the configured default when None."""
    return _config.epsilon if eps is None else eps


def new_container(
    element_type: Union[DType, str, type],
    length: int,
    factory: Optional["ContainerFactory"] = None,
) -> Any:
    """
    Create a container through the construction hook.

    Args:
        element_type: Element type of the result
        length: Number of slots
        factory: Injected hook; the configured one is used when None

    Returns:
        Readable and Writable container with ``length`` valid indices

    Raises:
        ContractViolationError: If the hook returns something unusable
    """
    if factory is None:
        factory = _config.factory
    dtype = normalize_dtype(element_type)
    container = factory(dtype, length)

    if not is_writable(container) or len(index_range(container)) != length:
        raise ContractViolationError(
            f"container factory {factory!r} returned {type(container).__name__} "
            f"which is not a Writable container of length {length}")
    return container


__all__ = [
    "get_config",
    "set_factory",
    "set_default_dtype",
    "set_epsilon",
    "resolve_epsilon",
    "new_container",
]
