"""
Construction Hook Installation

Installs the strategy basic-form kernels use to materialize results.
A hook is any callable ``(element_type, length) -> container``; the
built-in backends (list, ctypes, numpy) are selectable by name.

Discipline:
- Install before running kernels, from a single thread
- Installing while kernels run on other threads is undefined
- Prefer ``using(...)`` or the per-call ``factory=`` keyword for scoped
  injection

Usage:
    import flatvec
    from flatvec import hooks

    hooks.install('numpy')            # built-in backend by name
    hooks.install(my_factory)         # custom strategy
    hooks.uninstall()                 # back to Python lists

    with hooks.using('ctypes'):
        result = flatvec.ops.add(a, b)

    # Select the backend before import
    import os
    os.environ['FLATVEC_BACKEND'] = 'numpy'
"""

import os
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Optional, Union

from ._backend import Backend, get_factory, backend_of
from ._config import get_config
from ._errors import ContractViolationError

logger = logging.getLogger("flatvec.hooks")

FactorySpec = Union[Backend, str, Callable[..., Any]]


# =============================================================================
# Feature Flags
# =============================================================================

def _env_backend() -> Optional[str]:
    """Backend requested through FLATVEC_BACKEND, if any."""
    value = os.environ.get('FLATVEC_BACKEND', '').strip().lower()
    return value or None


# =============================================================================
# Hook State Tracking
# =============================================================================

_hook_installed = False


def is_installed() -> bool:
    """Check if a non-default hook has been installed."""
    return _hook_installed


def _resolve(spec: FactorySpec) -> Callable[..., Any]:
    if isinstance(spec, (Backend, str)):
        try:
            return get_factory(spec)
        except ValueError:
            raise ContractViolationError(
                f"unknown backend {spec!r}, expected one of "
                f"{[b.value for b in Backend]}") from None
    if not callable(spec):
        raise ContractViolationError(
            f"factory must be a backend name or callable, got {type(spec).__name__}")
    return spec


# =============================================================================
# Install / Uninstall
# =============================================================================

def install(spec: FactorySpec) -> None:
    """
    Install a construction hook process-wide.

    Args:
        spec: Backend enum, backend name ('list', 'ctypes', 'numpy') or a
            callable ``(element_type, length) -> container``

    Raises:
        ContractViolationError: If spec is neither a known backend nor callable
    """
    global _hook_installed

    factory = _resolve(spec)
    config = get_config()
    if factory is config.factory:
        logger.debug("Container factory %r already installed, skipping", factory)
        return

    config.factory = factory
    _hook_installed = backend_of(factory) is not Backend.LIST
    logger.info("Installed container factory: %s", config.backend_name)


def uninstall() -> None:
    """Restore the default list backend."""
    global _hook_installed

    if not _hook_installed:
        logger.debug("No container factory installed, nothing to uninstall")
        return
    get_config().factory = None
    _hook_installed = False
    logger.info("Restored default container factory")


@contextmanager
def using(spec: FactorySpec) -> Iterator[Callable[..., Any]]:
    """
    Temporarily install a construction hook.

    Example:
        >>> with using('numpy') as factory:
        ...     ops.add([1, 2], [3, 4])
        array([4, 6])
    """
    global _hook_installed

    config = get_config()
    previous, previous_flag = config.factory, _hook_installed
    factory = _resolve(spec)
    config.factory = factory
    _hook_installed = backend_of(factory) is not Backend.LIST
    try:
        yield factory
    finally:
        config.factory = previous
        _hook_installed = previous_flag


def status() -> Dict[str, Any]:
    """
    Get construction hook status.

    Returns:
        Dict with the installed flag, backend name, factory and the
        FLATVEC_BACKEND request
    """
    config = get_config()
    return {
        'installed': _hook_installed,
        'backend': config.backend_name,
        'factory': config.factory,
        'env_backend': _env_backend(),
    }


def _auto_install() -> None:
    """Install the backend named by FLATVEC_BACKEND (called on import)."""
    requested = _env_backend()
    if requested is None:
        return
    try:
        install(requested)
    except ContractViolationError as e:
        logger.warning("Ignoring FLATVEC_BACKEND=%r: %s", requested, e)


__all__ = [
    'install',
    'uninstall',
    'using',
    'status',
    'is_installed',
]
