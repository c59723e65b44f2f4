"""
Tests for construction hook installation and global configuration.
"""

import logging

import pytest
import numpy as np
from flatvec import (
    Array,
    Backend,
    hooks,
    ops,
    new_container,
    set_factory,
    set_default_dtype,
    set_epsilon,
    get_config,
    list_factory,
    numpy_factory,
    ContractViolationError,
    DomainViolationError,
)
from flatvec._backend import get_factory, backend_of, zero_value


class TestHooksInstallation:
    """Test install / uninstall."""

    def test_default_is_list(self):
        """Test lists are produced when nothing is installed."""
        assert not hooks.is_installed()
        assert hooks.status()['backend'] == 'list'
        assert isinstance(ops.zeros(2), list)

    def test_install_by_name(self):
        """Test installing a built-in backend by name."""
        hooks.install('numpy')
        assert hooks.is_installed()
        assert hooks.status()['backend'] == 'numpy'
        assert isinstance(ops.add([1.0], [2.0]), np.ndarray)

    def test_install_by_enum(self):
        """Test installing with the Backend enum."""
        hooks.install(Backend.CTYPES)
        assert get_config().factory is get_factory('ctypes')
        assert isinstance(ops.zeros(3), Array)

    def test_install_list_is_not_a_hook(self):
        """Test the list backend counts as the default."""
        hooks.install('list')
        assert not hooks.is_installed()

    def test_install_custom(self):
        """Test installing a user factory."""
        def factory(dtype, n):
            return [zero_value(dtype)] * n

        hooks.install(factory)
        assert hooks.is_installed()
        assert hooks.status()['backend'] == 'custom'
        assert hooks.status()['factory'] is factory

    def test_uninstall(self):
        """Test uninstall restores lists."""
        hooks.install('numpy')
        hooks.uninstall()
        assert not hooks.is_installed()
        assert get_config().factory is list_factory

    def test_install_invalid(self):
        """Test unknown names and non-callables are rejected."""
        with pytest.raises(ContractViolationError):
            hooks.install('cuda')
        with pytest.raises(ContractViolationError):
            hooks.install(42)
        assert not hooks.is_installed()


class TestUsing:
    """Test scoped installation."""

    def test_restores_previous(self):
        """Test the previous hook is restored on exit."""
        hooks.install('ctypes')
        with hooks.using('numpy') as factory:
            assert factory is numpy_factory
            assert hooks.status()['backend'] == 'numpy'
        assert hooks.status()['backend'] == 'ctypes'
        assert hooks.is_installed()

    def test_restores_on_error(self):
        """Test the hook is restored when the block raises."""
        with pytest.raises(RuntimeError):
            with hooks.using('numpy'):
                raise RuntimeError("boom")
        assert hooks.status()['backend'] == 'list'
        assert not hooks.is_installed()


class TestAutoInstall:
    """Test FLATVEC_BACKEND handling."""

    def test_env_backend(self, monkeypatch):
        """Test the environment variable selects a backend."""
        monkeypatch.setenv('FLATVEC_BACKEND', ' NumPy ')
        assert hooks.status()['env_backend'] == 'numpy'
        hooks._auto_install()
        assert hooks.status()['backend'] == 'numpy'

    def test_env_unset(self, monkeypatch):
        """Test nothing happens without the variable."""
        monkeypatch.delenv('FLATVEC_BACKEND', raising=False)
        hooks._auto_install()
        assert not hooks.is_installed()

    def test_env_invalid(self, monkeypatch, caplog):
        """Test an unknown backend is logged and ignored."""
        monkeypatch.setenv('FLATVEC_BACKEND', 'fortran')
        with caplog.at_level(logging.WARNING, logger='flatvec.hooks'):
            hooks._auto_install()
        assert not hooks.is_installed()
        assert "fortran" in caplog.text


class TestConfig:
    """Test global configuration."""

    def test_factory_setter(self):
        """Test set_factory validates and None restores lists."""
        set_factory(numpy_factory)
        assert get_config().backend_name == 'numpy'
        set_factory(None)
        assert get_config().factory is list_factory
        with pytest.raises(ContractViolationError):
            set_factory("numpy")

    def test_default_dtype(self):
        """Test the default dtype of zeros() and empty containers."""
        set_default_dtype('int32')
        with hooks.using('numpy'):
            assert ops.zeros(2).dtype == np.int32

    def test_epsilon(self):
        """Test the configured tolerance is used by almost-equal kernels."""
        assert not ops.all_almost_equal([1.0], [1.01])
        set_epsilon(0.1)
        assert ops.all_almost_equal([1.0], [1.01])
        with pytest.raises(DomainViolationError):
            set_epsilon(-1.0)

    def test_repr(self):
        """Test the config repr."""
        assert repr(get_config()) == "Config(backend='list', default_dtype='float64', epsilon=1e-09)"


class TestNewContainer:
    """Test container construction through the hook."""

    def test_backends(self):
        """Test each built-in backend's container."""
        assert new_container('int64', 2) == [0, 0]
        arr = new_container('float32', 3, get_factory('ctypes'))
        assert isinstance(arr, Array) and arr.dtype == 'float32'
        nd = new_container(bool, 2, numpy_factory)
        assert nd.dtype == np.bool_

    def test_rejects_bad_factory(self):
        """Test unusable factory results raise ContractViolationError."""
        with pytest.raises(ContractViolationError):
            new_container('float64', 3, lambda dtype, n: [0.0] * (n + 1))
        with pytest.raises(ContractViolationError):
            new_container('float64', 3, lambda dtype, n: (0.0,) * n)

    def test_backend_of(self):
        """Test mapping factories back to backends."""
        assert backend_of(list_factory) is Backend.LIST
        assert backend_of(lambda dtype, n: []) is None
