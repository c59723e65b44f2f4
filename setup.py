"""
Setup script for flatvec

This setup.py is primarily for compatibility with tools that still invoke
it directly. The main configuration is in pyproject.toml.
"""

from setuptools import setup

# Configuration is in pyproject.toml
setup()
