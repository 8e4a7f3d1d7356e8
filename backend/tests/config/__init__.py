"""
Test configuration package initialization.

Exports the marker hooks so conftest.py can register them.
"""

from .markers import pytest_collection_modifyitems, pytest_configure

__all__ = [
    "pytest_configure",
    "pytest_collection_modifyitems",
]
