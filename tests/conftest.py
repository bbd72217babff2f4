"""Conftest for all pytest configuration - fixtures, hooks, and doctest setup."""

import doctest

import pytest

from structclone.serialization import TypeRegistry
from structclone.settings import get_global_settings
from structclone.settings import set_global_settings

# Doctest Configuration


def pytest_configure(config):
    """Configure pytest with custom doctest options."""
    doctest.ELLIPSIS_MARKER = "..."


def pytest_collection_modifyitems(items):
    """Automatically mark doctest items with the 'doctest' marker."""
    for item in items:
        if isinstance(item, pytest.DoctestItem):
            item.add_marker(pytest.mark.doctest)


# Fixtures


@pytest.fixture
def registry() -> TypeRegistry:
    """A fresh registry holding only the built-in pseudo-types."""
    return TypeRegistry()


@pytest.fixture(autouse=True)
def restore_global_settings():
    """Tests may swap the global settings; put the original instance back afterwards."""
    original = get_global_settings()
    yield
    set_global_settings(original)
