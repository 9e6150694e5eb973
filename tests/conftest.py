"""Shared pytest fixtures for autolocator tests."""

import pytest

from autolocator import ServiceLocator


@pytest.fixture()
def locator() -> ServiceLocator:
    """Default locator with reassignment disabled."""
    return ServiceLocator()


@pytest.fixture()
def reassigning_locator() -> ServiceLocator:
    """Locator that allows registering the same identity again."""
    return ServiceLocator(allow_reassignment=True)
