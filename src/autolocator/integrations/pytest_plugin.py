"""Pytest fixtures for suites that wire their code through a ``ServiceLocator``.

Enable the plugin from a ``conftest.py``:

.. code-block:: python

    pytest_plugins = ["autolocator.integrations.pytest_plugin"]

"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from autolocator.locator import ServiceLocator


@pytest.fixture()
def autolocator() -> Iterator[ServiceLocator]:
    """Create a per-test locator that tolerates reassignment.

    Tests commonly replace registrations with fakes, so ``allow_reassignment``
    is enabled. The locator is reset on teardown, which drops every entry and
    in-flight bookkeeping created by the test.

    Override this fixture to pre-register shared fakes for a whole module.

    Yields:
        A new ``ServiceLocator`` instance.

    """
    locator = ServiceLocator(allow_reassignment=True)
    try:
        yield locator
    finally:
        locator.reset()
