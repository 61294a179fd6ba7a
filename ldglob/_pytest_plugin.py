"""pytest fixture plugin.

Usage::

    # conftest.py
    pytest_plugins = ["ldglob._pytest_plugin"]

This makes the ``memory_transport`` fixture automatically available::

    async def test_something(memory_transport):
        memory_transport.put("/notes/a.ttl", "<#a> <#b> <#c> .")
"""

import pytest

from ._memory import MemoryTransport


@pytest.fixture
def memory_transport() -> MemoryTransport:
    """An empty :class:`MemoryTransport` rooted at ``https://pod.example``.

    Provides an independent instance per test (function scope).
    """
    return MemoryTransport()
