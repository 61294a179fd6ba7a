import pytest
from ldglob import MemoryTransport

pytest_plugins = ["ldglob._pytest_plugin"]


@pytest.fixture
def mem() -> MemoryTransport:
    """An empty MemoryTransport rooted at https://pod.example."""
    return MemoryTransport("https://pod.example")
