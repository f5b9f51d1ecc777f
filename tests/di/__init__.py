"""Mock providers for testing."""

from .server import MockServerProvider
from .container import build_test_container

__all__ = [
    "MockServerProvider",
    "build_test_container",
]
