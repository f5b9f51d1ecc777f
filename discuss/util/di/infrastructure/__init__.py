"""Infrastructure providers."""

# Import bases
from .server import ServerProvider

# Import implementations (needed for __subclasses__())
from .server import ProdServerProvider  # noqa: F401

__all__ = [
    "ProdServerProvider",
    "ServerProvider",
]
