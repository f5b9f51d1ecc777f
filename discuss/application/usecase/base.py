"""Common shape of the application use cases."""

from abc import ABC, abstractmethod
from typing import Any


class BaseUseCase(ABC):
    """One user-facing operation on the discussion caches.

    Subclasses take a pydantic request model and return a response model.
    Mutating use cases drive their cache cell through ``run_optimistic``.
    """

    @abstractmethod
    async def execute(self, request: Any) -> Any:
        """Run the operation for ``request``."""
