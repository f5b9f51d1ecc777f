"""Repository implementations."""

from discuss.persistence.repository.inmemory import InMemoryCommentRepository

__all__ = [
    "InMemoryCommentRepository",
]
