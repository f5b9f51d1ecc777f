"""Repository interfaces (ports) for the domain layer."""

from discuss.domain.repository.comment import CommentRepository

__all__ = [
    "CommentRepository",
]
