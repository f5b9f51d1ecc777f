"""Academy API adapter."""

from .client import HttpCommentRepository

__all__ = ["HttpCommentRepository"]
