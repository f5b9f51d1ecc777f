"""Display-layer contract for lesson discussions."""

from .facade import CommentThreadFacade, open_thread
from .view import ThreadNodeView, build_thread_view

__all__ = [
    "CommentThreadFacade",
    "ThreadNodeView",
    "build_thread_view",
    "open_thread",
]
