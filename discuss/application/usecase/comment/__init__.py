"""Comment use cases."""

from .get_comments import GetCommentsRequest, GetCommentsResponse, GetCommentsUseCase
from .post_comment import PostCommentRequest, PostCommentResponse, PostCommentUseCase
from .post_reply import PostReplyRequest, PostReplyResponse, PostReplyUseCase

__all__ = [
    "GetCommentsRequest",
    "GetCommentsResponse",
    "GetCommentsUseCase",
    "PostCommentRequest",
    "PostCommentResponse",
    "PostCommentUseCase",
    "PostReplyRequest",
    "PostReplyResponse",
    "PostReplyUseCase",
]
