"""Strongly typed identifiers for discussion entities.

Identifiers are opaque strings assigned by the server. Before a node is
confirmed the client holds a provisional id (see ``new_provisional_id``).
"""

from typing import NewType
from uuid import uuid4

LessonId = NewType("LessonId", str)
CourseId = NewType("CourseId", str)
CommentId = NewType("CommentId", str)
ReplyId = NewType("ReplyId", str)
UserId = NewType("UserId", str)

PROVISIONAL_PREFIX = "temp-"


def new_provisional_id() -> str:
    """Generate a locally unique id for a node not yet confirmed by the server."""
    return f"{PROVISIONAL_PREFIX}{uuid4()}"


def is_provisional(node_id: str) -> bool:
    """Whether an id was fabricated locally."""
    return node_id.startswith(PROVISIONAL_PREFIX)
