"""Domain value objects for lesson discussions.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

from enum import Enum

from pydantic import Field, computed_field, field_validator

from discuss.domain.value.common import RootValueObject, ValueObject
from discuss.domain.value.identifiers import CommentId, ReplyId

DEFAULT_MAX_BODY_LENGTH = 800


class ModerationStatus(str, Enum):
    """Approval state of a comment or reply."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ModerationAction(str, Enum):
    """Action a moderator can take on a node."""

    APPROVE = "approve"
    REJECT = "reject"

    @property
    def target_status(self) -> ModerationStatus:
        """Status the node ends up in after this action."""
        if self is ModerationAction.APPROVE:
            return ModerationStatus.APPROVED
        return ModerationStatus.REJECTED


class ModerationEntityType(str, Enum):
    """Kind of node a moderation queue row refers to."""

    COMMENT = "comment"
    REPLY = "reply"


class CommentBody(RootValueObject[str]):
    """Text submitted for a comment or reply.

    Surrounding whitespace is stripped and the result must be non-empty.
    The length limit is a form-layer setting, applied through ``parse``.
    """

    @field_validator("root")
    @classmethod
    def validate_body(cls, v: str) -> str:
        """Validate body is not blank."""
        v = v.strip()
        if not v:
            raise ValueError("Comment body must not be empty")
        return v

    @classmethod
    def parse(
        cls, text: str, max_length: int = DEFAULT_MAX_BODY_LENGTH
    ) -> "CommentBody":
        """Build a body enforcing a length limit.

        Raises:
            ValueError: If the text is blank or longer than ``max_length``
        """
        body = cls(text)
        if len(body.root) > max_length:
            raise ValueError(f"Comment body must be at most {max_length} characters")
        return body


class ModerationTarget(ValueObject):
    """Identifies the node a moderation action applies to.

    The root comment when ``reply_id`` is absent, otherwise the specific reply.
    """

    comment_id: CommentId
    reply_id: ReplyId | None = None

    @computed_field
    @property
    def type(self) -> ModerationEntityType:
        """Entity type derived from the presence of a reply id."""
        if self.reply_id is None:
            return ModerationEntityType.COMMENT
        return ModerationEntityType.REPLY

    @property
    def entity_id(self) -> str:
        """Id of the node itself."""
        return self.reply_id if self.reply_id is not None else self.comment_id


class ModerationFilters(ValueObject):
    """Filters for the server-side moderation listing."""

    status: ModerationStatus = ModerationStatus.PENDING
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: ModerationStatus) -> ModerationStatus:
        """Only pending and rejected nodes are listed for review."""
        if v is ModerationStatus.APPROVED:
            raise ValueError("Moderation listing supports pending or rejected only")
        return v
