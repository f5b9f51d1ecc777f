"""Submission checks run before anything is published to a cache."""

from discuss.domain.error import ValidationError
from discuss.domain.value import CommentBody


def validate_body(text: str, max_length: int) -> CommentBody:
    """Validate comment or reply text.

    Raises:
        ValidationError: If the text is blank or too long
    """
    try:
        return CommentBody.parse(text, max_length=max_length)
    except ValueError as e:
        raise ValidationError(
            f"Comment must contain between 1 and {max_length} characters"
        ) from e
