"""
Domain Exceptions

Domain layer errors. Every error carries a stable ``code`` so callers can
report it as a structured result.
"""

from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base domain error."""

    code = "domain_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class DomainValidationError(DomainException):
    """Field constraint violated (length, required, format)."""

    code = "validation_error"


class EntityNotFoundError(DomainException):
    """Article or comment id does not resolve."""

    code = "not_found"


class SlugCollisionError(DomainException):
    """Slug already taken by another article."""

    code = "slug_collision"

    def __init__(self, slug: str):
        super().__init__(f"Slug '{slug}' is already in use", {"slug": slug})
        self.slug = slug


class InvalidTransitionError(DomainException):
    """Status change not permitted from the current state."""

    code = "invalid_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot transition article from '{current}' to '{requested}'",
            {"current": current, "requested": requested},
        )
        self.current = current
        self.requested = requested


class CommentNotFoundError(DomainException):
    """Comment id does not resolve within the article."""

    code = "comment_not_found"

    def __init__(self, comment_id: Any):
        super().__init__(f"Comment {comment_id} not found", {"comment_id": str(comment_id)})
        self.comment_id = comment_id


class NotAuthorizedError(DomainException):
    """Role or ownership check failed."""

    code = "not_authorized"
