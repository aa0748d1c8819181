"""
Value Object: Identity

Already-authenticated caller supplied by the authentication collaborator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable


class UserRole(str, Enum):
    """Caller roles."""

    USER = "user"
    AUTHOR = "author"
    MODERATOR = "moderator"
    ADMIN = "admin"


DEFAULT_MODERATOR_ROLES = (UserRole.ADMIN, UserRole.MODERATOR)


@dataclass(frozen=True)
class Identity:
    """Authenticated user attribution."""

    user_id: str
    role: UserRole = UserRole.USER

    def is_moderator(self, moderator_roles: Iterable[UserRole] = DEFAULT_MODERATOR_ROLES) -> bool:
        return self.role in tuple(moderator_roles)

    def owns(self, owner_id: str) -> bool:
        return str(self.user_id) == str(owner_id)
