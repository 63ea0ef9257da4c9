from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class OrganizationRole(str, Enum):
    OWNER = "org_owner"
    ADMIN = "org_admin"
    MEMBER = "org_member"


# Roles allowed to issue invitations
INVITER_ROLES: frozenset["OrganizationRole"] = frozenset(
    {OrganizationRole.OWNER, OrganizationRole.ADMIN}
)


class SystemRole(str, Enum):
    SYSTEM_OWNER = "system_owner"
    SYSTEM_ADMIN = "system_admin"
    SYSTEM_USER = "system_user"


class TodoPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ActionResult(BaseModel):
    """Success/failure envelope returned by every action.

    Failures carry a human-readable message only, never a structured code.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, message: str) -> "ActionResult":
        return cls(success=False, error=message)
