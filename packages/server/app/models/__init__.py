# SQLModel definitions, imported here to ensure metadata is populated for create_all.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .organization import Organization  # noqa: F401
from .user import User, UserProfile  # noqa: F401
from .membership import OrganizationMembership  # noqa: F401
from .invitation import Invitation  # noqa: F401
from .todo import Todo  # noqa: F401
from .audit_log import AuditLog  # noqa: F401
