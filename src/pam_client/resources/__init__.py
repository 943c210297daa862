"""Resource-specific convenience wrappers."""
from .accounts import AccountsResource
from .platforms import PlatformsResource
from .safe_members import SafeMembersResource
from .safes import SafesResource

__all__ = [
    "AccountsResource",
    "PlatformsResource",
    "SafeMembersResource",
    "SafesResource",
]
