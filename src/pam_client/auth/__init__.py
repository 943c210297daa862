"""Authentication strategies for the PAM vault API."""
from .base import AuthStrategy
from .platform_token import Session, SessionManager

__all__ = ["AuthStrategy", "Session", "SessionManager"]
