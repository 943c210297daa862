"""High-level PAM vault client entrypoints."""
from .auth.platform_token import Session, SessionManager
from .client import PAMClient
from .config import ClientConfig
from .exceptions import (
    AuthError,
    PAMError,
    ParseError,
    RemoteError,
    TransportError,
    ValidationError,
)
from .query import ListQuery, build_query_string

__all__ = [
    "PAMClient",
    "ClientConfig",
    "Session",
    "SessionManager",
    "ListQuery",
    "build_query_string",
    "PAMError",
    "AuthError",
    "TransportError",
    "ParseError",
    "ValidationError",
    "RemoteError",
]
