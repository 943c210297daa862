"""Custom exception hierarchy for the PAM client."""
from __future__ import annotations

from typing import Any


class PAMError(RuntimeError):
    """Base error for PAM client failures."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class AuthError(PAMError):
    """Raised when the identity tenant rejects the client-credentials grant."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        error_description: str | None = None,
        status_code: int | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.error_code = error_code
        self.error_description = error_description


class TransportError(PAMError):
    """Raised when a request cannot complete at the network or TLS level."""


class ParseError(PAMError):
    """Raised when a response body is not the JSON we expect."""


class ValidationError(PAMError, ValueError):
    """Raised when a caller-supplied query parameter is rejected."""

    def __init__(self, message: str, *, parameter: str, value: Any) -> None:
        super().__init__(message)
        self.parameter = parameter
        self.value = value


class RemoteError(PAMError):
    """Raised when the vault API answers with a status code of 300 or above.

    ``error_code`` and ``error_message`` carry the vendor payload untouched so
    callers can branch on it (for example, a safe that already exists).
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        error_code: str | None = None,
        error_message: str | None = None,
        details: Any | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code, details=details)
        self.error_code = error_code
        self.error_message = error_message
