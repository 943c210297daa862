"""OAuth2 client-credentials sessions issued by the identity tenant."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, MutableMapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

import requests

from ..config import REQUEST_TIMEOUT, ClientConfig
from ..exceptions import AuthError, PAMError, ParseError, TransportError
from ..http import send as http_send
from .base import AuthStrategy

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class Session:
    """A bearer credential set. Replaced as a whole, never patched."""

    token: str = field(repr=False)
    token_type: str
    expiration: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        # Informational; nothing in the client consults it before reuse.
        return (now or _utcnow()) >= self.expiration

    @property
    def authorization(self) -> str:
        return f"{self.token_type} {self.token}"


class SessionManager(AuthStrategy):
    """Acquire platform tokens and hold the current session.

    Reads and writes of the session go through a lock, so one client can be
    shared between threads that refresh and send concurrently. Nothing is
    refreshed automatically: callers invoke :meth:`refresh` themselves.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        http_session: requests.Session | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config
        self._http = http_session or requests.Session()
        self._clock = clock
        self._lock = threading.Lock()
        self._session: Session | None = None

    def current(self) -> Session | None:
        with self._lock:
            return self._session

    def replace(self, session: Session | None) -> None:
        with self._lock:
            self._session = session

    def apply(self, headers: MutableMapping[str, str]) -> None:
        session = self.current()
        if session is not None and session.token:
            headers["Authorization"] = session.authorization

    def acquire(self) -> Session:
        """Run the client-credentials grant and return a new session.

        Raises:
            AuthError: The tenant answered with an ``error`` field or a
                status code of 300 or above.
            TransportError: The token request did not complete.
            ParseError: The body is not a token document.
        """
        form = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
        }
        try:
            response = http_send(
                self._http,
                "POST",
                self._config.token_url,
                headers={
                    "Accept": "application/json",
                    "Content-Type": "application/x-www-form-urlencoded",
                },
                data_payload=form,
                timeout=REQUEST_TIMEOUT,
                verify=self._config.verify_ssl,
            )
        except requests.RequestException as exc:
            reason = str(exc).strip() or exc.__class__.__name__
            raise TransportError(
                f"Failed to request platform token: {reason}", details=reason
            ) from exc

        try:
            payload = self._decode(response)
        except ParseError:
            if response.status_code < 300:
                raise
            raise AuthError(
                f"failed to get session token: {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            ) from None
        error = payload.get("error")
        if error:
            description = payload.get("error_description") or ""
            raise AuthError(
                f"error getting token: ({error}) {description}".rstrip(),
                error_code=str(error),
                error_description=str(description),
                status_code=response.status_code,
                details=payload,
            )
        if response.status_code >= 300:
            raise AuthError(
                f"failed to get session token: {response.status_code}",
                status_code=response.status_code,
                details=response.text,
            )

        token = payload.get("access_token")
        token_type = payload.get("token_type")
        expires_in = payload.get("expires_in")
        if not isinstance(token, str) or not isinstance(token_type, str):
            raise ParseError(
                "Platform token response is missing access_token or token_type",
                status_code=response.status_code,
            )
        if isinstance(expires_in, bool) or not isinstance(expires_in, int):
            raise ParseError(
                f"Platform token response has invalid expires_in: {expires_in!r}",
                status_code=response.status_code,
            )
        return Session(
            token=token,
            token_type=token_type,
            expiration=self._clock() + timedelta(seconds=expires_in),
        )

    def refresh(self) -> Session:
        """Acquire a session and store it, clearing the slot on failure."""
        try:
            session = self.acquire()
        except PAMError as exc:
            self.replace(None)
            logger.warning("Platform token refresh failed: %s", exc)
            raise
        self.replace(session)
        logger.info(
            "Platform token refreshed (token_type=%s, expires=%s)",
            session.token_type,
            session.expiration.isoformat(),
        )
        return session

    @staticmethod
    def _decode(response: requests.Response) -> Mapping[str, object]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError(
                f"Failed to parse platform token response: {response.text[:200]}",
                status_code=response.status_code,
                details=response.text,
            ) from exc
        if not isinstance(payload, Mapping):
            raise ParseError(
                "Platform token response is not a JSON object",
                status_code=response.status_code,
                details=payload,
            )
        return payload
