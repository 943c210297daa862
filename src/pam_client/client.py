"""High-level PAM vault REST client."""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any
from urllib.parse import urljoin, urlparse

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .auth.base import AuthStrategy
from .auth.platform_token import Session, SessionManager
from .config import REQUEST_TIMEOUT, ClientConfig
from .exceptions import TransportError
from .http import send as http_send
from .http import to_envelope
from .resources import (
    AccountsResource,
    PlatformsResource,
    SafeMembersResource,
    SafesResource,
)


logger = logging.getLogger(__name__)


class PAMClient:
    """Wrap the PasswordVault REST endpoints with helper methods.

    The client owns one pooled ``requests.Session`` built from the TLS policy
    in ``config`` and reused for the token endpoint and every API call.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        session: requests.Session | None = None,
        auth_strategy: AuthStrategy | None = None,
    ) -> None:
        self.config = config
        self._suppress_insecure_warning_if_needed()
        self._session = session or requests.Session()
        self._auth = auth_strategy or SessionManager(config, http_session=self._session)
        self.safes = SafesResource(self)
        self.accounts = AccountsResource(self)
        self.platforms = PlatformsResource(self)
        self.safe_members = SafeMembersResource(self)

    # Context manager helpers -------------------------------------------------
    def __enter__(self) -> PAMClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - passthrough
        self.close()

    # Session -----------------------------------------------------------------
    @property
    def session(self) -> Session | None:
        """The current bearer session, or None before a successful refresh."""
        if isinstance(self._auth, SessionManager):
            return self._auth.current()
        return None

    def refresh_session(self) -> Session | None:
        """Fetch a new platform token, replacing the stored one.

        A failed refresh leaves no session behind and re-raises the error.
        """
        return self._auth.refresh()

    # Public API --------------------------------------------------------------
    def send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.Response:
        """Dispatch one authenticated request and return the raw response.

        Status codes are not interpreted and nothing is retried.

        Raises:
            TransportError: The request did not complete.
        """
        prepared = self._prepare_headers(headers)
        self._log_request(method, url)
        try:
            return http_send(
                self._session,
                method,
                url,
                params=params,
                headers=prepared,
                json_payload=json_payload,
                timeout=REQUEST_TIMEOUT,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            reason = str(exc).strip() or exc.__class__.__name__
            raise TransportError(
                f"Failed to communicate with PAM API: {reason}", details=reason
            ) from exc

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_payload: Mapping[str, Any] | None = None,
    ) -> Any:
        """Call an API path and return the decoded JSON body.

        Raises:
            RemoteError: The API answered with a status code of 300 or above.
            ParseError: The body is not JSON.
        """
        url = self._resolve_url(path)
        response = self.send(method, url, params=params, json_payload=json_payload)
        return to_envelope(response).data

    def close(self) -> None:
        self._session.close()

    # Internal helpers -------------------------------------------------------
    def _resolve_url(self, path: str) -> str:
        parsed = urlparse(path)
        if parsed.scheme and parsed.netloc:
            return path
        return urljoin(f"{self.config.api_url}/", path.lstrip("/"))

    def _prepare_headers(self, extra: Mapping[str, str] | None) -> MutableMapping[str, str]:
        headers = self.config.resolved_headers()
        if extra:
            headers.update(extra)
        self._auth.apply(headers)
        return headers

    def _log_request(self, method: str, url: str) -> None:
        logger.info("PAM request %s %s", method.upper(), url)

    def _suppress_insecure_warning_if_needed(self) -> None:
        if self.config.tls_skip_verify:
            urllib3.disable_warnings(InsecureRequestWarning)
