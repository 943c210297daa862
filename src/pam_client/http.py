"""HTTP utilities for PAM API access."""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any

from requests import Response, Session

from .exceptions import ParseError, RemoteError


@dataclass(slots=True)
class HttpResponse:
    """Typed response wrapper with helper accessors."""

    status_code: int
    data: Any
    headers: Mapping[str, str]


def vendor_error(payload: Any) -> tuple[str | None, str | None]:
    """Pull ``ErrorCode``/``ErrorMessage`` out of a vault error body."""

    if not isinstance(payload, Mapping):
        return None, None
    code = payload.get("ErrorCode")
    message = payload.get("ErrorMessage")
    return (
        str(code) if code is not None else None,
        str(message) if message is not None else None,
    )


def ensure_success(response: Response) -> None:
    """Raise `RemoteError` if the response signals a failure."""

    if response.status_code < 300:
        return
    try:
        payload = response.json()
    except ValueError:
        payload = None
    error_code, error_message = vendor_error(payload)
    if error_code or error_message:
        message = f"PAM API error {response.status_code}: {error_code}: {error_message}"
    else:
        message = f"PAM API error {response.status_code}: {response.text[:200]}"
    raise RemoteError(
        message,
        status_code=response.status_code,
        error_code=error_code,
        error_message=error_message,
        details=response.text,
    )


def parse_json(response: Response) -> Any:
    """Parse JSON with helpful error context."""

    try:
        return response.json()
    except ValueError as exc:
        raise ParseError(
            f"Response format failed to parse: {response.text[:200]}",
            status_code=response.status_code,
            details=response.text,
        ) from exc


def send(
    session: Session,
    method: str,
    url: str,
    *,
    params: Mapping[str, str] | None = None,
    headers: MutableMapping[str, str] | None = None,
    json_payload: Mapping[str, Any] | None = None,
    data_payload: Any | None = None,
    timeout: float | tuple[float, float] | None = None,
    verify: bool = True,
) -> Response:
    """Execute a request and hand back the untouched response."""

    return session.request(
        method=method,
        url=url,
        params=params,
        headers=headers,
        json=json_payload,
        data=data_payload,
        timeout=timeout,
        verify=verify,
    )


def to_envelope(response: Response) -> HttpResponse:
    """Check the status and decode the body of a vault API response."""

    ensure_success(response)
    data: Any = None
    if response.content:
        data = parse_json(response)
    return HttpResponse(status_code=response.status_code, data=data, headers=response.headers)
