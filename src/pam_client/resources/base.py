"""Common helpers for resource wrappers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - import-time guard
    from ..client import PAMClient


class ResourceBase:
    """Provide shared helpers for resource modules."""

    def __init__(self, client: PAMClient) -> None:
        self._client = client

    def _get(self, path: str, *, params: Mapping[str, str] | None = None) -> Any:
        return self._client.request("GET", path, params=params)

    def _post(self, path: str, payload: Mapping[str, Any]) -> Any:
        return self._client.request("POST", path, json_payload=payload)
