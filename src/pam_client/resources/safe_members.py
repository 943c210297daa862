"""Safe membership."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from .base import ResourceBase


class SafeMembersResource(ResourceBase):
    def add(self, safe_url_id: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Grant a user or group access to a safe.

        Args:
            safe_url_id: The ``safeUrlId`` returned when the safe was created.
            payload: Member definition, e.g. ``memberName``, ``searchIn``,
                ``memberType`` and a ``permissions`` object.
        """
        return self._post(f"/Safes/{quote_plus(safe_url_id)}/Members/", payload)
