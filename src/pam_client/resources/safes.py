"""Safe operations."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from ..exceptions import RemoteError
from .base import ResourceBase

logger = logging.getLogger(__name__)

SAFE_EXISTS_CODE = "SFWS0002"


class SafesResource(ResourceBase):
    """Create and inspect vault safes."""

    def get(self, safe_name: str) -> dict[str, Any]:
        return self._get(f"/Safes/{quote_plus(safe_name)}")

    def add(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Create a safe.

        Args:
            payload: Safe definition; ``safeName`` is required. Common keys are
                ``description``, ``location``, ``numberOfDaysRetention``,
                ``numberOfVersionsRetention``, ``oLACEnabled``,
                ``autoPurgeEnabled`` and ``managingCPM``.
        """
        if not payload.get("safeName"):
            raise ValueError("safeName is required to add a safe.")
        return self._post("/Safes/", payload)

    def get_or_add(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Create a safe, or return the existing one if the name is taken."""
        try:
            return self.add(payload)
        except RemoteError as exc:
            if exc.error_code != SAFE_EXISTS_CODE:
                raise
            logger.info("Safe %s already exists; fetching details", payload["safeName"])
            return self.get(str(payload["safeName"]))
