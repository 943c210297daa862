"""Platform lookups."""

from __future__ import annotations

from typing import Any

from .base import ResourceBase


class PlatformsResource(ResourceBase):
    """Read the platforms accounts can be attached to."""

    def list(self) -> list[dict[str, Any]]:
        payload = self._get("/Platforms/") or {}
        return payload.get("Platforms") or []

    def get_by_id(self, platform_id: str) -> dict[str, Any] | None:
        for platform in self.list():
            general = platform.get("general") or {}
            if general.get("id") == platform_id:
                return platform
        return None
