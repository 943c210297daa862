"""Account operations."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from ..query import build_query_string
from .base import ResourceBase


class AccountsResource(ResourceBase):
    """Work with privileged accounts stored in safes."""

    def list(
        self,
        *,
        search: str | None = None,
        search_type: str | None = None,
        sort: str | None = None,
        filter: str | None = None,
        saved_filter: str | None = None,
        offset: int | str | None = None,
        limit: int | str | None = None,
    ) -> dict[str, Any]:
        """List accounts matching the given query.

        The parameters are validated before any request is sent, so a bad
        ``limit`` or ``search_type`` raises `ValidationError` without I/O.

        Returns:
            The API envelope: ``{"value": [...], "count": n}``.
        """
        query = build_query_string(
            search=search,
            search_type=search_type,
            sort=sort,
            filter=filter,
            saved_filter=saved_filter,
            offset=offset,
            limit=limit,
        )
        return self._get(f"/Accounts{query}") or {"value": [], "count": 0}

    def get(self, account_id: str) -> dict[str, Any]:
        return self._get(f"/Accounts/{quote_plus(account_id)}")

    def add(self, payload: Mapping[str, Any]) -> dict[str, Any]:
        """Add an account to a safe.

        Args:
            payload: Account definition; ``safeName`` and ``platformId`` are
                required. ``secretManagement``, ``platformAccountProperties``
                and ``remoteMachinesAccess`` are passed through as nested
                objects.
        """
        missing = [key for key in ("safeName", "platformId") if not payload.get(key)]
        if missing:
            raise ValueError(f"Missing required account fields: {', '.join(missing)}")
        return self._post("/Accounts/", payload)
