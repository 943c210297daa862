"""Validation and encoding of list-endpoint query parameters."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from urllib.parse import quote_plus

from .exceptions import ValidationError

SEARCH_TYPES = ("contains", "startswith")
FILTER_FIELDS = ("safeName", "modificationTime", "secretModificationTime")
SAVED_FILTERS = (
    "Regular",
    "Recently",
    "New",
    "Link",
    "Deleted",
    "PolicyFailures",
    "AccessedByUsers",
    "ModifiedByUsers",
    "ModifiedByCPM",
    "DisabledPasswordByUser",
    "DisabledPasswordByCPM",
    "ScheduledForChange",
    "ScheduledForVerify",
    "ScheduledForReconcile",
    "SuccessfullyReconciled",
    "FailedChange",
    "FailedVerify",
    "FailedReconcile",
    "LockedOrNew",
    "Locked",
    "Favorites",
    "DeleteInsightStatus",
)
MAX_LIMIT = 1000
# ASCII digits only, as the vault parses them
_INTEGER = re.compile(r"[+-]?[0-9]+")

# python attribute -> wire key
WIRE_KEYS = {
    "search": "search",
    "search_type": "searchType",
    "sort": "sort",
    "filter": "filter",
    "saved_filter": "savedfilter",
    "offset": "offset",
    "limit": "limit",
}


def _parse_int(parameter: str, value: int | str) -> int:
    if isinstance(value, bool):
        raise ValidationError(
            f"{parameter} is not a number, got {value!r}", parameter=parameter, value=value
        )
    if isinstance(value, int):
        return value
    if not isinstance(value, str) or not _INTEGER.fullmatch(value):
        raise ValidationError(
            f"{parameter} is not a number, got {value!r}", parameter=parameter, value=value
        )
    return int(value)


@dataclass(slots=True)
class ListQuery:
    """Optional parameters accepted by collection endpoints.

    ``None`` means the parameter is absent. ``search`` and ``sort`` are sent
    as given; everything else is checked by :meth:`validate`.
    """

    search: str | None = None
    search_type: str | None = None
    sort: str | None = None
    filter: str | None = None
    saved_filter: str | None = None
    offset: int | str | None = None
    limit: int | str | None = None

    def validate(self) -> None:
        if self.search_type is not None and self.search_type not in SEARCH_TYPES:
            raise ValidationError(
                f"invalid searchType: {self.search_type}, must be 'contains' or 'startswith'",
                parameter="searchType",
                value=self.search_type,
            )
        if self.filter is not None and not any(name in self.filter for name in FILTER_FIELDS):
            raise ValidationError(
                f"invalid filter: {self.filter}, must contain one of: {', '.join(FILTER_FIELDS)}",
                parameter="filter",
                value=self.filter,
            )
        if self.saved_filter is not None and self.saved_filter not in SAVED_FILTERS:
            raise ValidationError(
                f"invalid savedfilter: {self.saved_filter}, must be one of: "
                f"{', '.join(SAVED_FILTERS)}",
                parameter="savedfilter",
                value=self.saved_filter,
            )
        if self.offset is not None:
            offset = _parse_int("offset", self.offset)
            if offset < 0:
                raise ValidationError(
                    f"offset must not be negative, got {self.offset}",
                    parameter="offset",
                    value=self.offset,
                )
        if self.limit is not None:
            limit = _parse_int("limit", self.limit)
            if not 0 <= limit <= MAX_LIMIT:
                raise ValidationError(
                    f"limit valid range is 0 - {MAX_LIMIT}, got {self.limit}",
                    parameter="limit",
                    value=self.limit,
                )

    def to_params(self) -> dict[str, str]:
        """Validate and return the present parameters keyed by wire name."""
        self.validate()
        params: dict[str, str] = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if value is None:
                continue
            params[WIRE_KEYS[item.name]] = str(value)
        return params

    def to_query_string(self) -> str:
        params = self.to_params()
        if not params:
            return ""
        return "?" + "&".join(f"{key}={quote_plus(value)}" for key, value in params.items())


def build_query_string(
    *,
    search: str | None = None,
    search_type: str | None = None,
    sort: str | None = None,
    filter: str | None = None,
    saved_filter: str | None = None,
    offset: int | str | None = None,
    limit: int | str | None = None,
) -> str:
    """Return ``?key=value&...`` for the given parameters, or ``""``.

    Raises:
        ValidationError: A parameter failed validation. Nothing is encoded.
    """
    return ListQuery(
        search=search,
        search_type=search_type,
        sort=sort,
        filter=filter,
        saved_filter=saved_filter,
        offset=offset,
        limit=limit,
    ).to_query_string()
