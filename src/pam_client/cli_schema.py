"""Schema describing important fields for CLI table rendering."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

Row = Mapping[str, Any]
ValueExtractor = Callable[[Row], Any]
ValueFormatter = Callable[[Any], str]
SortKey = Callable[[Row], Any]


@dataclass(frozen=True)
class Column:
    """Describe how to pull and format a column for Rich tables."""

    header: str
    keys: tuple[str, ...] = ()
    extractor: ValueExtractor | None = None
    formatter: ValueFormatter | None = None
    justify: str = "left"

    def render(self, row: Row) -> str:
        value: Any | None = None
        if self.keys:
            for key in self.keys:
                if key in row:
                    value = row.get(key)
                    if value is not None:
                        break
        if value is None and self.extractor:
            value = self.extractor(row)
        if value is None:
            return ""
        if self.formatter:
            formatted = self.formatter(value)
            return "" if formatted is None else str(formatted)
        return str(value)


@dataclass(frozen=True)
class TableView:
    """Describe a Rich table for a CLI command."""

    title: str
    columns: tuple[Column, ...]
    sort_key: SortKey | None = None


def _bool_formatter(value: Any) -> str:
    if value is None:
        return ""
    return "Yes" if bool(value) else "No"


def _nested(section: str, key: str) -> ValueExtractor:
    def _extractor(row: Row) -> Any:
        value = row.get(section)
        if isinstance(value, Mapping):
            return value.get(key)
        return None

    return _extractor


def _property_names(kind: str) -> ValueExtractor:
    def _extractor(row: Row) -> Any:
        properties = row.get("properties")
        if not isinstance(properties, Mapping):
            return None
        entries = properties.get(kind) or []
        return ", ".join(
            str(entry.get("name")) for entry in entries if isinstance(entry, Mapping)
        )

    return _extractor


CLI_TABLE_VIEWS: dict[str, TableView] = {
    "accounts.list": TableView(
        title="Accounts",
        columns=(
            Column("Name", keys=("name",)),
            Column("Id", keys=("id",)),
            Column("Safe", keys=("safeName",)),
            Column("Platform", keys=("platformId",)),
            Column("User", keys=("userName",)),
            Column("Address", keys=("address",)),
            Column(
                "Auto Mgmt",
                extractor=_nested("secretManagement", "automaticManagementEnabled"),
                formatter=_bool_formatter,
                justify="center",
            ),
        ),
        sort_key=lambda row: str(row.get("name") or "").lower(),
    ),
    "platforms.list": TableView(
        title="Platforms",
        columns=(
            Column("Platform Id", extractor=_nested("general", "id")),
            Column("Name", extractor=_nested("general", "name")),
            Column("System Type", extractor=_nested("general", "systemType")),
            Column(
                "Active",
                extractor=_nested("general", "active"),
                formatter=_bool_formatter,
                justify="center",
            ),
            Column("Required", extractor=_property_names("required")),
            Column("Optional", extractor=_property_names("optional")),
        ),
        sort_key=lambda row: str((row.get("general") or {}).get("id") or "").lower(),
    ),
}
