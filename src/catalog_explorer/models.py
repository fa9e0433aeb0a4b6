"""
Catalog Models - Datasets, columns and lineage references.

Records are immutable once built. Optional source fields get explicit
defaults (empty string, empty set) so readers never need presence checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from catalog_explorer.errors import CatalogLoadError


def _string_list(value: Any, field_name: str) -> tuple[str, ...]:
    """Read a list of labels or names; a lone string counts as one entry."""
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise CatalogLoadError(
            f"Field {field_name!r} must be a list, got {type(value).__name__}"
        )
    return tuple(str(v) for v in value)


def _tag_set(values: Any) -> frozenset[str]:
    return frozenset(_string_list(values, "tags"))


def _require_mapping(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise CatalogLoadError(
            f"{kind} record must be a mapping, got {type(data).__name__}"
        )
    return data


def _column_records(data: Mapping[str, Any]) -> list[Any]:
    columns = data.get("columns") or []
    if not isinstance(columns, list):
        raise CatalogLoadError(
            f"Dataset {data.get('id')} columns must be a list",
            asset_id=data.get("id"),
        )
    return columns


@dataclass(frozen=True)
class Column:
    """Column of a dataset."""
    name: str
    type: str
    description: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Column":
        data = _require_mapping(data, "Column")
        if not data.get("name"):
            raise CatalogLoadError("Column record is missing required field 'name'")
        return cls(
            name=str(data["name"]),
            type=str(data.get("type") or ""),
            description=str(data.get("description") or ""),
            tags=_tag_set(data.get("tags")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "description": self.description,
            "tags": sorted(self.tags),
        }


@dataclass(frozen=True)
class Lineage:
    """
    Upstream and downstream dataset references.

    References are dataset names, not ids. A name that does not match any
    dataset in the catalog is a valid dangling reference.
    """
    upstream: tuple[str, ...] = ()
    downstream: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Lineage":
        data = _require_mapping(data or {}, "Lineage")
        return cls(
            upstream=_string_list(data.get("upstream"), "upstream"),
            downstream=_string_list(data.get("downstream"), "downstream"),
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "upstream": list(self.upstream),
            "downstream": list(self.downstream),
        }


@dataclass(frozen=True)
class Asset:
    """
    A cataloged dataset.

    The ``id`` is the lookup key and must be unique within a catalog.
    ``name`` is what users see and what lineage references point at.
    """
    id: str
    name: str
    domain: str = ""
    description: str = ""
    owner: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
    datasource: str = ""
    updated_at: str = ""
    columns: tuple[Column, ...] = ()
    lineage: Lineage = field(default_factory=Lineage)

    def __post_init__(self):
        if not self.id:
            raise CatalogLoadError("Dataset id must not be empty")
        if not self.name:
            raise CatalogLoadError(
                f"Dataset {self.id} has an empty name", asset_id=self.id
            )

        seen: set[str] = set()
        for column in self.columns:
            if column.name in seen:
                raise CatalogLoadError(
                    f"Dataset {self.id} has duplicate column {column.name!r}",
                    asset_id=self.id,
                )
            seen.add(column.name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Asset":
        """Build an asset from a seed record (camelCase or snake_case keys)."""
        data = _require_mapping(data, "Dataset")
        try:
            asset_id = data["id"]
            name = data["name"]
        except KeyError as e:
            raise CatalogLoadError(
                f"Dataset record is missing required field {e.args[0]!r}",
                asset_id=data.get("id"),
            ) from e

        return cls(
            id=str(asset_id or ""),
            name=str(name or ""),
            domain=str(data.get("domain") or ""),
            description=str(data.get("description") or ""),
            owner=str(data.get("owner") or ""),
            tags=_tag_set(data.get("tags")),
            datasource=str(data.get("datasource") or ""),
            updated_at=str(data.get("updatedAt", data.get("updated_at")) or ""),
            columns=tuple(Column.from_dict(c) for c in _column_records(data)),
            lineage=Lineage.from_dict(data.get("lineage")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "description": self.description,
            "owner": self.owner,
            "tags": sorted(self.tags),
            "datasource": self.datasource,
            "updatedAt": self.updated_at,
            "columns": [c.to_dict() for c in self.columns],
            "lineage": self.lineage.to_dict(),
        }

    def get_column(self, name: str) -> Column | None:
        """Get a column by name."""
        for column in self.columns:
            if column.name == name:
                return column
        return None
