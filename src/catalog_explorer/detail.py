"""Detail projection of a single dataset for presentation."""

from __future__ import annotations

from dataclasses import dataclass

from catalog_explorer.models import Asset, Column
from catalog_explorer.store import CatalogStore


@dataclass(frozen=True)
class AssetDetail:
    """Everything a detail view shows for one dataset."""
    id: str
    name: str
    description: str
    owner: str
    domain: str
    updated_at: str
    datasource: str
    tags: tuple[str, ...]
    columns: tuple[Column, ...]

    @property
    def title(self) -> str:
        return f"{self.name} • 360"

    def column_summary(self) -> list[str]:
        """Column labels in ``name: type`` form, in table order."""
        return [f"{c.name}: {c.type}" for c in self.columns]

    def render(self) -> str:
        """Plain-text rendering used by the terminal front end."""
        lines = [
            self.title,
            self.description,
            "",
            f"Owner: {self.owner}",
            f"Domain: {self.domain}",
            f"Updated: {self.updated_at}",
        ]
        if self.datasource:
            lines.append(f"Source: {self.datasource}")
        if self.tags:
            lines.append(f"Tags: {', '.join(self.tags)}")
        lines.append("")
        lines.append("Columns:")
        lines.extend(f"  {label}" for label in self.column_summary())
        return "\n".join(lines)


def describe_asset(asset: Asset) -> AssetDetail:
    return AssetDetail(
        id=asset.id,
        name=asset.name,
        description=asset.description,
        owner=asset.owner,
        domain=asset.domain,
        updated_at=asset.updated_at,
        datasource=asset.datasource,
        tags=tuple(sorted(asset.tags)),
        columns=asset.columns,
    )


def resolve_detail(catalog: CatalogStore, asset_id: str) -> AssetDetail:
    """
    Look up a dataset and project its detail record.

    Raises:
        AssetNotFoundError: If no dataset has that id.
    """
    return describe_asset(catalog.get_asset(asset_id))
