"""
Catalog Store

Holds the fixed set of datasets for the lifetime of the process. The store
is populated once at construction and never mutated afterwards, so any
number of readers can share it without locking.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

import yaml
from opentelemetry import trace

from catalog_explorer import __version__
from catalog_explorer.errors import AssetNotFoundError, CatalogLoadError
from catalog_explorer.models import Asset

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("catalog_explorer.store", __version__)


# Seed catalog loaded when no seed file is configured
SEED_DATASETS: list[dict[str, Any]] = [
    {
        "id": "sales_orders_v1",
        "name": "sales_orders",
        "domain": "sales",
        "description": (
            "Orders placed on the web store. Includes order amounts, "
            "payment status, and customer references."
        ),
        "owner": "data.sales@company.com",
        "tags": ["gold", "pci-scope"],
        "datasource": "postgres://warehouse/sales",
        "updatedAt": "2025-08-15",
        "columns": [
            {"name": "order_id", "type": "uuid", "description": "Primary key."},
            {"name": "customer_id", "type": "uuid"},
            {
                "name": "email",
                "type": "text",
                "tags": ["pii", "contact"],
                "description": "Customer email."
            },
            {"name": "amount", "type": "numeric", "description": "Order amount in INR."},
            {"name": "payment_status", "type": "text", "tags": ["pci"]},
            {"name": "created_at", "type": "timestamptz"},
        ],
        "lineage": {
            "upstream": ["raw_events"],
            "downstream": ["sales_kpi_daily", "marketing_attribution"],
        },
    },
    {
        "id": "customers_v2",
        "name": "customers",
        "domain": "sales",
        "description": "Customer master. One row per user.",
        "owner": "data.crm@company.com",
        "tags": ["silver", "pii"],
        "datasource": "s3://datalake/curated/customers/",
        "updatedAt": "2025-08-04",
        "columns": [
            {"name": "customer_id", "type": "uuid"},
            {
                "name": "full_name",
                "type": "text",
                "tags": ["pii"],
                "description": "User full name."
            },
            {"name": "email", "type": "text", "tags": ["pii", "contact"]},
            {"name": "phone", "type": "text", "tags": ["pii", "contact"]},
            {"name": "signup_dt", "type": "date"},
            {"name": "segment", "type": "text", "tags": ["ml-feature"]},
        ],
        "lineage": {
            "upstream": ["crm_export"],
            "downstream": ["sales_orders", "marketing_attribution"],
        },
    },
]


class CatalogStore:
    """
    Read-only collection of datasets.

    Datasets keep their construction order, which is the order every
    listing and search result is reported in.
    """

    def __init__(self, assets: Iterable[Asset]) -> None:
        """
        Initialize the CatalogStore.

        Args:
            assets: Datasets in the order they should be listed.

        Raises:
            CatalogLoadError: If two datasets share an id.
        """
        ordered = tuple(assets)
        index: dict[str, Asset] = {}
        for asset in ordered:
            if asset.id in index:
                raise CatalogLoadError(
                    f"Duplicate dataset id: {asset.id}", asset_id=asset.id
                )
            index[asset.id] = asset

        self._assets = ordered
        self._index = index
        logger.info(
            "CatalogStore initialized",
            extra={"catalog_size": len(self._assets)}
        )

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "CatalogStore":
        """Build a store from seed records."""
        return cls(Asset.from_dict(record) for record in records)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> "CatalogStore":
        """
        Build a store from a YAML document.

        The document must have a top-level ``datasets`` list whose entries
        use the same shape as ``SEED_DATASETS``.
        """
        try:
            data = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as e:
            raise CatalogLoadError(f"Invalid catalog YAML: {e}") from e

        datasets = data.get("datasets") if isinstance(data, dict) else None
        if not isinstance(datasets, list):
            raise CatalogLoadError("Catalog YAML must contain a 'datasets' list")
        return cls.from_records(datasets)

    @classmethod
    def from_yaml_file(cls, file_path: str | Path) -> "CatalogStore":
        """Load a store from a YAML seed file."""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = f.read()
        except OSError as e:
            raise CatalogLoadError(f"Cannot read catalog file {file_path}: {e}") from e

        logger.info("Loading catalog seed file", extra={"path": str(file_path)})
        return cls.from_yaml(content)

    def all_assets(self) -> tuple[Asset, ...]:
        """Return every dataset in construction order."""
        return self._assets

    def get_asset(self, asset_id: str) -> Asset:
        """
        Look up a dataset by id.

        Args:
            asset_id: The exact dataset id.

        Returns:
            The dataset with that id.

        Raises:
            AssetNotFoundError: If no dataset has that id.
        """
        with tracer.start_as_current_span("get_asset") as span:
            span.set_attribute("asset_id", asset_id)

            asset = self._index.get(asset_id)
            if asset is None:
                logger.debug("Dataset not found", extra={"asset_id": asset_id})
                raise AssetNotFoundError(asset_id)
            return asset

    def find_by_name(self, name: str) -> Asset | None:
        """Return the first dataset with the given name, or None."""
        for asset in self._assets:
            if asset.name == name:
                return asset
        return None

    def list_ids(self) -> list[str]:
        return [asset.id for asset in self._assets]

    def __len__(self) -> int:
        return len(self._assets)

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._index

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets)


_default_store: CatalogStore | None = None


def default_store() -> CatalogStore:
    """Return the process-wide store built from ``SEED_DATASETS``."""
    global _default_store
    if _default_store is None:
        _default_store = CatalogStore.from_records(SEED_DATASETS)
    return _default_store
