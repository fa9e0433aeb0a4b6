"""
Catalog Explorer

In-memory metadata catalog for datasets, with keyword search, detail
resolution and name-based lineage lookup.

Capabilities:
- catalog.list: Lists every dataset in catalog order
- catalog.search: Keyword search over dataset name, description and owner
- catalog.get: Resolves a dataset id to its full record
- catalog.lineage: Resolves upstream/downstream dataset references
"""

__version__ = "1.0.0"

from catalog_explorer.errors import (
    AssetNotFoundError,
    CatalogError,
    CatalogLoadError,
    ConfigError,
)
from catalog_explorer.models import Asset, Column, Lineage
from catalog_explorer.store import CatalogStore, default_store
from catalog_explorer.search import QueryEngine, SearchResult, search
from catalog_explorer.detail import AssetDetail, describe_asset, resolve_detail
from catalog_explorer.lineage import LineageResolver, ResolvedLineage
from catalog_explorer.session import Message, SessionState, ask, select
from catalog_explorer.handler import handle_request

__all__ = [
    # Errors
    "AssetNotFoundError",
    "CatalogError",
    "CatalogLoadError",
    "ConfigError",
    # Models
    "Asset",
    "Column",
    "Lineage",
    # Store
    "CatalogStore",
    "default_store",
    # Search
    "QueryEngine",
    "SearchResult",
    "search",
    # Detail
    "AssetDetail",
    "describe_asset",
    "resolve_detail",
    # Lineage
    "LineageResolver",
    "ResolvedLineage",
    # Session
    "Message",
    "SessionState",
    "ask",
    "select",
    # Handler
    "handle_request",
]
