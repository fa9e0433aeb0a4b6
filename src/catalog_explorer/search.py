"""
Keyword Search

Maps a raw, untrusted query string to the datasets whose name, description
or owner contain it. Matching is plain case-insensitive substring
containment; columns, tags and lineage are not searched.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from opentelemetry import trace

from catalog_explorer import __version__
from catalog_explorer.models import Asset
from catalog_explorer.store import CatalogStore

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("catalog_explorer.search", __version__)

EMPTY_QUERY_REASON = "empty query → showing all datasets"
KEYWORD_SEARCH_REASON = "keyword search"


class SearchResult(NamedTuple):
    """Matching datasets in catalog order, plus the rule that produced them."""

    results: tuple[Asset, ...]
    reason: str


def normalize_query(raw_query: str | None) -> str:
    """Trim surrounding whitespace and case-fold to lowercase."""
    return str(raw_query or "").strip().lower()


def matches(asset: Asset, normalized_query: str) -> bool:
    """Check whether a normalized, non-empty query hits a dataset."""
    return (
        normalized_query in asset.name.lower()
        or normalized_query in asset.description.lower()
        or normalized_query in asset.owner.lower()
    )


def search(raw_query: str | None, catalog: CatalogStore) -> SearchResult:
    """
    Search the catalog.

    An empty query (after trimming) returns the whole catalog. Otherwise a
    dataset is included when the query is a substring of its name,
    description or owner. Result order always follows the catalog.

    Args:
        raw_query: The user-supplied query text.
        catalog: The store to search.

    Returns:
        SearchResult with the matching datasets and a reason string.
    """
    with tracer.start_as_current_span("search") as span:
        query = normalize_query(raw_query)
        span.set_attribute("query_length", len(query))

        if not query:
            results = catalog.all_assets()
            reason = EMPTY_QUERY_REASON
        else:
            results = tuple(a for a in catalog.all_assets() if matches(a, query))
            reason = KEYWORD_SEARCH_REASON

        span.set_attribute("result_count", len(results))
        logger.debug(
            "Search completed",
            extra={
                "query": query,
                "reason": reason,
                "result_count": len(results)
            }
        )

        return SearchResult(results=results, reason=reason)


class QueryEngine:
    """Search bound to one catalog store."""

    def __init__(self, catalog: CatalogStore) -> None:
        self.catalog = catalog

    def search(self, raw_query: str | None) -> SearchResult:
        return search(raw_query, self.catalog)

    def all_assets(self) -> tuple[Asset, ...]:
        return self.catalog.all_assets()

    def get_asset(self, asset_id: str) -> Asset:
        return self.catalog.get_asset(asset_id)
