"""Tests for keyword search."""

import unittest

from catalog_explorer.models import Asset
from catalog_explorer.search import (
    EMPTY_QUERY_REASON,
    KEYWORD_SEARCH_REASON,
    QueryEngine,
    SearchResult,
    normalize_query,
    search,
)
from catalog_explorer.store import SEED_DATASETS, CatalogStore


QUERIES = [
    "", " ", "sales", "SALES", "  sales  ", "data.crm", "company.com",
    "customer", "order", "pii", "email", "timestamptz", "raw_events",
    "nonexistent-xyz", "o", ".", "@", "[(*)]", "%", "\\", "ü", "\n",
]


def names(result: SearchResult) -> list[str]:
    return [a.name for a in result.results]


class TestSearchScenarios(unittest.TestCase):
    """Test search against the seed catalog."""

    def setUp(self):
        self.catalog = CatalogStore.from_records(SEED_DATASETS)

    def test_match_on_name(self):
        result = search("sales", self.catalog)
        self.assertEqual(names(result), ["sales_orders"])
        self.assertEqual(result.reason, "keyword search")

    def test_match_on_owner(self):
        result = search("data.crm", self.catalog)
        self.assertEqual(names(result), ["customers"])
        self.assertEqual(result.reason, "keyword search")

    def test_match_on_description(self):
        result = search("one row per user", self.catalog)
        self.assertEqual(names(result), ["customers"])

    def test_no_match_is_empty(self):
        result = search("nonexistent-xyz", self.catalog)
        self.assertEqual(result.results, ())
        self.assertEqual(result.reason, "keyword search")

    def test_empty_query_returns_everything(self):
        result = search("", self.catalog)
        self.assertEqual(names(result), ["sales_orders", "customers"])
        self.assertEqual(result.reason, "empty query → showing all datasets")

    def test_blank_and_none_queries_count_as_empty(self):
        for query in ("   ", "\t\n", None):
            result = search(query, self.catalog)
            self.assertEqual(result.results, self.catalog.all_assets())
            self.assertEqual(result.reason, EMPTY_QUERY_REASON)

    def test_results_keep_catalog_order(self):
        result = search("customer", self.catalog)
        self.assertEqual(names(result), ["sales_orders", "customers"])

    def test_case_insensitive(self):
        self.assertEqual(search("SALES", self.catalog), search("sales", self.catalog))

    def test_whitespace_insensitive(self):
        self.assertEqual(search("  sales  ", self.catalog), search("sales", self.catalog))

    def test_columns_tags_and_lineage_are_not_searched(self):
        for query in ("pii", "email", "timestamptz", "gold", "raw_events", "crm_export"):
            with self.subTest(query=query):
                self.assertEqual(search(query, self.catalog).results, ())

    def test_result_unpacks(self):
        results, reason = search("sales", self.catalog)
        self.assertEqual(reason, KEYWORD_SEARCH_REASON)
        self.assertEqual(results[0].id, "sales_orders_v1")


class TestSearchProperties(unittest.TestCase):
    """Test search behaviour over a range of queries."""

    def setUp(self):
        self.catalog = CatalogStore.from_records(SEED_DATASETS + [
            {
                "id": "events_v1",
                "name": "Raw_Events",
                "description": "Clickstream [(*)] 100% üntrusted",
                "owner": "ingest@company.com",
            },
            {"id": "empty_v1", "name": "empty"},
        ])

    def test_results_are_a_subsequence_of_catalog(self):
        everything = list(self.catalog.all_assets())
        for query in QUERIES:
            with self.subTest(query=query):
                results = list(search(query, self.catalog).results)
                positions = [everything.index(a) for a in results]
                self.assertEqual(positions, sorted(positions))

    def test_membership_matches_predicate(self):
        for query in QUERIES:
            q = query.strip().lower()
            if not q:
                continue
            with self.subTest(query=query):
                results = search(query, self.catalog).results
                for asset in self.catalog.all_assets():
                    expected = (
                        q in asset.name.lower()
                        or q in asset.description.lower()
                        or q in asset.owner.lower()
                    )
                    self.assertEqual(asset in results, expected)

    def test_never_raises(self):
        for query in QUERIES + ["\x00", "a" * 10000]:
            with self.subTest(query=query[:20]):
                self.assertIsInstance(search(query, self.catalog), SearchResult)

    def test_empty_query_on_empty_catalog(self):
        result = search("", CatalogStore([]))
        self.assertEqual(result.results, ())
        self.assertEqual(result.reason, EMPTY_QUERY_REASON)


class TestQueryEngine(unittest.TestCase):
    """Test the store-bound engine."""

    def test_engine_delegates_to_catalog(self):
        catalog = CatalogStore.from_records(SEED_DATASETS)
        engine = QueryEngine(catalog)
        self.assertEqual(engine.search("sales"), search("sales", catalog))
        self.assertEqual(engine.all_assets(), catalog.all_assets())
        self.assertEqual(engine.get_asset("customers_v2").name, "customers")

    def test_normalize_query(self):
        self.assertEqual(normalize_query("  MiXeD Case "), "mixed case")
        self.assertEqual(normalize_query(None), "")


class TestMatchedAssetType(unittest.TestCase):

    def test_results_are_the_stored_assets(self):
        catalog = CatalogStore.from_records(SEED_DATASETS)
        result = search("sales", catalog)
        self.assertIsInstance(result.results[0], Asset)
        self.assertIs(result.results[0], catalog.get_asset("sales_orders_v1"))


if __name__ == "__main__":
    unittest.main()
