"""Tests for the terminal front end."""

import io
import os
import tempfile
import unittest
from unittest.mock import patch

from catalog_explorer.cli import main


SEED_YAML = """
datasets:
  - id: orders_v3
    name: orders
    owner: shop@example.com
    columns:
      - {name: order_id, type: uuid}
"""


class TestCli(unittest.TestCase):

    def setUp(self):
        env = patch.dict(os.environ, {
            "CATALOG_EXPLORER_SEED": "",
            "CATALOG_EXPLORER_LOG_LEVEL": "",
        })
        env.start()
        self.addCleanup(env.stop)

    def run_cli(self, argv, stdin_text=""):
        out, err = io.StringIO(), io.StringIO()
        code = main(argv, stdin=io.StringIO(stdin_text), stdout=out, stderr=err)
        return code, out.getvalue(), err.getvalue()

    def test_list(self):
        code, out, _ = self.run_cli(["list"])
        self.assertEqual(code, 0)
        self.assertIn("sales_orders  (sales_orders_v1)  owner: data.sales@company.com", out)
        self.assertIn("2 datasets indexed", out)

    def test_search(self):
        code, out, _ = self.run_cli(["search", "sales"])
        self.assertEqual(code, 0)
        self.assertIn("🔎 Search reason: keyword search", out)
        self.assertIn("• sales_orders — owner: data.sales@company.com", out)
        self.assertNotIn("customers", out)

    def test_search_no_matches(self):
        code, out, _ = self.run_cli(["search", "nonexistent-xyz"])
        self.assertEqual(code, 0)
        self.assertIn("No datasets matched.", out)

    def test_show(self):
        code, out, _ = self.run_cli(["show", "sales_orders_v1"])
        self.assertEqual(code, 0)
        self.assertIn("sales_orders • 360", out)
        self.assertIn("created_at: timestamptz", out)

    def test_show_unknown(self):
        code, out, err = self.run_cli(["show", "nope"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Error: Dataset not found: nope", err)

    def test_lineage(self):
        code, out, _ = self.run_cli(["lineage", "customers_v2"])
        self.assertEqual(code, 0)
        self.assertIn("crm_export  [not in catalog]", out)
        self.assertIn("  sales_orders\n", out)

    def test_seed_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "catalog.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write(SEED_YAML)

            code, out, _ = self.run_cli(["--seed", path, "list"])
        self.assertEqual(code, 0)
        self.assertIn("orders  (orders_v3)  owner: shop@example.com", out)
        self.assertIn("1 datasets indexed", out)

    def test_missing_seed_file(self):
        code, _, err = self.run_cli(["--seed", "/nonexistent/catalog.yaml", "list"])
        self.assertEqual(code, 1)
        self.assertIn("Cannot read catalog file", err)

    def test_chat(self):
        code, out, _ = self.run_cli(
            ["chat"],
            stdin_text="data.crm\n\n:show customers_v2\n:show nope\n:close\n:quit\n",
        )
        self.assertEqual(code, 0)
        self.assertIn("Hi! Ask me about datasets", out)
        self.assertIn("• customers — owner: data.crm@company.com", out)
        self.assertIn("customers • 360", out)
        self.assertIn("Dataset not found: nope", out)

    def test_chat_show_needs_a_separate_id(self):
        _, out, _ = self.run_cli(["chat"], stdin_text=":showcustomers_v2\n:quit\n")
        self.assertNotIn("customers • 360", out)
        self.assertIn("No datasets matched.", out)

    def test_unknown_log_level(self):
        code, out, err = self.run_cli(["--log-level", "root", "list"])
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("Unknown log level", err)

    def test_chat_ends_at_end_of_input(self):
        code, out, _ = self.run_cli(["chat"], stdin_text="sales\n")
        self.assertEqual(code, 0)
        self.assertIn("• sales_orders — owner: data.sales@company.com", out)


if __name__ == "__main__":
    unittest.main()
