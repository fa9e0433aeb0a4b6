#!/usr/bin/env python3
"""
Catalog Explorer CLI
====================
Terminal front end: list, search and inspect datasets, or chat with the
explorer.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import Optional, Sequence, TextIO

from catalog_explorer.config import ExplorerConfig, build_store, configure_logging
from catalog_explorer.detail import describe_asset, resolve_detail
from catalog_explorer.errors import AssetNotFoundError, CatalogError
from catalog_explorer.lineage import LineageResolver
from catalog_explorer.search import QueryEngine, search
from catalog_explorer.session import (
    SessionState,
    ask,
    clear_selection,
    format_search_reply,
    select,
    selected_asset,
)
from catalog_explorer.store import CatalogStore

logger = logging.getLogger(__name__)

PROMPT = "> "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalog-explorer",
        description="Catalog Explorer - browse and search dataset metadata",
    )
    parser.add_argument("--config", type=str, help="Path to explorer configuration YAML")
    parser.add_argument("--seed", type=str, help="Path to a YAML catalog seed file")
    parser.add_argument("--log-level", type=str, help="Logging level (e.g. INFO, DEBUG)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("list", help="List every dataset")

    search_parser = subparsers.add_parser("search", help="Keyword search over datasets")
    search_parser.add_argument("query", nargs="?", default="", help="Search text")

    show_parser = subparsers.add_parser("show", help="Show one dataset in detail")
    show_parser.add_argument("asset_id", help="Dataset id")

    lineage_parser = subparsers.add_parser("lineage", help="Show lineage of one dataset")
    lineage_parser.add_argument("asset_id", help="Dataset id")

    subparsers.add_parser("chat", help="Interactive session")

    return parser


def load_config(args: argparse.Namespace) -> ExplorerConfig:
    config = (
        ExplorerConfig.from_yaml_file(args.config) if args.config else ExplorerConfig()
    ).with_env_overrides()

    # Command-line flags win over the config file and environment
    if args.seed:
        config = replace(config, seed_path=args.seed)
    if args.log_level:
        config = replace(config, log_level=args.log_level.upper())
    return config


def cmd_list(catalog: CatalogStore, out: TextIO) -> int:
    for asset in catalog.all_assets():
        print(f"{asset.name}  ({asset.id})  owner: {asset.owner}", file=out)
    print(f"{len(catalog)} datasets indexed", file=out)
    return 0


def cmd_search(catalog: CatalogStore, query: str, out: TextIO) -> int:
    print(format_search_reply(search(query, catalog)), file=out)
    return 0


def cmd_show(catalog: CatalogStore, asset_id: str, out: TextIO) -> int:
    print(resolve_detail(catalog, asset_id).render(), file=out)
    return 0


def cmd_lineage(
    catalog: CatalogStore,
    asset_id: str,
    config: ExplorerConfig,
    out: TextIO
) -> int:
    asset = catalog.get_asset(asset_id)
    resolver = LineageResolver(catalog, max_depth=config.max_lineage_depth)

    for direction, nodes in (
        ("Upstream", resolver.get_upstream(asset.name)),
        ("Downstream", resolver.get_downstream(asset.name)),
    ):
        print(f"{direction}:", file=out)
        if not nodes:
            print("  (none)", file=out)
        for node in nodes:
            marker = "" if node["asset_id"] else "  [not in catalog]"
            print(f"  {'  ' * (node['depth'] - 1)}{node['name']}{marker}", file=out)
    return 0


def cmd_chat(
    catalog: CatalogStore,
    stdin: TextIO,
    out: TextIO
) -> int:
    """
    Run the interactive session.

    Plain lines are questions. ``:show ID`` opens a dataset, ``:close``
    clears the selection and ``:quit`` (or end of input) leaves.
    """
    engine = QueryEngine(catalog)
    state = SessionState.initial()
    print(state.transcript[0].content, file=out)

    while True:
        print(PROMPT, end="", file=out, flush=True)
        line = stdin.readline()
        if not line:
            break
        line = line.strip()

        if line == ":quit":
            break
        elif line == ":close":
            state = clear_selection(state)
        elif line == ":show" or line.startswith(":show "):
            asset_id = line[len(":show"):].strip()
            try:
                state = select(state, asset_id, catalog)
            except AssetNotFoundError as e:
                print(str(e), file=out)
                continue
            print(describe_asset(selected_asset(state, catalog)).render(), file=out)
        else:
            before = len(state.transcript)
            state = ask(state, line, engine)
            if len(state.transcript) > before:
                print(state.transcript[-1].content, file=out)

    return 0


def main(
    argv: Optional[Sequence[str]] = None,
    stdin: TextIO = sys.stdin,
    stdout: TextIO = sys.stdout,
    stderr: TextIO = sys.stderr
) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
        configure_logging(config)
        catalog = build_store(config)

        command = args.command or "list"
        if command == "list":
            return cmd_list(catalog, stdout)
        elif command == "search":
            return cmd_search(catalog, args.query, stdout)
        elif command == "show":
            return cmd_show(catalog, args.asset_id, stdout)
        elif command == "lineage":
            return cmd_lineage(catalog, args.asset_id, config, stdout)
        else:
            return cmd_chat(catalog, stdin, stdout)

    except CatalogError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
