"""
Lineage Resolution

Lineage references are dataset names resolved lazily against the catalog.
A name with no matching dataset is a dangling reference: it is reported,
never treated as an error, and never expanded further.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, TypedDict

from opentelemetry import trace

from catalog_explorer import __version__
from catalog_explorer.models import Asset
from catalog_explorer.store import CatalogStore

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("catalog_explorer.lineage", __version__)

Direction = Literal["upstream", "downstream"]


class LineageNode(TypedDict):
    """One reference reached while walking lineage."""

    name: str
    asset_id: str | None
    depth: int


@dataclass(frozen=True)
class ResolvedLineage:
    """Direct lineage of one dataset, split into resolved and dangling names."""
    upstream: tuple[Asset, ...]
    downstream: tuple[Asset, ...]
    dangling_upstream: tuple[str, ...]
    dangling_downstream: tuple[str, ...]

    def to_dict(self) -> dict[str, list[str]]:
        return {
            "upstream": [a.name for a in self.upstream],
            "downstream": [a.name for a in self.downstream],
            "danglingUpstream": list(self.dangling_upstream),
            "danglingDownstream": list(self.dangling_downstream),
        }


class LineageResolver:
    """Resolves name-based lineage references against a catalog store."""

    def __init__(self, catalog: CatalogStore, max_depth: int = 3) -> None:
        self.catalog = catalog
        self.max_depth = max_depth

    def resolve(self, asset: Asset) -> ResolvedLineage:
        """Resolve the direct upstream and downstream references of a dataset."""
        with tracer.start_as_current_span("resolve_lineage") as span:
            span.set_attribute("asset_id", asset.id)

            upstream, dangling_up = self._split(asset.lineage.upstream)
            downstream, dangling_down = self._split(asset.lineage.downstream)

            if dangling_up or dangling_down:
                logger.debug(
                    "Dangling lineage references",
                    extra={
                        "asset_id": asset.id,
                        "upstream": list(dangling_up),
                        "downstream": list(dangling_down)
                    }
                )

            return ResolvedLineage(
                upstream=upstream,
                downstream=downstream,
                dangling_upstream=dangling_up,
                dangling_downstream=dangling_down,
            )

    def get_upstream(self, name: str, depth: int | None = None) -> list[LineageNode]:
        """
        Walk upstream lineage from the dataset with the given name.

        Args:
            name: Dataset name to start from.
            depth: Maximum number of hops (defaults to ``max_depth``).

        Returns:
            References in breadth-first order, each reported once.
        """
        return self._walk(name, "upstream", self.max_depth if depth is None else depth)

    def get_downstream(self, name: str, depth: int | None = None) -> list[LineageNode]:
        """Walk downstream lineage from the dataset with the given name."""
        return self._walk(name, "downstream", self.max_depth if depth is None else depth)

    def _split(self, names: tuple[str, ...]) -> tuple[tuple[Asset, ...], tuple[str, ...]]:
        resolved: list[Asset] = []
        dangling: list[str] = []
        for ref in names:
            target = self.catalog.find_by_name(ref)
            if target is None:
                dangling.append(ref)
            else:
                resolved.append(target)
        return tuple(resolved), tuple(dangling)

    def _walk(self, name: str, direction: Direction, depth: int) -> list[LineageNode]:
        with tracer.start_as_current_span(f"walk_{direction}") as span:
            span.set_attribute("name", name)
            span.set_attribute("depth", depth)

            result: list[LineageNode] = []
            visited: set[str] = {name}
            current_level = [name]

            for level in range(1, depth + 1):
                next_level: list[str] = []
                for current in current_level:
                    asset = self.catalog.find_by_name(current)
                    if asset is None:
                        continue
                    refs = getattr(asset.lineage, direction)
                    for ref in refs:
                        if ref in visited:
                            continue
                        visited.add(ref)
                        target = self.catalog.find_by_name(ref)
                        result.append(LineageNode(
                            name=ref,
                            asset_id=target.id if target else None,
                            depth=level,
                        ))
                        next_level.append(ref)

                if not next_level:
                    break
                current_level = next_level

            span.set_attribute("node_count", len(result))
            return result
