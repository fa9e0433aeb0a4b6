"""
Catalog Explorer Handler

Request handler for consumers of the catalog, implementing the
catalog.list, catalog.search, catalog.get and catalog.lineage capabilities.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, TypedDict

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode
from pydantic import BaseModel, Field, ValidationError

from catalog_explorer import __version__
from catalog_explorer.errors import AssetNotFoundError
from catalog_explorer.lineage import LineageResolver
from catalog_explorer.search import search
from catalog_explorer.store import CatalogStore, default_store

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("catalog_explorer.handler", __version__)

CAPABILITIES = ["catalog.list", "catalog.search", "catalog.get", "catalog.lineage"]


class SearchRequest(BaseModel):
    """Request model for catalog.search capability."""

    query: str = Field(default="", description="Free-text query")


class AssetRequest(BaseModel):
    """Request model for capabilities addressing a single dataset."""

    asset_id: str = Field(..., min_length=1, description="The dataset id")


class AgentRequest(TypedDict, total=False):
    """Typed dictionary for incoming requests."""

    capability: str
    payload: dict[str, Any]
    caller: str | None


class AgentResponse(TypedDict):
    """Typed dictionary for handler responses."""

    success: bool
    data: dict[str, Any] | None
    error: str | None
    trace_id: str | None


def handle_request(
    request: AgentRequest,
    catalog: CatalogStore | None = None
) -> AgentResponse:
    """
    Main entry point for catalog requests.

    Args:
        request: The request containing capability and payload.
        catalog: Store to answer from; the seed catalog when omitted.

    Returns:
        AgentResponse containing the result or error information.
    """
    catalog = catalog if catalog is not None else default_store()

    with tracer.start_as_current_span("handle_request") as span:
        try:
            if not isinstance(request, Mapping):
                span.set_status(Status(StatusCode.ERROR, "Validation error"))
                return _failure("Validation error: request must be an object", span)

            capability = str(request.get("capability") or "")
            payload = request.get("payload") or {}
            caller = request.get("caller")

            span.set_attribute("capability", capability)
            span.set_attribute("caller", str(caller or "unknown"))

            if not isinstance(payload, Mapping):
                span.set_status(Status(StatusCode.ERROR, "Validation error"))
                return _failure("Validation error: payload must be an object", span)

            logger.info(
                "Processing request",
                extra={
                    "capability": capability,
                    "caller": caller,
                    "payload_keys": list(payload.keys())
                }
            )

            if capability == "catalog.list":
                return _handle_list(catalog, span)
            elif capability == "catalog.search":
                return _handle_search(payload, catalog)
            elif capability == "catalog.get":
                return _handle_get(payload, catalog)
            elif capability == "catalog.lineage":
                return _handle_lineage(payload, catalog)
            else:
                span.set_status(Status(StatusCode.ERROR, "Unknown capability"))
                return _failure(f"Unknown capability: {capability}", span)

        except ValidationError as e:
            span.set_status(Status(StatusCode.ERROR, "Validation error"))
            return _failure(f"Validation error: {e.errors()}", span)

        except AssetNotFoundError as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            return _failure(str(e), span)

        except Exception as e:
            logger.exception("Unexpected error handling request")
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            return _failure(f"Internal error: {str(e)}", span)


def _handle_list(catalog: CatalogStore, span: Span) -> AgentResponse:
    datasets = [
        {"id": a.id, "name": a.name, "description": a.description, "tags": sorted(a.tags)}
        for a in catalog.all_assets()
    ]
    span.set_attribute("result_count", len(datasets))
    return _success({"datasets": datasets}, span)


def _handle_search(
    payload: dict[str, Any],
    catalog: CatalogStore
) -> AgentResponse:
    """
    Handle catalog.search capability requests.

    Args:
        payload: Request payload containing query.
        catalog: Store to search.

    Returns:
        AgentResponse with matching datasets in catalog order.
    """
    with tracer.start_as_current_span("search_catalog") as span:
        request = SearchRequest(**payload)
        result = search(request.query, catalog)

        span.set_attribute("result_count", len(result.results))
        logger.info(
            "Search handled",
            extra={
                "reason": result.reason,
                "result_count": len(result.results)
            }
        )

        return _success(
            {
                "query": request.query,
                "reason": result.reason,
                "results": [
                    {"id": a.id, "name": a.name, "owner": a.owner}
                    for a in result.results
                ]
            },
            span
        )


def _handle_get(
    payload: dict[str, Any],
    catalog: CatalogStore
) -> AgentResponse:
    with tracer.start_as_current_span("get_asset") as span:
        request = AssetRequest(**payload)
        span.set_attribute("asset_id", request.asset_id)

        asset = catalog.get_asset(request.asset_id)
        return _success(asset.to_dict(), span)


def _handle_lineage(
    payload: dict[str, Any],
    catalog: CatalogStore
) -> AgentResponse:
    """Handle catalog.lineage capability requests."""
    with tracer.start_as_current_span("resolve_lineage") as span:
        request = AssetRequest(**payload)
        span.set_attribute("asset_id", request.asset_id)

        asset = catalog.get_asset(request.asset_id)
        lineage = LineageResolver(catalog).resolve(asset)

        data = {"asset_id": asset.id, "name": asset.name}
        data.update(lineage.to_dict())
        return _success(data, span)


def _success(data: dict[str, Any], span: Span) -> AgentResponse:
    span.set_status(Status(StatusCode.OK))
    return AgentResponse(
        success=True,
        data=data,
        error=None,
        trace_id=_get_trace_id(span)
    )


def _failure(error: str, span: Span) -> AgentResponse:
    return AgentResponse(
        success=False,
        data=None,
        error=error,
        trace_id=_get_trace_id(span)
    )


def _get_trace_id(span: Span) -> str | None:
    """Extract trace ID from span context."""
    context = span.get_span_context()
    if context.is_valid:
        return format(context.trace_id, '032x')
    return None


def health_check(catalog: CatalogStore | None = None) -> dict[str, Any]:
    """Report handler status and catalog size."""
    catalog = catalog if catalog is not None else default_store()
    return {
        "status": "healthy",
        "service": "catalog-explorer",
        "version": __version__,
        "capabilities": CAPABILITIES,
        "datasets": len(catalog),
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
