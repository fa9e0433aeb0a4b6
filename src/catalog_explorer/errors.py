"""Exceptions raised by the catalog explorer."""

from __future__ import annotations


class CatalogError(Exception):
    """Base exception for catalog explorer errors."""


class AssetNotFoundError(CatalogError):
    """Exception raised when no asset has the requested id."""

    def __init__(self, asset_id: str) -> None:
        super().__init__(f"Dataset not found: {asset_id}")
        self.asset_id = asset_id


class CatalogLoadError(CatalogError):
    """Exception raised when seed records cannot be turned into assets."""

    def __init__(self, message: str, asset_id: str | None = None) -> None:
        super().__init__(message)
        self.asset_id = asset_id


class ConfigError(CatalogError):
    """Exception raised when the explorer configuration cannot be loaded."""
