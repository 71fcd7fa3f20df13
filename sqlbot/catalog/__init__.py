"""Table descriptor catalog."""

from sqlbot.catalog.store import CATALOG_TABLE, CatalogStore, CatalogStoreError

__all__ = ["CATALOG_TABLE", "CatalogStore", "CatalogStoreError"]
