from catalog_ingest.db.database import CatalogRepository

__all__ = ["CatalogRepository"]
