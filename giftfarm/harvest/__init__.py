"""Channel discovery over the paged catalog endpoints."""

from .client import PAGE_SIZE, CatalogClient
from .harvester import PAGES_PER_CATEGORY, Catalog, PaginationHarvester, gather_all

__all__ = [
    "PAGE_SIZE",
    "PAGES_PER_CATEGORY",
    "Catalog",
    "CatalogClient",
    "PaginationHarvester",
    "gather_all",
]
