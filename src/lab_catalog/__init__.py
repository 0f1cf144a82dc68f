"""Lab Catalog package."""

from .catalog_client import CatalogClient
from .catalog_service import BrowseResult, CatalogService
from .config import Settings
from .facets import FacetConfig, resolve_facets
from .filters import FilterState, apply_filters, count_active_filters
from .repository import ReportRepository
from .sorting import SortState, apply_sort
from .state import BrowseState, reduce
from .sync import CatalogSync

__all__ = [
    "Settings",
    "CatalogClient",
    "ReportRepository",
    "CatalogSync",
    "CatalogService",
    "BrowseResult",
    "FacetConfig",
    "resolve_facets",
    "FilterState",
    "apply_filters",
    "count_active_filters",
    "SortState",
    "apply_sort",
    "BrowseState",
    "reduce",
]
