"""
Catalog module.

Fetches the Context7 project catalog, parses it into typed records,
and orders it for display and export.
"""

from .client import CatalogClient, CatalogSource, ResponseKind
from .models import ProjectState, ProjectSummary, ProjectVersion, parse_catalog
from .ordering import sort_by_title

__all__ = [
    "CatalogClient",
    "CatalogSource",
    "ResponseKind",
    "ProjectState",
    "ProjectSummary",
    "ProjectVersion",
    "parse_catalog",
    "sort_by_title",
]
