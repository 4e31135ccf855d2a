from .listings import (
    DocumentationStatistics,
    ElementListing,
    autocomplete_entries,
    collect_statistics,
    deprecated_listing,
    todo_listing,
)

__all__ = [
    "DocumentationStatistics",
    "ElementListing",
    "autocomplete_entries",
    "collect_statistics",
    "deprecated_listing",
    "todo_listing",
]
