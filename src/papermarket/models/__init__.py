"""Market data models."""

from papermarket.models.quote import Quote
from papermarket.models.reference_stock import ReferenceStock
from papermarket.models.search_result import SearchResult

__all__ = [
    "Quote",
    "ReferenceStock",
    "SearchResult",
]
