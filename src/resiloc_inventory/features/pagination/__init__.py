"""Pagination feature.

Every listing returns ``{items, metadata: {totalItems, itemsPerPage,
currentPage, totalPages}}``; a limit of 0 means all items.
"""

from .entities import ALL_ITEMS, OffsetPaginationRequest, OffsetPaginationResponse, SortOrder

__all__ = ["ALL_ITEMS", "OffsetPaginationRequest", "OffsetPaginationResponse", "SortOrder"]
