"""Pagination entities."""

from .requests import ALL_ITEMS, OffsetPaginationRequest, SortOrder
from .responses import OffsetPaginationResponse

__all__ = ["ALL_ITEMS", "OffsetPaginationRequest", "OffsetPaginationResponse", "SortOrder"]
