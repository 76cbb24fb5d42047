"""Pagination response entities."""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

from .requests import OffsetPaginationRequest

T = TypeVar('T')


@dataclass(frozen=True)
class OffsetPaginationResponse(Generic[T]):
    """Offset-based pagination response with page info."""

    items: List[T]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        """Calculate total number of pages.

        An empty listing fetched with the all-items sentinel resolves its page
        size to zero, which yields zero pages.
        """
        if self.per_page == 0:
            return 0
        return (self.total + self.per_page - 1) // self.per_page

    @property
    def has_next(self) -> bool:
        """Check if there's a next page."""
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        """Check if there's a previous page."""
        return self.page > 1

    @property
    def metadata(self) -> Dict[str, int]:
        return {
            "totalItems": self.total,
            "itemsPerPage": self.per_page,
            "currentPage": self.page,
            "totalPages": self.total_pages,
        }

    def to_dict(self, serializer: Optional[Callable[[T], Any]] = None) -> Dict[str, Any]:
        items = [serializer(item) for item in self.items] if serializer else list(self.items)
        return {"items": items, "metadata": self.metadata}

    @classmethod
    def from_items(
        cls,
        items: Sequence[T],
        request: Optional[OffsetPaginationRequest] = None
    ) -> "OffsetPaginationResponse[T]":
        """Slice an already filtered sequence into the requested page."""
        request = request or OffsetPaginationRequest()
        total = len(items)
        limit = request.resolve_limit(total)
        offset = request.offset(total)
        return cls(
            items=list(items[offset:offset + limit]),
            total=total,
            page=request.page,
            per_page=limit,
        )
