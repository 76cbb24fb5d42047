"""Pagination request entities and enums."""

from dataclasses import dataclass
from enum import Enum

from ....core.exceptions import BadRequestError


ALL_ITEMS = 0


class SortOrder(str, Enum):
    """Sort order enumeration."""
    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True)
class OffsetPaginationRequest:
    """Offset-based pagination request (page/limit).

    ``per_page`` equal to ``ALL_ITEMS`` requests every item on one page; the
    effective page size is then resolved against the total item count.
    """

    page: int = 1
    per_page: int = ALL_ITEMS

    def __post_init__(self):
        """Validate pagination parameters."""
        if self.page < 1:
            raise BadRequestError("Page must be >= 1")
        if self.per_page < 0:
            raise BadRequestError("Limit must be >= 0")

    @property
    def wants_all(self) -> bool:
        return self.per_page == ALL_ITEMS

    def resolve_limit(self, total: int) -> int:
        """Get the effective page size for ``total`` items."""
        return total if self.wants_all else self.per_page

    def offset(self, total: int) -> int:
        """Calculate offset from page and the effective page size."""
        return (self.page - 1) * self.resolve_limit(total)
