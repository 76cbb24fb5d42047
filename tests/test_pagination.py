"""Tests for offset pagination."""

import pytest

from resiloc_inventory.core.exceptions import BadRequestError
from resiloc_inventory.features.pagination.entities import OffsetPaginationRequest, OffsetPaginationResponse


class TestOffsetPagination:
    def test_empty_listing_with_all_items_has_zero_pages(self):
        page = OffsetPaginationResponse.from_items([], OffsetPaginationRequest())

        assert page.metadata == {"totalItems": 0, "itemsPerPage": 0, "currentPage": 1, "totalPages": 0}

    def test_all_items_fit_one_page(self):
        page = OffsetPaginationResponse.from_items(list(range(7)))

        assert page.items == list(range(7))
        assert page.per_page == 7
        assert page.total_pages == 1

    def test_page_slicing(self):
        page = OffsetPaginationResponse.from_items(list(range(7)), OffsetPaginationRequest(page=3, per_page=3))

        assert page.items == [6]
        assert page.total_pages == 3
        assert page.has_prev
        assert not page.has_next

    def test_page_past_the_end_is_empty(self):
        page = OffsetPaginationResponse.from_items(list(range(4)), OffsetPaginationRequest(page=5, per_page=2))

        assert page.items == []
        assert page.total == 4

    @pytest.mark.parametrize("page,per_page", [(0, 10), (1, -1)])
    def test_invalid_request(self, page, per_page):
        with pytest.raises(BadRequestError):
            OffsetPaginationRequest(page=page, per_page=per_page)

    def test_to_dict_serializes_items(self):
        page = OffsetPaginationResponse.from_items([1, 2], OffsetPaginationRequest(per_page=1))

        assert page.to_dict(lambda item: {"value": item}) == {
            "items": [{"value": 1}],
            "metadata": {"totalItems": 2, "itemsPerPage": 1, "currentPage": 1, "totalPages": 2},
        }
