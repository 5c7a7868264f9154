"""
Unit tests for pagination helpers in schemas/shared.py.

Pure Python, no upstream required.

Run from the project root:
    cd backend
    pytest tests/test_pagination.py -v
"""

import math

import pytest

from schemas.shared import (
    MAX_PER_PAGE,
    PaginationMeta,
    PaginationParams,
    clamp_per_page,
    total_pages,
)


class TestClampPerPage:

    @pytest.mark.parametrize("requested", [1, 20, 99, 100])
    def test_within_limit_unchanged(self, requested):
        assert clamp_per_page(requested) == requested

    @pytest.mark.parametrize("requested", [101, 150, 10_000])
    def test_above_limit_capped(self, requested):
        assert clamp_per_page(requested) == MAX_PER_PAGE

    def test_params_model_clamps(self):
        params = PaginationParams(page=1, per_page=150)
        assert params.per_page == 100

    def test_params_defaults(self):
        params = PaginationParams()
        assert params.page == 1
        assert params.per_page == 20

    def test_params_accepts_camel_case(self):
        params = PaginationParams.model_validate({"page": 3, "perPage": 50})
        assert (params.page, params.per_page) == (3, 50)

    @pytest.mark.parametrize("field, value", [("page", 0), ("per_page", 0), ("page", -2)])
    def test_params_reject_non_positive(self, field, value):
        with pytest.raises(ValueError):
            PaginationParams(**{field: value})


class TestTotalPages:

    @pytest.mark.parametrize("total_count", [0, 1, 19, 20, 21, 99, 100, 101, 250, 9999])
    @pytest.mark.parametrize("per_page", [1, 7, 20, 100])
    def test_matches_ceiling(self, total_count, per_page):
        assert total_pages(total_count, per_page) == math.ceil(total_count / per_page)

    def test_empty_collection_has_no_pages(self):
        assert total_pages(0, 20) == 0


class TestPaginationMeta:

    def test_oversized_page_request(self):
        # perPage=150 is capped to 100; 250 users therefore span 3 pages
        params = PaginationParams(page=1, per_page=150)
        meta = PaginationMeta.build(params, total_count=250)
        assert meta.per_page == 100
        assert meta.total_pages == 3

    def test_serialises_camel_case(self):
        meta = PaginationMeta.build(PaginationParams(page=2, per_page=20), total_count=45)
        assert meta.model_dump(by_alias=True) == {
            "currentPage": 2,
            "perPage": 20,
            "totalCount": 45,
            "totalPages": 3,
        }
