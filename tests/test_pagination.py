"""Tests for page meta-data calculation."""

import dataclasses

import pytest

from keeper.core.pagination import (
    PaginationCalculator,
    count_pages,
    new_multi_table_pagination,
    new_single_table_pagination,
)
from keeper.core.paging import Page


def rows(n: int) -> list[int]:
    return list(range(n))


class TestCountPages:
    def test_exact_division(self):
        assert count_pages(100, 10) == 10

    def test_remainder_adds_a_page(self):
        assert count_pages(95, 10) == 10
        assert count_pages(101, 10) == 11

    def test_zero_page_size(self):
        assert count_pages(100, 0) == 0

    def test_negative_page_size(self):
        assert count_pages(100, -5) == 0

    def test_empty_total(self):
        assert count_pages(0, 10) == 0

    def test_small_negative_total_counts_one_page(self):
        assert count_pages(-5, 10) == 1


class TestNavigationWindow:
    def test_centered_window_starting_at_one(self):
        page = new_multi_table_pagination(rows(10), 5, 10, 100)

        assert page.page_count == 10
        assert page.navigable_pages == (1, 2, 3, 4, 5, 6, 7, 8)
        assert page.first_page == 1
        assert page.last_page == 8
        assert page.previous_page == 4
        assert page.next_page == 6

    def test_centered_window_in_the_middle(self):
        page = new_multi_table_pagination(rows(10), 10, 10, 200)

        assert page.navigable_pages == (6, 7, 8, 9, 10, 11, 12, 13)

    def test_left_aligned_window(self):
        page = new_multi_table_pagination(rows(10), 2, 10, 200)

        assert page.navigable_pages == tuple(range(1, 9))

    def test_right_aligned_window(self):
        page = new_multi_table_pagination(rows(10), 18, 10, 200)

        assert page.navigable_pages == tuple(range(13, 21))
        assert page.first_page == 13
        assert page.last_page == 20

    def test_odd_window(self):
        page = new_multi_table_pagination(rows(10), 10, 10, 200, navigate_pages=5)

        assert page.navigable_pages == (8, 9, 10, 11, 12)

    def test_all_pages_when_they_fit(self):
        for page_count in range(0, 9):
            page = new_multi_table_pagination([], 1, 10, page_count * 10)
            assert page.navigable_pages == tuple(range(1, page_count + 1))

    def test_window_length_is_bounded(self):
        calculator = PaginationCalculator(navigation_window=6)
        for page_number in range(1, 31):
            page = calculator.compute([], page_number, 5, 150)
            assert len(page.navigable_pages) == 6
            assert page.navigable_pages[0] >= 1
            assert page.navigable_pages[-1] <= 30
            assert page.navigable_pages == tuple(
                range(page.navigable_pages[0], page.navigable_pages[0] + 6)
            )

    def test_window_near_the_end(self):
        calculator = PaginationCalculator()
        for page_number in range(27, 31):
            page = calculator.compute([], page_number, 5, 150)
            assert page.navigable_pages == tuple(range(23, 31))

    def test_window_argument_overrides_calculator_default(self):
        page = PaginationCalculator(8).compute([], 1, 10, 1000, navigation_window=3)

        assert page.navigation_window == 3
        assert page.navigable_pages == (1, 2, 3)


class TestBoundaries:
    def test_single_page(self):
        page = new_multi_table_pagination(rows(3), 1, 10, 3)

        assert page.page_count == 1
        assert page.is_first_page is True
        assert page.is_last_page is True
        assert page.has_previous_page is False
        assert page.has_next_page is False
        assert page.previous_page == 0
        assert page.next_page == 0

    def test_zero_page_size(self):
        page = new_multi_table_pagination([], 1, 0, 100)

        assert page.page_count == 0
        assert page.navigable_pages == ()
        assert page.first_page == 0
        assert page.last_page == 0
        assert page.next_page == 0

    def test_page_past_the_end(self):
        page = new_multi_table_pagination([], 7, 10, 30)

        assert page.page_count == 3
        assert page.navigable_pages == (1, 2, 3)
        assert page.previous_page == 6
        assert page.next_page == 0
        assert page.is_last_page is False
        assert page.has_next_page is False

    def test_first_and_last_flags_exclude_neighbours(self):
        calculator = PaginationCalculator()
        for page_number in range(1, 13):
            page = calculator.compute([], page_number, 10, 115)
            if page.is_first_page:
                assert not page.has_previous_page
            if page.is_last_page:
                assert not page.has_next_page

    def test_middle_page(self):
        page = new_multi_table_pagination(rows(10), 3, 10, 95)

        assert page.page_count == 10
        assert page.is_first_page is False
        assert page.is_last_page is False
        assert page.has_previous_page is True
        assert page.has_next_page is True


class TestPageResult:
    def test_row_numbers(self):
        page = new_multi_table_pagination(rows(10), 3, 10, 95)

        assert page.size == 10
        assert page.start_row == 21
        assert page.end_row == 30

    def test_row_numbers_of_short_last_page(self):
        page = new_multi_table_pagination(rows(5), 10, 10, 95)

        assert page.start_row == 91
        assert page.end_row == 95

    def test_empty_page_has_no_row_numbers(self):
        page = new_multi_table_pagination([], 2, 10, 5)

        assert page.start_row == 0
        assert page.end_row == 0

    def test_same_inputs_give_equal_results(self):
        first = new_multi_table_pagination(rows(10), 4, 10, 95)
        second = new_multi_table_pagination(rows(10), 4, 10, 95)

        assert first == second

    def test_is_immutable(self):
        page = new_multi_table_pagination(rows(10), 4, 10, 95)

        with pytest.raises(dataclasses.FrozenInstanceError):
            page.page_number = 5

    def test_as_dict(self):
        data = new_multi_table_pagination(["a", "b"], 1, 2, 3).as_dict()

        assert data["items"] == ["a", "b"]
        assert data["navigable_pages"] == [1, 2]
        assert data["page_count"] == 2
        assert data["has_next_page"] is True
        assert data["order_by"] is None


class TestSingleTablePagination:
    def test_paged_rows(self):
        page = new_single_table_pagination(
            Page(["f", "g", "h", "i", "j"], page_num=2, page_size=5, total=23, order_by="name ASC")
        )

        assert page.page_number == 2
        assert page.page_size == 5
        assert page.total_count == 23
        assert page.page_count == 5
        assert page.navigable_pages == (1, 2, 3, 4, 5)
        assert page.order_by == "name ASC"
        assert page.start_row == 6
        assert page.end_row == 10

    def test_plain_list_is_one_page(self):
        page = new_single_table_pagination(["a", "b", "c"])

        assert page.page_number == 1
        assert page.page_size == 3
        assert page.page_count == 1
        assert page.is_first_page and page.is_last_page

    def test_empty_plain_list(self):
        page = new_single_table_pagination([])

        assert page.page_count == 0
        assert page.navigable_pages == ()
        assert page.is_first_page is True
        assert page.is_last_page is False

    def test_navigate_pages(self):
        page = new_single_table_pagination(
            Page(rows(2), page_num=50, page_size=2, total=200), navigate_pages=4
        )

        assert page.navigable_pages == (48, 49, 50, 51)
