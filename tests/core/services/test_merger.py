"""Tests for merging adjacent retrieval requests."""

from datetime import date

import pytest

from pricehist.core.models import RetrievalRequest
from pricehist.core.models.calendar import YearMonth, plus_months
from pricehist.core.services.merger import RequestMerger


def request(start: date, end: date, ticker: str = "AAPL", dataset: str = "WIKI") -> RetrievalRequest:
    return RetrievalRequest(dataset=dataset, ticker_symbol=ticker, inclusive_start=start, exclusive_end=end)


def month(year: int, month_number: int, ticker: str = "AAPL") -> RetrievalRequest:
    year_month = YearMonth(year, month_number)
    return request(year_month.first_day, year_month.plus_months(1).first_day, ticker)


@pytest.fixture
def merger() -> RequestMerger:
    return RequestMerger()


class TestRequestMerger:
    """测试请求合并."""

    def test_none_and_empty(self, merger):
        assert merger.merge(None, 3) is None
        assert merger.merge([], 3) == []

    def test_single_request_unchanged(self, merger):
        single = month(2010, 2)

        assert merger.merge([single], 3) == [single]

    def test_two_adjacent_months_merge(self, merger):
        result = merger.merge([month(2010, 5), month(2010, 6)], 3)

        assert result == [request(date(2010, 5, 1), date(2010, 7, 1))]

    def test_gap_forces_flush(self, merger):
        result = merger.merge([month(2010, 2), month(2010, 5), month(2010, 6)], 3)

        assert result == [
            request(date(2010, 2, 1), date(2010, 3, 1)),
            request(date(2010, 5, 1), date(2010, 7, 1)),
        ]

    def test_gap_forces_flush_without_cap(self, merger):
        result = merger.merge([month(2010, 2), month(2010, 5)], None)

        assert len(result) == 2

    def test_eight_months_with_three_month_cap(self, merger):
        requests = [month(2010, number) for number in range(1, 9)]

        result = merger.merge(requests, 3)

        assert result == [
            request(date(2010, 1, 1), date(2010, 4, 1)),
            request(date(2010, 4, 1), date(2010, 7, 1)),
            request(date(2010, 7, 1), date(2010, 9, 1)),
        ]

    def test_request_reaching_cap_is_not_merged_into(self, merger):
        full = request(date(2010, 1, 1), date(2010, 4, 1))

        result = merger.merge([full, month(2010, 4)], 3)

        assert result == [full, month(2010, 4)]

    def test_no_cap_merges_all_adjacent(self, merger):
        requests = [month(2010, number) for number in range(1, 13)]

        assert merger.merge(requests, None) == [request(date(2010, 1, 1), date(2011, 1, 1))]

    def test_partial_months_merge_within_cap(self, merger):
        requests = [
            request(date(2011, 4, 14), date(2011, 5, 1)),
            month(2011, 5),
            month(2011, 6),
        ]

        result = merger.merge(requests, 2)

        assert result == [
            request(date(2011, 4, 14), date(2011, 6, 1)),
            request(date(2011, 6, 1), date(2011, 7, 1)),
        ]

    def test_unsorted_input_and_tickers_kept_apart(self, merger):
        requests = [month(2010, 6), month(2010, 5, "IBM"), month(2010, 5), month(2010, 6, "IBM")]

        result = merger.merge(requests, 12)

        assert result == [
            request(date(2010, 5, 1), date(2010, 7, 1)),
            request(date(2010, 5, 1), date(2010, 7, 1), "IBM"),
        ]

    def test_datasets_are_never_merged(self, merger):
        requests = [month(2010, 5), request(date(2010, 6, 1), date(2010, 7, 1), dataset="EOD")]

        assert len(merger.merge(requests, 12)) == 2

    def test_emitted_requests_never_exceed_cap(self, merger):
        requests = [request(date(2011, 1, 17), date(2011, 2, 1))] + [month(2011, number) for number in range(2, 13)]

        for merged in merger.merge(requests, 4):
            assert merged.exclusive_end <= plus_months(merged.inclusive_start, 4)

    def test_invalid_cap(self, merger):
        with pytest.raises(ValueError):
            merger.merge([month(2010, 1)], 0)
