"""Tests for recording fully retrieved trading months."""

from datetime import date

import pytest

from pricehist.core.models import RetrievalRequest, RetrievedMonth, YearMonth
from pricehist.core.services.recorder import RetrievedMonthRecorder

TICKER = "AAPL"


def request(start: date, end: date, ticker: str = TICKER) -> RetrievalRequest:
    return RetrievalRequest(dataset="WIKI", ticker_symbol=ticker, inclusive_start=start, exclusive_end=end)


def months(*year_months: tuple[int, int], ticker: str = TICKER) -> list[RetrievedMonth]:
    return [RetrievedMonth(ticker, YearMonth(year, month)) for year, month in year_months]


@pytest.fixture
def recorder(month_store) -> RetrievedMonthRecorder:
    return RetrievedMonthRecorder(month_store)


async def record(recorder, month_store, *fulfilled):
    recorded = await recorder.recorded(list(fulfilled))
    assert len(month_store.create_calls) <= 1
    return recorded


@pytest.mark.asyncio
@pytest.mark.parametrize("fulfilled", [None, []])
async def test_nothing_fulfilled(recorder, month_store, fulfilled):
    assert await recorder.recorded(fulfilled) == []
    assert month_store.create_calls == []


@pytest.mark.asyncio
async def test_single_day_across_month_boundary_records_nothing(recorder, month_store):
    result = await record(recorder, month_store, request(date(2015, 3, 31), date(2015, 4, 1)))

    assert result == []
    assert month_store.create_calls == []


@pytest.mark.asyncio
async def test_sliced_whole_month(recorder, month_store):
    result = await record(recorder, month_store, request(date(2015, 5, 1), date(2015, 6, 1)))

    assert result == months((2015, 5))
    assert month_store.create_calls == [months((2015, 5))]


@pytest.mark.asyncio
async def test_one_whole_month_ending_on_last_day(recorder, month_store):
    result = await record(recorder, month_store, request(date(2010, 5, 1), date(2010, 5, 31)))

    assert result == months((2010, 5))


@pytest.mark.asyncio
async def test_whole_month_plus_end_edge(recorder, month_store):
    result = await record(recorder, month_store, request(date(2010, 5, 1), date(2010, 6, 20)))

    assert result == months((2010, 5))


@pytest.mark.asyncio
async def test_whole_month_plus_start_edge(recorder, month_store):
    result = await record(recorder, month_store, request(date(2010, 4, 7), date(2010, 5, 31)))

    assert result == months((2010, 5))


@pytest.mark.asyncio
async def test_whole_month_plus_both_edges(recorder, month_store):
    result = await record(recorder, month_store, request(date(2010, 4, 7), date(2010, 6, 19)))

    assert result == months((2010, 5))


@pytest.mark.asyncio
async def test_two_whole_months(recorder, month_store):
    result = await record(recorder, month_store, request(date(2010, 5, 1), date(2010, 6, 30)))

    assert result == months((2010, 5), (2010, 6))


@pytest.mark.asyncio
async def test_one_year_one_month(recorder, month_store):
    result = await record(recorder, month_store, request(date(2010, 5, 1), date(2011, 6, 30)))

    assert result == [RetrievedMonth(TICKER, YearMonth(2010, 5).plus_months(offset)) for offset in range(14)]


@pytest.mark.asyncio
async def test_two_requests_one_whole_month_each(recorder, month_store):
    result = await record(
        recorder,
        month_store,
        request(date(2010, 5, 1), date(2010, 5, 31)),
        request(date(2010, 5, 31), date(2010, 6, 30)),
    )

    assert result == months((2010, 5), (2010, 6))


@pytest.mark.asyncio
async def test_month_split_across_two_requests(recorder, month_store):
    result = await record(
        recorder,
        month_store,
        request(date(2010, 5, 1), date(2010, 6, 15)),
        request(date(2010, 6, 15), date(2010, 7, 31)),
    )

    assert result == months((2010, 5), (2010, 6), (2010, 7))


@pytest.mark.asyncio
async def test_follower_starting_day_after_end(recorder, month_store):
    result = await record(
        recorder,
        month_store,
        request(date(2010, 5, 1), date(2010, 6, 15)),
        request(date(2010, 6, 16), date(2010, 7, 31)),
    )

    assert result == months((2010, 5), (2010, 6), (2010, 7))


@pytest.mark.asyncio
async def test_chain_of_followers_within_month(recorder, month_store):
    result = await record(
        recorder,
        month_store,
        request(date(2010, 5, 1), date(2010, 6, 10)),
        request(date(2010, 6, 10), date(2010, 6, 20)),
        request(date(2010, 6, 20), date(2010, 6, 30)),
    )

    assert result == months((2010, 5), (2010, 6))


@pytest.mark.asyncio
async def test_follower_of_other_ticker_does_not_complete_month(recorder, month_store):
    result = await record(
        recorder,
        month_store,
        request(date(2010, 5, 1), date(2010, 6, 15)),
        request(date(2010, 6, 15), date(2010, 7, 31), ticker="IBM"),
    )

    assert result == months((2010, 5)) + months((2010, 7), ticker="IBM")


@pytest.mark.asyncio
async def test_first_monday_begins_month(recorder, month_store):
    # 2015-02-01 is a Sunday
    result = await record(recorder, month_store, request(date(2015, 2, 2), date(2015, 3, 1)))

    assert result == months((2015, 2))


@pytest.mark.asyncio
async def test_second_monday_does_not_begin_month(recorder, month_store):
    result = await record(recorder, month_store, request(date(2015, 6, 8), date(2015, 7, 1)))

    assert result == []


@pytest.mark.asyncio
async def test_closing_friday_completes_month(recorder, month_store):
    # 2015-05-31 is a Sunday
    result = await record(recorder, month_store, request(date(2015, 5, 1), date(2015, 5, 29)))

    assert result == months((2015, 5))


@pytest.mark.asyncio
async def test_earlier_friday_does_not_complete_month(recorder, month_store):
    result = await record(recorder, month_store, request(date(2015, 5, 1), date(2015, 5, 22)))

    assert result == []


@pytest.mark.asyncio
async def test_duplicates_written_once(recorder, month_store):
    result = await record(
        recorder,
        month_store,
        request(date(2010, 5, 1), date(2010, 5, 31)),
        request(date(2010, 5, 1), date(2010, 6, 1)),
    )

    assert result == months((2010, 5))
    assert month_store.create_calls == [months((2010, 5))]


@pytest.mark.asyncio
async def test_start_on_monday_the_seventh_records_nothing(recorder, month_store):
    result = await record(recorder, month_store, request(date(2015, 9, 7), date(2015, 10, 1)))

    assert result == []
    assert month_store.create_calls == []
