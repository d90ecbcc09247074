"""Pytest configuration for pricehist test suite."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator, Sequence
from datetime import date

import pytest
from duckdb import DuckDBPyConnection

from pricehist.core.config import RetrievalConfig
from pricehist.core.data.providers.base import EquityProvider
from pricehist.core.data.repositories import (
    DuckDBPendingRequestStore,
    DuckDBRetrievedMonthStore,
    DuckDBTradingDayPricesStore,
)
from pricehist.core.data.storage import DuckDBFactory
from pricehist.core.models import RetrievedMonth, TradingDayPrices
from pricehist.core.models.calendar import days_between
from pricehist.core.patterns.throttle import Throttle


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register command-line options for controlling integration tests."""

    parser.addoption(
        "--pricehist-run-integration",
        action="store_true",
        default=False,
        help="Run pricehist integration tests that require external services.",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Register the integration marker for pricehist tests."""

    config.addinivalue_line(
        "markers",
        "integration: marks pricehist tests requiring network or external services",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip integration tests unless explicitly requested."""

    if config.getoption("--pricehist-run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="integration tests require --pricehist-run-integration")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


class FakeProvider(EquityProvider):
    """Provider returning one synthetic row per weekday, with scripted failures."""

    name = "fake"
    BASE_URL = "http://fake.invalid"

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[tuple[str, str, date, date]] = []
        # keyed by inclusive_start, one exception consumed per call
        self.failures: dict[date, list[BaseException]] = {}
        self.delay = 0.0

    async def fetch(
        self,
        dataset: str,
        ticker_symbol: str,
        inclusive_start: date,
        exclusive_end: date,
        throttle: Throttle,
    ) -> list[TradingDayPrices]:
        await throttle.add()
        self.calls.append((dataset, ticker_symbol, inclusive_start, exclusive_end))
        if self.delay:
            await asyncio.sleep(self.delay)

        scripted = self.failures.get(inclusive_start)
        if scripted:
            raise scripted.pop(0)

        return [
            TradingDayPrices(
                ticker_symbol=ticker_symbol,
                trading_date=day,
                open_price="10.00",
                high_price="11.00",
                low_price="9.50",
                close_price="10.50",
            )
            for day in days_between(inclusive_start, exclusive_end)
            if day.weekday() < 5
        ]


class RecordingMonthStore:
    """In-memory retrieved-month store counting round trips."""

    def __init__(self) -> None:
        self.months: set[RetrievedMonth] = set()
        self.get_calls: list[tuple[str, int, int]] = []
        self.create_calls: list[list[RetrievedMonth]] = []

    async def get(self, ticker_symbol: str, from_year: int, to_year: int) -> set[RetrievedMonth]:
        self.get_calls.append((ticker_symbol, from_year, to_year))
        return {
            month
            for month in self.months
            if month.ticker_symbol == ticker_symbol and from_year <= month.year_month.year <= to_year
        }

    async def create(self, months: Sequence[RetrievedMonth]) -> None:
        self.create_calls.append(list(months))
        self.months.update(months)


@pytest.fixture
def conn() -> Iterator[DuckDBPyConnection]:
    """In-memory DuckDB connection with the pricehist tables."""

    with DuckDBFactory().connection() as connection:
        yield connection


@pytest.fixture
def pending_store(conn: DuckDBPyConnection) -> DuckDBPendingRequestStore:
    return DuckDBPendingRequestStore(conn)


@pytest.fixture
def retrieved_store(conn: DuckDBPyConnection) -> DuckDBRetrievedMonthStore:
    return DuckDBRetrievedMonthStore(conn)


@pytest.fixture
def price_store(conn: DuckDBPyConnection) -> DuckDBTradingDayPricesStore:
    return DuckDBTradingDayPricesStore(conn)


@pytest.fixture
def month_store() -> RecordingMonthStore:
    return RecordingMonthStore()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def retrieval_config() -> RetrievalConfig:
    """Fast settings: no backoff wait, short throttle window."""

    return RetrievalConfig(
        max_retries=3,
        retry_backoff_ms=0,
        max_seconds_per_request=5.0,
        max_concurrent_connections=2,
        max_connections_per_second=50,
        max_months_per_request=12,
        throttle_clean_interval=0.01,
        throttle_window=0.05,
    )
