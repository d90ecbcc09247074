"""History retrieval commands for the pricehist CLI."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Awaitable, Callable
from typing import TypeVar

import typer

from pricehist.core.config import ConfigManager
from pricehist.core.exceptions import PriceHistError
from pricehist.core.logging import configure_logging
from pricehist.core.services import HistoryRetrievalService

from .utils import CLIOptions, fail, get_cli_options, get_formatter, parse_date

T = TypeVar("T")

REQUEST_COLUMNS = ["dataset", "ticker_symbol", "inclusive_start", "exclusive_end"]
MONTH_COLUMNS = ["ticker_symbol", "year_month"]
PRICE_COLUMNS = ["trading_date", "open_price", "high_price", "low_price", "close_price"]


def register(app: typer.Typer) -> None:
    """Register the history commands on the provided application."""

    app.command("fetch")(fetch_command)
    app.command("months")(months_command)
    app.command("pending")(pending_command)
    app.command("prices")(prices_command)


def get_history_service(options: CLIOptions) -> HistoryRetrievalService:
    """Factory hook for obtaining a :class:`HistoryRetrievalService` instance."""

    config = ConfigManager(options.config_path).get_config()
    configure_logging(
        level=options.log_level or config.logging.level,
        file_output=config.logging.file is not None,
        file_path=config.logging.file,
    )
    return HistoryRetrievalService.from_config(config)


def _run(ctx: typer.Context, operation: Callable[[HistoryRetrievalService], Awaitable[T]]) -> T:
    async def run(service: HistoryRetrievalService) -> T:
        try:
            return await operation(service)
        finally:
            await service.aclose()

    try:
        service = get_history_service(get_cli_options(ctx))
        return asyncio.run(run(service))
    except PriceHistError as error:
        raise fail(error) from error


def fetch_command(
    ctx: typer.Context,
    ticker: str = typer.Option(..., "--ticker", "-t", help="Ticker symbol to retrieve."),
    start: str = typer.Option(..., "--start", help="Inclusive start date (YYYY-MM-DD)."),
    end: str = typer.Option(..., "--end", help="Exclusive end date (YYYY-MM-DD)."),
    dataset: str = typer.Option("WIKI", "--dataset", "-d", help="Provider dataset code."),
) -> None:
    """Retrieve daily prices for a ticker, skipping months already stored."""

    inclusive_start = parse_date(start, "--start")
    exclusive_end = parse_date(end, "--end")
    if inclusive_start >= exclusive_end:
        raise typer.BadParameter("--start must be before --end", param_hint="--start")

    fulfilled = _run(ctx, lambda service: service.get_async(dataset, ticker, inclusive_start, exclusive_end))
    rows = [request.model_dump() for request in fulfilled]
    get_formatter(ctx).render(rows, stream=sys.stdout, columns=REQUEST_COLUMNS)


def months_command(
    ctx: typer.Context,
    ticker: str = typer.Option(..., "--ticker", "-t", help="Ticker symbol."),
    from_year: int | None = typer.Option(None, "--from-year", help="First year to list."),
    to_year: int | None = typer.Option(None, "--to-year", help="Last year to list."),
) -> None:
    """List the months recorded as fully retrieved."""

    async def load(service: HistoryRetrievalService):
        if from_year is None and to_year is None:
            return await service.retrieved_months.months(ticker)
        found = await service.retrieved_months.get(ticker, from_year or 1, to_year or 9999)
        return sorted(found, key=lambda month: month.year_month)

    months = _run(ctx, load)
    rows = [{"ticker_symbol": month.ticker_symbol, "year_month": str(month.year_month)} for month in months]
    get_formatter(ctx).render(rows, stream=sys.stdout, columns=MONTH_COLUMNS)


def pending_command(
    ctx: typer.Context,
    ticker: str = typer.Option(..., "--ticker", "-t", help="Ticker symbol."),
) -> None:
    """List requests lodged but not yet retrieved."""

    pending = _run(ctx, lambda service: service.pending_requests.requests(ticker))
    rows = [request.model_dump() for request in pending]
    get_formatter(ctx).render(rows, stream=sys.stdout, columns=REQUEST_COLUMNS)


def prices_command(
    ctx: typer.Context,
    ticker: str = typer.Option(..., "--ticker", "-t", help="Ticker symbol."),
    start: str = typer.Option(..., "--start", help="Inclusive start date (YYYY-MM-DD)."),
    end: str = typer.Option(..., "--end", help="Exclusive end date (YYYY-MM-DD)."),
) -> None:
    """Show stored daily prices."""

    inclusive_start = parse_date(start, "--start")
    exclusive_end = parse_date(end, "--end")

    prices = _run(ctx, lambda service: service.prices.prices(ticker, inclusive_start, exclusive_end))
    rows = [price.model_dump() for price in prices]
    get_formatter(ctx).render(rows, stream=sys.stdout, columns=PRICE_COLUMNS)


__all__ = ["get_history_service", "register"]
