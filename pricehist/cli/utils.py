"""Utility helpers shared across CLI commands."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import typer

from pricehist.core.exceptions import ConfigurationError, PriceHistError, RetrievalError

from .constants import CONFIGURATION_EXIT_CODE, RETRIEVAL_EXIT_CODE, SYSTEM_EXIT_CODE
from .formatters import OutputFormatter, create_formatter


@dataclass(slots=True)
class CLIOptions:
    """Resolved options derived from the Typer context."""

    format: str = "table"
    no_color: bool = False
    config_path: Path | None = None
    log_level: str | None = None


def get_cli_options(ctx: typer.Context) -> CLIOptions:
    """Extract :class:`CLIOptions` from the Typer context object."""

    ctx.ensure_object(dict)
    data = ctx.obj or {}
    return CLIOptions(
        format=str(data.get("format", "table")),
        no_color=bool(data.get("no_color", False)),
        config_path=data.get("config_path"),
        log_level=data.get("log_level"),
    )


def get_formatter(ctx: typer.Context) -> OutputFormatter:
    options = get_cli_options(ctx)
    return create_formatter(options.format, no_color=options.no_color)


def parse_date(value: str, param_hint: str) -> date:
    """Parse a YYYY-MM-DD option value."""

    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"'{value}' is not a YYYY-MM-DD date", param_hint=param_hint) from exc


def exit_code_for(error: PriceHistError) -> int:
    if isinstance(error, ConfigurationError):
        return CONFIGURATION_EXIT_CODE
    if isinstance(error, RetrievalError):
        return RETRIEVAL_EXIT_CODE
    return SYSTEM_EXIT_CODE


def emit_error(message: str, code: str, *, details: Mapping[str, object] | None = None) -> None:
    """Print a structured error payload to stderr."""

    payload: dict[str, object] = {"code": code, "message": message}
    if details:
        payload["details"] = _sanitize_details(details)
    typer.echo(json.dumps(payload, ensure_ascii=False, default=str), err=True)


def fail(error: PriceHistError) -> typer.Exit:
    """Report ``error`` on stderr and return the matching :class:`typer.Exit`."""

    emit_error(error.message, error.error_code, details=error.details)
    return typer.Exit(code=exit_code_for(error))


def _sanitize_details(details: Mapping[str, object]) -> Mapping[str, object]:
    sanitized: dict[str, object] = {}
    for key, value in details.items():
        if isinstance(value, (str, int, float, bool)) or value is None:
            sanitized[key] = value
        elif isinstance(value, Mapping):
            sanitized[key] = {str(k): str(v) for k, v in value.items()}
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
            sanitized[key] = [str(item) for item in value]
        else:
            sanitized[key] = str(value)
    return sanitized


__all__ = ["CLIOptions", "emit_error", "exit_code_for", "fail", "get_cli_options", "get_formatter", "parse_date"]
