"""Main entry point for the pricehist command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from pricehist.core.logging import configure_logging

from .formatters import create_formatter
from .history import register as register_history_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for pricehist."""

    app = typer.Typer(add_completion=False, help="Historical equity price backfill")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        config: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="TOML configuration file (defaults to ~/.pricehist/config.toml).",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            help="Logging level, overrides the configuration file.",
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            # Validate formatter eagerly for immediate feedback on invalid options
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "config_path": config,
                "log_level": log_level.upper() if log_level else None,
                "no_color": no_color,
            }
        )
        if log_level:
            configure_logging(level=log_level.upper())

    register_history_commands(app)
    return app


app = create_app()


def main() -> None:
    app()


__all__ = ["app", "create_app", "main"]
