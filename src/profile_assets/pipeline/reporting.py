"""
Console reporting for batch runs.

Pipelines talk to a `Reporter` rather than printing directly, so tests can
collect what would have been shown and the CLI decides on exit codes.
"""

from __future__ import annotations

from typing import Protocol

import typer

from .batch import ItemOutcome, RunSummary


class Reporter(Protocol):
    """Minimal interface for run progress output."""

    def heading(self, message: str) -> None:
        ...

    def info(self, message: str) -> None:
        ...

    def success(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def item(self, label: str, outcome: ItemOutcome) -> None:
        ...

    def summary(self, summary: RunSummary, *, done: str) -> None:
        ...


class ConsoleReporter:
    """Symbol-prefixed, coloured console output via typer."""

    def heading(self, message: str) -> None:
        typer.secho(message, bold=True)

    def info(self, message: str) -> None:
        typer.echo(message)

    def success(self, message: str) -> None:
        typer.secho(f"✅ {message}", fg=typer.colors.GREEN)

    def warning(self, message: str) -> None:
        typer.secho(f"⚠️  {message}", fg=typer.colors.YELLOW)

    def item(self, label: str, outcome: ItemOutcome) -> None:
        if outcome.succeeded:
            typer.secho(f"  ✅ {label}", fg=typer.colors.GREEN)
            for note in outcome.notes:
                typer.echo(f"     {note}")
        else:
            typer.secho(
                f"  ❌ Error processing {label}: {outcome.error_message}",
                fg=typer.colors.RED,
                err=True,
            )

    def summary(self, summary: RunSummary, *, done: str) -> None:
        typer.echo(f"\n{'=' * 60}")
        typer.echo("📊 Summary:")
        typer.echo(f"   Items: {summary.total_items}")
        typer.secho(f"   ✅ Succeeded: {summary.success_count}", fg=typer.colors.GREEN)
        if summary.failure_count:
            typer.secho(f"   ❌ Errors: {summary.failure_count}", fg=typer.colors.RED)
        typer.secho(f"\n🎉 {done}", bold=True)
