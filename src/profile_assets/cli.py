"""
Profile assets CLI

Commands:
- qr: Generate QR codes and the printable sheet
- optimize-images: Resize and re-encode raw photos as WebP
- validate: Run the pre-deployment checklist
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from datetime import datetime, timezone

import typer
import logging

from profile_assets.config import (
    AssetsConfig,
    ConfigError,
    default_qr_targets,
    load_config,
)
from profile_assets.images import optimize_images
from profile_assets.pipeline import ConsoleReporter
from profile_assets.qrcodes import generate_qr_codes
from profile_assets.validation import Status, ValidationReport, validate_project

app = typer.Typer(add_completion=False, help="Build-time tooling for the pet profile site")


class JsonFormatter(logging.Formatter):
    """Simple JSON formatter for structured logs."""
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        # Include any custom attributes passed via `extra=`.
        reserved = {
            "name","msg","args","levelname","levelno","pathname","filename","module",
            "exc_info","exc_text","stack_info","lineno","funcName","created","msecs",
            "relativeCreated","thread","threadName","processName","process","taskName",
        }
        for k, v in record.__dict__.items():
            if k in reserved or k.startswith("_"):
                continue
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(level: str) -> logging.Logger:
    logger = logging.getLogger("profile_assets")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("profile_assets")


def _load(config_path: Path | None) -> AssetsConfig:
    try:
        return load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


def _fatal(e: Exception) -> typer.Exit:
    LOGGER.error("fatal_error", exc_info=e)
    typer.echo(f"Fatal error: {e}", err=True)
    return typer.Exit(code=1)


@app.command("qr")
def qr_cmd(
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Directory for QR images and the printable sheet"
    ),
    base_url: str | None = typer.Option(
        None, "--base-url", help="Site URL; replaces the targets with en/de/root under it"
    ),
    prefix: str | None = typer.Option(None, "--prefix", help="File name prefix for QR images"),
    config_path: Path | None = typer.Option(None, "--config", help="JSON config file"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level"),
) -> None:
    """
    Generate SVG, web PNG and print PNG QR codes for each target.

    Writes a printable HTML sheet next to the images after all targets
    are processed. Per-target failures are reported but don't change
    the exit code.

    Example:
        profile-assets qr --output-dir public/qr-codes
    """
    global LOGGER
    LOGGER = setup_logging(log_level)

    qr_config = _load(config_path).qr
    updates: dict[str, Any] = {}
    if output_dir is not None:
        updates["output_dir"] = output_dir.expanduser()
    if base_url is not None:
        updates["base_url"] = base_url
        updates["targets"] = default_qr_targets(base_url)
    if prefix is not None:
        updates["prefix"] = prefix
    qr_config = qr_config.model_copy(update=updates)

    try:
        generate_qr_codes(qr_config, ConsoleReporter())
    except Exception as e:
        raise _fatal(e)


@app.command("optimize-images")
def optimize_images_cmd(
    input_dir: Path | None = typer.Option(None, "--input-dir", "-i", help="Directory with raw images"),
    output_dir: Path | None = typer.Option(
        None, "--output-dir", "-o", help="Directory for optimized images"
    ),
    max_width: int | None = typer.Option(
        None, "--max-width", min=1, help="Maximum output width in pixels (never upscales)"
    ),
    quality: int | None = typer.Option(
        None, "--quality", min=1, max=100, help="WebP quality (1-100)"
    ),
    config_path: Path | None = typer.Option(None, "--config", help="JSON config file"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level"),
) -> None:
    """
    Resize raw images down to the maximum width and re-encode them as WebP.

    Creates the input directory if it doesn't exist. Per-image failures
    are reported but don't change the exit code.

    Example:
        profile-assets optimize-images --input-dir public/raw --output-dir public
    """
    global LOGGER
    LOGGER = setup_logging(log_level)

    image_config = _load(config_path).images
    updates: dict[str, Any] = {}
    if input_dir is not None:
        updates["input_dir"] = input_dir.expanduser()
    if output_dir is not None:
        updates["output_dir"] = output_dir.expanduser()
    rendition_updates: dict[str, Any] = {}
    if max_width is not None:
        rendition_updates["width"] = max_width
    if quality is not None:
        rendition_updates["quality"] = quality
    if rendition_updates:
        updates["rendition"] = image_config.rendition.model_copy(update=rendition_updates)
    image_config = image_config.model_copy(update=updates)

    try:
        optimize_images(image_config, ConsoleReporter())
    except Exception as e:
        raise _fatal(e)


_SYMBOLS = {
    Status.SUCCESS: ("✓", typer.colors.GREEN),
    Status.WARNING: ("⚠", typer.colors.YELLOW),
    Status.ERROR: ("✗", typer.colors.RED),
}


def print_report(report: ValidationReport) -> None:
    section = None
    for result in report.results:
        if result.section != section:
            if section is not None:
                typer.echo("")
            typer.echo(result.section)
            section = result.section
        symbol, color = _SYMBOLS[result.status]
        typer.echo(f"{typer.style(symbol, fg=color)} {result.message}")

    typer.echo(f"\n{'=' * 50}")
    if report.has_errors:
        typer.secho("❌ Validation FAILED", fg=typer.colors.RED)
        typer.echo("Please fix the errors above before deploying.")
    elif report.has_warnings:
        typer.secho("⚠️  Validation passed with warnings", fg=typer.colors.YELLOW)
        typer.echo("Consider addressing the warnings above.")
    else:
        typer.secho("✅ All validations passed!", fg=typer.colors.GREEN)
        typer.echo("Project is ready for deployment! 🚀")


@app.command("validate")
def validate_cmd(
    root: Path = typer.Option(Path("."), "--root", help="Project root to validate"),
    config_path: Path | None = typer.Option(None, "--config", help="JSON config file"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level"),
) -> None:
    """Run the pre-deployment checklist; exits 1 if any check is an error."""
    global LOGGER
    LOGGER = setup_logging(log_level)

    validation_config = _load(config_path).validation
    typer.echo("🔍 Running comprehensive project validation...\n")

    try:
        report = validate_project(root.expanduser(), validation_config)
    except Exception as e:
        raise _fatal(e)

    print_report(report)
    LOGGER.info(
        "validation_complete",
        extra={"errors": len(report.errors), "warnings": len(report.warnings)},
    )
    raise typer.Exit(code=report.exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
