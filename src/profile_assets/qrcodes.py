"""
QR-code generation for the profile page.

Each configured target URL is encoded into three renditions (SVG, web PNG,
print PNG). Renditions for one target are written in order; the first one
that raises fails the whole target and the batch moves on to the next.
After the loop the printable sheet is always written.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Callable
import xml.etree.ElementTree as ET

import qrcode
from qrcode.image.pil import PilImage
from qrcode.image.svg import SvgPathImage
from PIL import Image

from .config import QRConfig, QRTarget, RenditionSpec
from .pipeline import ItemOutcome, Rendered, Reporter, RunSummary, run_batch, summarize
from .printable import write_printable


logger = logging.getLogger(__name__)

# Box size for SVG output; the root element's width/height are overridden
# with the rendition width, the viewBox keeps the geometry.
SVG_BOX_SIZE = 10

RenditionRenderer = Callable[[str, Path, RenditionSpec, QRConfig], None]


@dataclass
class QRRun:
    """
    Result of a QR generation run.

    Attributes:
        outcomes: One outcome per target, in target order
        summary: Folded totals
        printable_path: Path of the printable HTML sheet
        missing_references: Print images the sheet links to that don't exist
    """

    outcomes: list[ItemOutcome]
    summary: RunSummary
    printable_path: Path
    missing_references: list[Path]


def _build_qr(data: str, *, margin: int, box_size: int) -> qrcode.QRCode:
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=margin,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr


def render_raster(url: str, path: Path, spec: RenditionSpec, config: QRConfig) -> None:
    """Write a PNG of exactly `spec.width` pixels square."""
    qr = _build_qr(url, margin=config.margin, box_size=1)
    img = qr.make_image(
        image_factory=PilImage,
        fill_color=config.dark_color,
        back_color=config.light_color,
    )
    pil = img.get_image().convert("RGB")
    if spec.width is not None and pil.size != (spec.width, spec.width):
        pil = pil.resize((spec.width, spec.width), Image.Resampling.NEAREST)
    pil.save(path, format="PNG")


def render_vector(url: str, path: Path, spec: RenditionSpec, config: QRConfig) -> None:
    """Write an SVG with its nominal size set to `spec.width` pixels."""
    qr = _build_qr(url, margin=config.margin, box_size=SVG_BOX_SIZE)
    img = qr.make_image(image_factory=SvgPathImage)
    root = img.get_image()
    if spec.width is not None:
        root.set("width", f"{spec.width}px")
        root.set("height", f"{spec.width}px")
    # Background goes first so the modules are painted over it.
    root.insert(
        0,
        ET.Element(
            "rect", x="0", y="0", width="100%", height="100%", fill=config.light_color
        ),
    )
    img.path.set("fill", config.dark_color)
    with path.open("wb") as f:
        img.save(f)


def render_rendition(url: str, path: Path, spec: RenditionSpec, config: QRConfig) -> None:
    if spec.kind == "vector":
        render_vector(url, path, spec, config)
    else:
        render_raster(url, path, spec, config)


def render_target(
    target: QRTarget,
    config: QRConfig,
    render: RenditionRenderer = render_rendition,
) -> Rendered:
    """
    Write every configured rendition for one target.

    Parameters:
        target: QR target to encode
        config: QR pipeline settings
        render: Writes a single rendition (injectable for tests)

    Returns:
        Rendered with the written paths in rendition order

    Raises:
        Exception: Whatever the first failing rendition raised; later
            renditions for the target are not attempted
    """
    stem = config.stem(target)
    paths: list[Path] = []
    notes: list[str] = []
    for spec in config.renditions:
        out = spec.output_path(config.output_dir, stem)
        render(target.url, out, spec, config)
        paths.append(out)
        notes.append(f"- {spec.name}: {out}")
    return Rendered(paths=tuple(paths), notes=tuple(notes))


def generate_qr_codes(
    config: QRConfig,
    reporter: Reporter,
    *,
    render: RenditionRenderer = render_rendition,
) -> QRRun:
    """
    Generate QR renditions for every target, then the printable sheet.

    Parameters:
        config: QR pipeline settings
        reporter: Receives progress and summary output
        render: Writes a single rendition (injectable for tests)

    Returns:
        QRRun with per-target outcomes and the printable sheet path

    Raises:
        OSError: If the output directory can't be created or the printable
            sheet can't be written

    Example:
        >>> run = generate_qr_codes(QRConfig(), ConsoleReporter())
        >>> run.summary.success_count
        3
    """
    reporter.heading("🔲 Generating QR codes...")
    config.output_dir.mkdir(parents=True, exist_ok=True)

    outcomes = run_batch(
        config.targets,
        lambda target: render_target(target, config, render),
        on_outcome=lambda o: reporter.item(f"{o.item.label}: {o.item.url}", o),
        describe=lambda target: target.name,
    )

    sheet = write_printable(config)
    missing = [p for p in sheet.references if not p.exists()]
    for ref in missing:
        reporter.warning(f"Printable sheet references a missing image: {ref}")

    summary = summarize(outcomes)
    logger.info(
        "batch_complete",
        extra={
            "pipeline": "qr",
            "total": summary.total_items,
            "succeeded": summary.success_count,
            "failed": summary.failure_count,
        },
    )
    reporter.summary(summary, done="QR code generation complete!")
    reporter.info(f"\n📄 Printable version: {sheet.path}")
    reporter.info(
        f"   Open this file in a browser and print it for {config.pet_name}'s collar tag!"
    )

    return QRRun(
        outcomes=outcomes,
        summary=summary,
        printable_path=sheet.path,
        missing_references=missing,
    )
