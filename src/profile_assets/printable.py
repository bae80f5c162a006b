"""Printable HTML sheet linking the print-resolution QR codes."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

from jinja2 import Environment, BaseLoader, StrictUndefined

from .config import QRConfig, QRTarget


logger = logging.getLogger(__name__)

_ENV = Environment(
    loader=BaseLoader(),
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=StrictUndefined,
)

PRINTABLE_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ pet_name }}'s QR Codes - Printable</title>
  <style>
    @media print {
      @page { margin: 0.5in; size: letter; }
      .no-print { display: none; }
    }
    body { font-family: Arial, sans-serif; max-width: 8.5in; margin: 0 auto; padding: 20px; }
    .container { text-align: center; page-break-after: always; }
    .qr-section { border: 2px dashed #ccc; padding: 20px; margin: 20px 0; background: #f9f9f9; }
    h1 { color: #333; margin-bottom: 10px; }
    .url { font-family: monospace; color: #666; font-size: 14px; margin: 10px 0; }
    .instructions { background: #e3f2fd; border-left: 4px solid #2196f3; padding: 15px; margin: 20px 0; text-align: left; }
    .dog-emoji { font-size: 48px; margin: 20px 0; }
    img { max-width: 300px; height: auto; }
    .tag-size { border: 2px solid #f44336; padding: 20px; margin: 20px auto; max-width: 2in; background: white; }
    .tag-size img { max-width: 100%; }
    .tag-text { font-size: 10px; font-weight: bold; margin-top: 5px; }
  </style>
</head>
<body>
  <div class="container">
    <div class="dog-emoji">🐩</div>
    <h1>{{ pet_name }}'s Profile Page - QR Codes</h1>
    <p>Scan to view {{ pet_name }}'s emergency contact information</p>

    <div class="instructions no-print">
      <strong>📋 Instructions:</strong>
      <ul>
        <li>Print this page (Ctrl/Cmd + P)</li>
        <li>Cut out the collar tag section below</li>
        <li>Laminate or use clear tape to protect</li>
        <li>Attach to {{ pet_name }}'s collar or ID tag</li>
      </ul>
    </div>

{% for section in sections %}
    <div class="qr-section">
      <h2>{{ section.heading }}</h2>
      <img src="{{ section.src }}" alt="QR Code - {{ section.label }}" />
      <p class="url">{{ section.url }}</p>
{% if section.note %}
      <p style="font-size: 12px; color: #999;">{{ section.note }}</p>
{% endif %}
    </div>

{% endfor %}
{% if tag %}
    <div style="page-break-before: always;">
      <h2 class="no-print">✂️ Cut Here - Collar Tag</h2>
      <div class="tag-size">
        <img src="{{ tag.src }}" alt="{{ pet_name }} QR Code" />
        <div class="tag-text">
          SCAN ME<br>
          IF FOUND<br>
          🐩 {{ pet_name }}
        </div>
      </div>
      <p class="no-print" style="color: #666; font-size: 12px;">
        Suggested: Print on cardstock, laminate, and attach to collar with a split ring
      </p>
    </div>
{% endif %}
  </div>
</body>
</html>
"""


@dataclass(frozen=True)
class PrintableSheet:
    """
    The written sheet and the image files it links to.

    Attributes:
        path: Location of the HTML file
        references: Print renditions referenced by <img> tags, in page order
    """

    path: Path
    references: tuple[Path, ...]


def tag_target(config: QRConfig) -> QRTarget | None:
    """Target used for the collar tag; falls back to the first target."""
    for target in config.targets:
        if target.name == config.tag_target:
            return target
    return config.targets[0] if config.targets else None


def _section(config: QRConfig, target: QRTarget) -> dict[str, Any]:
    print_path = config.print_rendition().output_path(config.output_dir, config.stem(target))
    return {
        "label": target.label,
        "heading": target.heading or target.label,
        "note": target.note,
        "url": target.url,
        "src": print_path.name,
        "path": print_path,
    }


def render_printable(config: QRConfig) -> str:
    """Render the sheet HTML; image sources are relative to the output dir."""
    sections = [_section(config, t) for t in config.targets]
    tag = tag_target(config)
    return _ENV.from_string(PRINTABLE_TEMPLATE).render(
        pet_name=config.pet_name,
        sections=sections,
        tag=_section(config, tag) if tag is not None else None,
    )


def write_printable(config: QRConfig) -> PrintableSheet:
    """
    Write the printable sheet into the QR output directory.

    The file is written whether or not the referenced images exist.

    Parameters:
        config: QR pipeline settings

    Returns:
        PrintableSheet with the file path and referenced image paths
    """
    path = config.output_dir / config.printable_name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_printable(config), encoding="utf-8")

    refs = [_section(config, t)["path"] for t in config.targets]
    tag = tag_target(config)
    if tag is not None:
        tag_path = _section(config, tag)["path"]
        if tag_path not in refs:
            refs.append(tag_path)

    logger.info("printable_written", extra={"path": str(path), "references": len(refs)})
    return PrintableSheet(path=path, references=tuple(refs))
