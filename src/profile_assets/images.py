"""
Raster image optimization for the profile page.

Every image in the source directory whose extension is allow-listed is
resized down to the configured maximum width (never enlarged), re-encoded
as WebP and written as `<stem>-optimized.webp` into the output directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path

from PIL import Image

from .config import ImageConfig
from .pipeline import ItemOutcome, Rendered, Reporter, RunSummary, run_batch, summarize


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceImage:
    """A discovered image file and the stem used for its output name."""

    source_path: Path
    base_name: str

    @classmethod
    def from_path(cls, path: Path) -> "SourceImage":
        return cls(source_path=path, base_name=path.stem)


@dataclass(frozen=True)
class OptimizedImage:
    """
    Before/after metadata for one optimized image.

    Attributes:
        source: The input image
        output_path: Written WebP file
        original_size: (width, height) of the input
        original_bytes: File size of the input
        optimized_size: (width, height) read back from the output
        optimized_bytes: File size of the output
    """

    source: SourceImage
    output_path: Path
    original_size: tuple[int, int]
    original_bytes: int
    optimized_size: tuple[int, int]
    optimized_bytes: int

    @property
    def compression_ratio(self) -> float:
        """Percent reduction in file size: (1 - out/in) * 100."""
        if self.original_bytes == 0:
            return 0.0
        return (1 - self.optimized_bytes / self.original_bytes) * 100

    def notes(self) -> tuple[str, ...]:
        ow, oh = self.original_size
        nw, nh = self.optimized_size
        return (
            f"Saved: {self.output_path.name}",
            f"Original: {ow}x{oh} ({self.original_bytes / 1024:.1f} KB)",
            f"Optimized: {nw}x{nh} ({self.optimized_bytes / 1024:.1f} KB)",
            f"Compression: {self.compression_ratio:.1f}% reduction",
        )


@dataclass
class ImageRun:
    """Outcomes and totals for one optimization run."""

    outcomes: list[ItemOutcome] = field(default_factory=list)
    summary: RunSummary = field(default_factory=RunSummary)
    created_input_dir: bool = False


def target_size(width: int, height: int, max_width: int | None) -> tuple[int, int]:
    """
    Size after a down-only resize to `max_width`, keeping aspect ratio.

    A `max_width` of None keeps the original size.

    Example:
        >>> target_size(2400, 1600, 1200)
        (1200, 800)
        >>> target_size(800, 600, 1200)
        (800, 600)
    """
    if max_width is None or width <= max_width:
        return width, height
    return max_width, max(1, round(height * max_width / width))


def ensure_input_dir(input_dir: Path) -> bool:
    """Create the source directory if needed; returns True if it was created."""
    if input_dir.exists():
        return False
    input_dir.mkdir(parents=True, exist_ok=True)
    logger.info("source_dir_created", extra={"input_dir": str(input_dir)})
    return True


def discover_images(config: ImageConfig) -> list[SourceImage]:
    """
    List allow-listed image files in the source directory, sorted by name.

    Directories and files with other extensions are skipped. The extension
    comparison is case-insensitive.
    """
    return [
        SourceImage.from_path(p)
        for p in sorted(config.input_dir.iterdir())
        if p.is_file() and config.allows(p)
    ]


def optimize_image(source: SourceImage, config: ImageConfig) -> OptimizedImage:
    """
    Resize and re-encode one image.

    Parameters:
        source: Image to optimize
        config: Image pipeline settings

    Returns:
        OptimizedImage with before/after metadata

    Raises:
        OSError: If the image can't be read or the output can't be written
        PIL.UnidentifiedImageError: If the file isn't a supported image
    """
    spec = config.rendition
    out = spec.output_path(config.output_dir, source.base_name)
    original_bytes = source.source_path.stat().st_size

    with Image.open(source.source_path) as im:
        original_size = im.size
        img = im
        if img.mode not in ("RGB", "RGBA"):
            has_alpha = "A" in img.getbands() or "transparency" in img.info
            img = img.convert("RGBA" if has_alpha else "RGB")
        new_size = target_size(img.width, img.height, config.max_width)
        if new_size != img.size:
            img = img.resize(new_size, Image.Resampling.LANCZOS)

        save_kwargs = {}
        if spec.quality is not None:
            save_kwargs["quality"] = spec.quality
        if spec.effort is not None:
            save_kwargs["method"] = spec.effort
        img.save(out, **save_kwargs)

    with Image.open(out) as written:
        optimized_size = written.size
    optimized_bytes = out.stat().st_size

    return OptimizedImage(
        source=source,
        output_path=out,
        original_size=original_size,
        original_bytes=original_bytes,
        optimized_size=optimized_size,
        optimized_bytes=optimized_bytes,
    )


def _render(source: SourceImage, config: ImageConfig) -> Rendered:
    result = optimize_image(source, config)
    return Rendered(paths=(result.output_path,), notes=result.notes())


def optimize_images(config: ImageConfig, reporter: Reporter) -> ImageRun:
    """
    Optimize every image in the source directory.

    A missing source directory is created and the run ends with nothing
    to do. Per-image failures are recorded and don't stop the run.

    Parameters:
        config: Image pipeline settings
        reporter: Receives progress and summary output

    Returns:
        ImageRun with per-image outcomes

    Raises:
        OSError: If the source or output directory can't be created or listed

    Example:
        >>> run = optimize_images(ImageConfig(), ConsoleReporter())
        >>> print(run.summary.failure_count)
    """
    reporter.heading("🖼️  Starting image optimization...")

    if ensure_input_dir(config.input_dir):
        reporter.warning(f"Input directory {config.input_dir} does not exist. Created it.")
        reporter.success(f"Add images to {config.input_dir}/ and run again.")
        return ImageRun(created_input_dir=True)

    config.output_dir.mkdir(parents=True, exist_ok=True)

    items = discover_images(config)
    if not items:
        reporter.warning(f"No images found in {config.input_dir}/ - nothing to do.")
        return ImageRun()

    reporter.info(f"📸 Found {len(items)} image(s) to optimize")

    outcomes = run_batch(
        items,
        lambda source: _render(source, config),
        on_outcome=lambda o: reporter.item(o.item.source_path.name, o),
        describe=lambda source: str(source.source_path),
    )

    summary = summarize(outcomes)
    logger.info(
        "batch_complete",
        extra={
            "pipeline": "images",
            "total": summary.total_items,
            "succeeded": summary.success_count,
            "failed": summary.failure_count,
        },
    )
    reporter.summary(summary, done="Image optimization complete!")
    return ImageRun(outcomes=outcomes, summary=summary)
