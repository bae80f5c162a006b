"""
Configuration models for the asset pipelines and the validation checklist.

Every constant the build scripts rely on (QR targets, rendition sizes, image
quality, the validation checklist) lives here as a Pydantic model with
defaults, so runs can be reconfigured from a JSON file or CLI options and
tests can supply synthetic inputs.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator


DEFAULT_BASE_URL = "https://sorokoletovdu.github.io/ruby-profile"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or is invalid."""


class RenditionSpec(BaseModel):
    """
    One output format produced for every work item.

    Attributes:
        name: Short display name (e.g., "PNG (print)")
        kind: "vector" or "raster"
        width: Target width in pixels (nominal width for vector output)
        suffix: Appended to the file stem (e.g., "-print")
        extension: File extension without the dot
        quality: Encoder quality for lossy raster output
        effort: Encoder effort (0-6 for WebP)
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    kind: Literal["vector", "raster"]
    width: int | None = Field(default=None, gt=0)
    suffix: str = ""
    extension: str
    quality: int | None = Field(default=None, ge=1, le=100)
    effort: int | None = Field(default=None, ge=0, le=6)

    def output_path(self, output_dir: Path, stem: str) -> Path:
        """
        Deterministic output path for this rendition.

        Example:
            >>> spec = RenditionSpec(name="PNG (print)", kind="raster", width=1200,
            ...                      suffix="-print", extension="png")
            >>> spec.output_path(Path("out"), "ruby-profile-en")
            PosixPath('out/ruby-profile-en-print.png')
        """
        return output_dir / f"{stem}{self.suffix}.{self.extension}"


class QRTarget(BaseModel):
    """
    A named URL to encode as a QR code.

    `heading` and `note` are shown on the printable sheet; the heading
    falls back to `label`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    label: str
    heading: str | None = None
    note: str | None = None


def default_qr_targets(base_url: str = DEFAULT_BASE_URL) -> list[QRTarget]:
    """English, German and auto-redirect targets under `base_url`."""
    base = base_url.rstrip("/")
    return [
        QRTarget(
            name="en", url=f"{base}/en/", label="English", heading="🇬🇧 English Version"
        ),
        QRTarget(
            name="de", url=f"{base}/de/", label="German", heading="🇩🇪 German Version"
        ),
        QRTarget(
            name="root",
            url=f"{base}/",
            label="Auto-redirect",
            heading="🌐 Auto-Redirect (Recommended)",
            note="Automatically redirects to English",
        ),
    ]


DEFAULT_QR_RENDITIONS = [
    RenditionSpec(name="SVG", kind="vector", width=300, extension="svg"),
    RenditionSpec(name="PNG (web)", kind="raster", width=600, extension="png"),
    RenditionSpec(
        name="PNG (print)", kind="raster", width=1200, suffix="-print", extension="png"
    ),
]


class QRConfig(BaseModel):
    """Settings for the QR-code pipeline."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: str = DEFAULT_BASE_URL
    output_dir: Path = Path("public/qr-codes")
    prefix: str = "ruby-profile"
    targets: list[QRTarget] = Field(default_factory=default_qr_targets)
    renditions: list[RenditionSpec] = Field(
        default_factory=lambda: list(DEFAULT_QR_RENDITIONS)
    )
    margin: int = Field(default=2, ge=0)
    dark_color: str = "#000000"
    light_color: str = "#FFFFFF"
    printable_name: str = "printable.html"
    tag_target: str = "root"
    pet_name: str = "Ruby"

    @model_validator(mode="before")
    @classmethod
    def _targets_from_base_url(cls, data: Any) -> Any:
        if isinstance(data, dict) and "base_url" in data and "targets" not in data:
            data = {**data, "targets": default_qr_targets(data["base_url"])}
        return data

    @model_validator(mode="after")
    def _check_targets(self) -> "QRConfig":
        names = [t.name for t in self.targets]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate QR target names: {', '.join(duplicates)}")
        if not any(r.suffix == "-print" for r in self.renditions):
            raise ValueError("QR renditions must include a '-print' raster rendition")
        return self

    def stem(self, target: QRTarget) -> str:
        return f"{self.prefix}-{target.name}"

    def print_rendition(self) -> RenditionSpec:
        """The rendition referenced by the printable sheet."""
        return next(r for r in self.renditions if r.suffix == "-print")


class ImageConfig(BaseModel):
    """Settings for the image-optimization pipeline."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    input_dir: Path = Path("public/raw")
    output_dir: Path = Path("public")
    extensions: list[str] = Field(
        default_factory=lambda: [".jpg", ".jpeg", ".png", ".heic", ".heif", ".webp"]
    )
    rendition: RenditionSpec = RenditionSpec(
        name="WebP",
        kind="raster",
        width=1200,
        suffix="-optimized",
        extension="webp",
        quality=90,
        effort=6,
    )

    @property
    def max_width(self) -> int | None:
        """Maximum output width; None disables resizing."""
        return self.rendition.width

    def allows(self, path: Path) -> bool:
        allowed = {ext.lower() for ext in self.extensions}
        return path.suffix.lower() in allowed


class ContentFile(BaseModel):
    """A localized content file checked by the validator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: Path
    lang: str


class ValidationConfig(BaseModel):
    """Checklist items for pre-deployment validation (paths relative to root)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    build_files: list[Path] = Field(
        default_factory=lambda: [
            Path("dist/index.html"),
            Path("dist/en/index.html"),
            Path("dist/de/index.html"),
        ]
    )
    content_files: list[ContentFile] = Field(
        default_factory=lambda: [
            ContentFile(path=Path("src/content/ruby/en.md"), lang="English"),
            ContentFile(path=Path("src/content/ruby/de.md"), lang="German"),
        ]
    )
    emergency_sections: list[str] = Field(
        default_factory=lambda: ["Emergency Contacts", "Notfallkontakte"]
    )
    site_config: Path = Path("astro.config.mjs")
    public_dir: Path = Path("public")
    optimized_image: Path = Path("public/ruby-photo-optimized.webp")
    package_manifest: Path = Path("package.json")
    required_dependencies: list[str] = Field(
        default_factory=lambda: ["astro", "@astrojs/tailwind", "tailwindcss", "sharp"]
    )
    required_scripts: list[str] = Field(
        default_factory=lambda: ["dev", "build", "preview", "validate"]
    )
    workflows: list[Path] = Field(
        default_factory=lambda: [
            Path(".github/workflows/deploy.yml"),
            Path(".github/workflows/validate.yml"),
            Path(".github/workflows/optimize-images.yml"),
        ]
    )


class AssetsConfig(BaseModel):
    """Top-level configuration file layout."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    qr: QRConfig = Field(default_factory=QRConfig)
    images: ImageConfig = Field(default_factory=ImageConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)


def load_config(path: Path | None) -> AssetsConfig:
    """
    Load configuration from a JSON file.

    Parameters:
        path: Path to a JSON config file, or None for built-in defaults

    Returns:
        AssetsConfig model

    Raises:
        ConfigError: If the file is missing, not valid JSON, or doesn't
            match the configuration schema

    Example:
        >>> config = load_config(Path("assets.json"))
        >>> config.qr.output_dir
        PosixPath('public/qr-codes')
    """
    if path is None:
        return AssetsConfig()

    p = path.expanduser()
    try:
        data: Any = json.loads(p.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {p}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is not valid JSON: {p}: {e}") from e

    try:
        return AssetsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {p}:\n{e}") from e
