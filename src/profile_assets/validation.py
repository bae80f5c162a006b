"""
Pre-deployment validation of the site project.

Runs a fixed checklist against a project root: build output, localized
content files, site configuration, optimized images, package manifest and
CI workflows. Each check is independent and is classified as success,
warning or error; only errors fail the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import json
from pathlib import Path
import re
from typing import Callable

from .config import ContentFile, ValidationConfig


FRONTMATTER_TITLE = re.compile(r"^---\s*\ntitle:", re.MULTILINE)
PLACEHOLDER = re.compile(r"\[.*?\]")


class Status(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class CheckResult:
    """
    Outcome of a single check.

    Attributes:
        section: Checklist section the check belongs to
        status: success, warning or error
        message: Human-readable description
    """

    section: str
    status: Status
    message: str


def _ok(section: str, message: str) -> CheckResult:
    return CheckResult(section, Status.SUCCESS, message)


def _warn(section: str, message: str) -> CheckResult:
    return CheckResult(section, Status.WARNING, message)


def _err(section: str, message: str) -> CheckResult:
    return CheckResult(section, Status.ERROR, message)


BUILD = "📦 Checking build output..."
CONTENT = "📝 Validating content files..."
SITE_CONFIG = "⚙️  Validating configuration..."
IMAGES = "🖼️  Checking images..."
DEPENDENCIES = "📚 Checking dependencies..."
WORKFLOWS = "🔄 Checking GitHub workflows..."


def check_build_output(root: Path, config: ValidationConfig) -> list[CheckResult]:
    results: list[CheckResult] = []
    for rel in config.build_files:
        if (root / rel).exists():
            results.append(_ok(BUILD, f"Found {rel.as_posix()}"))
        else:
            results.append(
                _err(BUILD, f"Missing {rel.as_posix()} - run the site build first")
            )
    return results


def check_content_text(lang: str, text: str, emergency_sections: list[str]) -> list[CheckResult]:
    """
    Check the body of one content file.

    - Frontmatter must open with `---` followed by a `title:` line (error)
    - Bracketed placeholders such as `[PHONE NUMBER]` are reported (warning)
    - At least one emergency-contact heading should be present (warning)

    Parameters:
        lang: Language label used in messages
        text: File contents
        emergency_sections: Any one of these strings satisfies the check

    Returns:
        One result per check, in order
    """
    results: list[CheckResult] = []

    if FRONTMATTER_TITLE.search(text):
        results.append(_ok(CONTENT, f"{lang} content has valid frontmatter"))
    else:
        results.append(_err(CONTENT, f"{lang} content missing 'title' in frontmatter"))

    placeholders = PLACEHOLDER.findall(text)
    if placeholders:
        results.append(
            _warn(CONTENT, f"{lang} content has {len(placeholders)} unfilled placeholder(s)")
        )
    else:
        results.append(_ok(CONTENT, f"{lang} content has no placeholders"))

    if any(section in text for section in emergency_sections):
        results.append(_ok(CONTENT, f"{lang} content has emergency contact section"))
    else:
        results.append(
            _warn(CONTENT, f"{lang} content might be missing emergency contact section")
        )

    return results


def check_content_file(root: Path, content: ContentFile, config: ValidationConfig) -> list[CheckResult]:
    path = root / content.path
    if not path.exists():
        return [_err(CONTENT, f"Missing {content.lang} content file: {content.path.as_posix()}")]

    results = [_ok(CONTENT, f"Found {content.lang} content file")]
    text = path.read_text(encoding="utf-8", errors="replace")
    results.extend(check_content_text(content.lang, text, config.emergency_sections))
    return results


def check_content_files(root: Path, config: ValidationConfig) -> list[CheckResult]:
    results: list[CheckResult] = []
    for content in config.content_files:
        results.extend(check_content_file(root, content, config))
    return results


def check_site_config(root: Path, config: ValidationConfig) -> list[CheckResult]:
    path = root / config.site_config
    name = config.site_config.as_posix()
    if not path.exists():
        return [_err(SITE_CONFIG, f"Missing {name}")]

    results = [_ok(SITE_CONFIG, f"Found {name}")]
    text = path.read_text(encoding="utf-8", errors="replace")

    if "site:" in text and "base:" in text:
        results.append(_ok(SITE_CONFIG, "Site and base URL configured"))
    else:
        results.append(_warn(SITE_CONFIG, "Site or base URL might not be configured"))

    if "i18n:" in text:
        results.append(_ok(SITE_CONFIG, "i18n configuration found"))
    else:
        results.append(_err(SITE_CONFIG, "Missing i18n configuration"))

    return results


def check_images(root: Path, config: ValidationConfig) -> list[CheckResult]:
    if not (root / config.public_dir).exists():
        return [_warn(IMAGES, "Public directory not found")]

    results = [_ok(IMAGES, "Public directory exists")]
    if (root / config.optimized_image).exists():
        results.append(_ok(IMAGES, "Found optimized WebP image"))
    else:
        results.append(
            _warn(IMAGES, "No optimized images found - run image optimization workflow")
        )
    return results


def check_dependencies(root: Path, config: ValidationConfig) -> list[CheckResult]:
    path = root / config.package_manifest
    name = config.package_manifest.as_posix()
    if not path.exists():
        return [_err(DEPENDENCIES, f"Missing {name}")]

    try:
        pkg = json.loads(path.read_text(encoding="utf-8", errors="replace"))
    except json.JSONDecodeError as e:
        return [_err(DEPENDENCIES, f"{name} is not valid JSON: {e}")]
    if not isinstance(pkg, dict):
        return [_err(DEPENDENCIES, f"{name} must contain a JSON object")]

    results: list[CheckResult] = []
    dependencies = pkg.get("dependencies")
    scripts = pkg.get("scripts")
    if dependencies is None:
        dependencies = {}
    elif not isinstance(dependencies, dict):
        results.append(_err(DEPENDENCIES, f"'dependencies' in {name} must be an object"))
        dependencies = {}
    if scripts is None:
        scripts = {}
    elif not isinstance(scripts, dict):
        results.append(_err(DEPENDENCIES, f"'scripts' in {name} must be an object"))
        scripts = {}

    for dep in config.required_dependencies:
        if dependencies.get(dep):
            results.append(_ok(DEPENDENCIES, f"Found dependency: {dep}"))
        else:
            results.append(_err(DEPENDENCIES, f"Missing dependency: {dep}"))

    for script in config.required_scripts:
        if scripts.get(script):
            results.append(_ok(DEPENDENCIES, f"Found script: {script}"))
        else:
            results.append(_warn(DEPENDENCIES, f"Missing script: {script}"))

    return results


def check_workflows(root: Path, config: ValidationConfig) -> list[CheckResult]:
    results: list[CheckResult] = []
    for rel in config.workflows:
        if (root / rel).exists():
            results.append(_ok(WORKFLOWS, f"Found {rel.as_posix()}"))
        else:
            results.append(_warn(WORKFLOWS, f"Missing {rel.as_posix()}"))
    return results


CHECKS: list[Callable[[Path, ValidationConfig], list[CheckResult]]] = [
    check_build_output,
    check_content_files,
    check_site_config,
    check_images,
    check_dependencies,
    check_workflows,
]


@dataclass(frozen=True)
class ValidationReport:
    """All check results in checklist order."""

    results: tuple[CheckResult, ...]

    @property
    def errors(self) -> list[CheckResult]:
        return [r for r in self.results if r.status is Status.ERROR]

    @property
    def warnings(self) -> list[CheckResult]:
        return [r for r in self.results if r.status is Status.WARNING]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def exit_code(self) -> int:
        return 1 if self.has_errors else 0


def validate_project(root: Path, config: ValidationConfig | None = None) -> ValidationReport:
    """
    Run the full checklist against a project root.

    Parameters:
        root: Project directory; all checklist paths are relative to it
        config: Checklist items (defaults if omitted)

    Returns:
        ValidationReport with results in fixed section order

    Example:
        >>> report = validate_project(Path("."))
        >>> for r in report.errors:
        ...     print(r.message)
    """
    config = config or ValidationConfig()
    results: list[CheckResult] = []
    for check in CHECKS:
        results.extend(check(root, config))
    return ValidationReport(results=tuple(results))
