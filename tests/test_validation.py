"""Tests for the pre-deployment validation checklist."""

import json
from pathlib import Path
import shutil
import tempfile

from profile_assets import validation
from profile_assets.config import ValidationConfig
from profile_assets.validation import (
    Status,
    check_content_text,
    check_dependencies,
    check_site_config,
    validate_project,
)


FIXTURES_DIR = Path(__file__).parent / "fixtures"
CONTENT_DIR = FIXTURES_DIR / "content"

SITE_CONFIG = """\
export default defineConfig({
  site: 'https://example.github.io',
  base: '/ruby-profile',
  i18n: { defaultLocale: "en", locales: ["en", "de"] }
});
"""

PACKAGE_JSON = {
    "dependencies": {
        "astro": "^4.0.0",
        "@astrojs/tailwind": "^5.0.0",
        "tailwindcss": "^3.4.0",
        "sharp": "^0.33.0",
    },
    "scripts": {"dev": "astro dev", "build": "astro build", "preview": "astro preview", "validate": "x"},
}


def _touch(path: Path, text: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def build_project(root: Path) -> None:
    """Create a project tree that passes every check."""
    for rel in ("dist/index.html", "dist/en/index.html", "dist/de/index.html"):
        _touch(root / rel, "<html></html>")
    content = root / "src/content/ruby"
    content.mkdir(parents=True)
    shutil.copy(CONTENT_DIR / "en_complete.md", content / "en.md")
    shutil.copy(CONTENT_DIR / "de_complete.md", content / "de.md")
    _touch(root / "astro.config.mjs", SITE_CONFIG)
    _touch(root / "public/ruby-photo-optimized.webp", "webp")
    _touch(root / "package.json", json.dumps(PACKAGE_JSON))
    for name in ("deploy.yml", "validate.yml", "optimize-images.yml"):
        _touch(root / ".github/workflows" / name, "on: push")


def _statuses(results):
    return [r.status for r in results]


class TestContentText:
    """Tests for check_content_text()."""

    def test_complete_content_passes(self):
        """Test that a complete file has only successes."""
        text = (CONTENT_DIR / "en_complete.md").read_text()
        results = check_content_text("English", text, ["Emergency Contacts", "Notfallkontakte"])

        assert _statuses(results) == [Status.SUCCESS] * 3

    def test_missing_title_is_error(self):
        """Test that frontmatter without title: is an error."""
        text = (CONTENT_DIR / "missing_title.md").read_text()
        results = check_content_text("English", text, ["Emergency Contacts"])

        assert results[0].status is Status.ERROR
        assert "title" in results[0].message

    def test_placeholders_are_warning_not_error(self):
        """Test that bracketed placeholders only warn, with a count."""
        text = (CONTENT_DIR / "en_placeholders.md").read_text()
        results = check_content_text("English", text, ["Emergency Contacts"])

        assert results[1].status is Status.WARNING
        assert "3 unfilled placeholder(s)" in results[1].message
        assert Status.ERROR not in _statuses(results)

    def test_missing_emergency_section_is_warning(self):
        """Test that a missing emergency section only warns."""
        text = (CONTENT_DIR / "no_emergency_section.md").read_text()
        results = check_content_text("English", text, ["Emergency Contacts", "Notfallkontakte"])

        assert results[2].status is Status.WARNING

    def test_german_section_accepted(self):
        """Test that the German heading satisfies the emergency check."""
        text = (CONTENT_DIR / "de_complete.md").read_text()
        results = check_content_text("German", text, ["Emergency Contacts", "Notfallkontakte"])

        assert results[2].status is Status.SUCCESS


class TestSiteConfig:
    """Tests for check_site_config()."""

    def test_missing_i18n_is_error(self):
        """Test that a config without i18n: is an error."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _touch(root / "astro.config.mjs", "export default { site: 'x', base: '/y' }")

            results = check_site_config(root, ValidationConfig())

        assert _statuses(results) == [Status.SUCCESS, Status.SUCCESS, Status.ERROR]

    def test_missing_base_is_warning(self):
        """Test that a config without base: only warns."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _touch(root / "astro.config.mjs", "export default { site: 'x', i18n: {} }")

            results = check_site_config(root, ValidationConfig())

        assert _statuses(results) == [Status.SUCCESS, Status.WARNING, Status.SUCCESS]


class TestDependencies:
    """Tests for check_dependencies()."""

    def test_missing_dependency_is_error_missing_script_is_warning(self):
        """Test dependency vs script severity."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            pkg = {"dependencies": {"astro": "4"}, "scripts": {"dev": "astro dev"}}
            _touch(root / "package.json", json.dumps(pkg))

            results = check_dependencies(root, ValidationConfig())

        errors = [r.message for r in results if r.status is Status.ERROR]
        warnings = [r.message for r in results if r.status is Status.WARNING]
        assert errors == [
            "Missing dependency: @astrojs/tailwind",
            "Missing dependency: tailwindcss",
            "Missing dependency: sharp",
        ]
        assert warnings == [
            "Missing script: build",
            "Missing script: preview",
            "Missing script: validate",
        ]

    def test_invalid_json_is_error(self):
        """Test that an unparseable manifest is reported, not raised."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _touch(root / "package.json", "{oops")

            results = check_dependencies(root, ValidationConfig())

        assert len(results) == 1
        assert results[0].status is Status.ERROR

    def test_no_dependencies_key(self):
        """Test that a manifest without dependencies reports each as missing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _touch(root / "package.json", "{}")

            results = check_dependencies(root, ValidationConfig())

        assert sum(1 for r in results if r.status is Status.ERROR) == 4

    def test_non_object_sections_are_errors(self):
        """Test that list-valued dependencies and scripts are reported, not raised."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            _touch(root / "package.json", json.dumps({"dependencies": [], "scripts": ["x"]}))

            results = check_dependencies(root, ValidationConfig())

        messages = [r.message for r in results]
        assert messages[:2] == [
            "'dependencies' in package.json must be an object",
            "'scripts' in package.json must be an object",
        ]
        assert sum(1 for r in results if r.status is Status.ERROR) == 6
        assert sum(1 for r in results if r.status is Status.WARNING) == 4


class TestValidateProject:
    """Tests for validate_project()."""

    def test_complete_project_passes(self):
        """Test that a complete project has no errors or warnings."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            build_project(root)

            report = validate_project(root)

        assert not report.has_errors
        assert not report.has_warnings
        assert report.exit_code == 0

    def test_empty_project_fails(self):
        """Test that an empty directory fails with exit code 1."""
        with tempfile.TemporaryDirectory() as tmpdir:
            report = validate_project(Path(tmpdir))

        assert report.has_errors
        assert report.exit_code == 1

    def test_warnings_only_exit_zero(self):
        """Test that warnings alone don't fail the run."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            build_project(root)
            shutil.copy(CONTENT_DIR / "en_placeholders.md", root / "src/content/ruby/en.md")
            (root / ".github/workflows/deploy.yml").unlink()

            report = validate_project(root)

        assert report.has_warnings
        assert not report.has_errors
        assert report.exit_code == 0
        assert len(report.warnings) == 2

    def test_missing_title_fails_run(self):
        """Test that a content file without title: fails validation."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            build_project(root)
            shutil.copy(CONTENT_DIR / "missing_title.md", root / "src/content/ruby/de.md")

            report = validate_project(root)

        assert report.exit_code == 1
        assert [r.message for r in report.errors] == ["German content missing 'title' in frontmatter"]

    def test_non_utf8_content_is_checked(self):
        """Test that a Latin-1 content file is classified instead of raising."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            build_project(root)
            (root / "src/content/ruby/de.md").write_bytes(
                "---\ntitle: Straße\n---\n## Notfallkontakte\n".encode("latin-1")
            )

            report = validate_project(root)

        german = [r for r in report.results if r.message.startswith("German")]
        assert _statuses(german) == [Status.SUCCESS, Status.SUCCESS, Status.SUCCESS]
        assert not report.has_errors

    def test_missing_content_file_skips_its_checks(self):
        """Test that a missing content file yields a single error for it."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            build_project(root)
            (root / "src/content/ruby/de.md").unlink()

            report = validate_project(root)

        german = [r for r in report.results if r.message.startswith(("German", "Missing German"))]
        assert len(german) == 1
        assert german[0].status is Status.ERROR

    def test_sections_in_fixed_order(self):
        """Test that results come out in checklist section order."""
        with tempfile.TemporaryDirectory() as tmpdir:
            report = validate_project(Path(tmpdir))

        sections: list[str] = []
        for r in report.results:
            if not sections or sections[-1] != r.section:
                sections.append(r.section)
        assert sections == [
            validation.BUILD,
            validation.CONTENT,
            validation.SITE_CONFIG,
            validation.IMAGES,
            validation.DEPENDENCIES,
            validation.WORKFLOWS,
        ]
