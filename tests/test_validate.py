"""Tests for site validation."""

from __future__ import annotations

from pathlib import Path

from conftest import write_doc
from docshelf.config import NavItem, SiteConfig
from docshelf.engine import DocsEngine
from docshelf.validate import collect_nav_hrefs, validate, validate_config


def _messages(issues, severity: str) -> list[str]:
    return [issue.message for issue in issues if issue.severity == severity]


class TestValidateConfig:
    def test_name_required(self) -> None:
        issues = validate_config(SiteConfig(name="  ", navigation=[NavItem(title="a", href="/docs/a")]))

        assert _messages(issues, "error") == ["Config: 'name' is required."]

    def test_empty_navigation_warns(self) -> None:
        assert _messages(validate_config(SiteConfig()), "warning") == [
            "Config: 'navigation' is empty. No sidebar links will render."
        ]

    def test_colors(self) -> None:
        config = SiteConfig(
            navigation=[NavItem(title="a", href="/docs/a")],
            colors={"primary": "#6366f1", "accent": "blue", "dark": {"text": "#zzz"}},
        )

        errors = _messages(validate_config(config), "error")

        assert errors == [
            'Config: colors.accent "blue" is not a valid hex color.',
            'Config: colors.dark.text "#zzz" is not a valid hex color.',
        ]

    def test_collect_nav_hrefs(self) -> None:
        nav = [NavItem(title="a", href="/a", children=[NavItem(title="b", href="/b")])]

        assert collect_nav_hrefs(nav) == ["/a", "/b"]


class TestValidate:
    """Test the full validation run."""

    def _engine(self, root: Path, **kwargs) -> DocsEngine:
        return DocsEngine.from_config(SiteConfig(content_dir=root, **kwargs), watch=False)

    def test_clean_site(self, content_dir: Path) -> None:
        nav = [
            NavItem(title="Install", href="/docs/installation"),
            NavItem(title="External", href="https://example.com"),
        ]

        assert validate(self._engine(content_dir, navigation=nav)) == []

    def test_missing_content_dir(self, tmp_path: Path) -> None:
        issues = validate(self._engine(tmp_path / "absent", navigation=[NavItem(title="a", href="/x")]))

        assert _messages(issues, "error") == [f"Content directory not found: {tmp_path / 'absent'}"]

    def test_no_documents(self, tmp_path: Path) -> None:
        issues = validate(self._engine(tmp_path))

        assert "No markdown files found in content directory." in _messages(issues, "warning")

    def test_untitled_page(self, tmp_path: Path) -> None:
        write_doc(tmp_path, "bare.md", "# no frontmatter")

        issues = validate(self._engine(tmp_path))

        assert "bare: Missing or empty 'title' in frontmatter." in _messages(issues, "warning")

    def test_broken_nav_link(self, content_dir: Path) -> None:
        nav = [NavItem(title="Gone", href="/docs/removed")]

        issues = validate(self._engine(content_dir, navigation=nav))

        assert _messages(issues, "error") == ['Navigation link "/docs/removed" does not match any document.']
