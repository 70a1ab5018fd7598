"""Tests for site configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from docshelf.config import (
    DEFAULT_API_URL,
    NO_WATCH_ENV,
    DocsContext,
    SiteConfig,
    config_from_mapping,
    load_config,
    normalize_base_path,
    watch_disabled,
)
from docshelf.errors import ConfigError


class TestSiteConfig:
    """Test SiteConfig dataclass."""

    def test_default_config(self) -> None:
        config = SiteConfig()

        assert config.name == "Docs"
        assert config.content_dir == Path("content/docs")
        assert config.base_path == "/docs"
        assert config.ai is None
        assert config.excerpt_chars == 500
        assert config.watch is True

    def test_base_path_normalized(self) -> None:
        assert SiteConfig(base_path="reference/").base_path == "/reference"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("/docs", "/docs"), ("docs", "/docs"), ("/docs/", "/docs"), ("/", "/")],
    )
    def test_normalize_base_path(self, raw: str, expected: str) -> None:
        assert normalize_base_path(raw) == expected


class TestConfigFromMapping:
    """Test building config from parsed YAML."""

    def test_camel_case_keys(self) -> None:
        config = config_from_mapping(
            {
                "name": "Acme",
                "contentDir": "pages",
                "basePath": "/guide",
                "navigation": [{"title": "Intro", "href": "/guide/intro", "children": [{"title": "Sub"}]}],
                "ai": {"mcp": True, "provider": {"apiUrl": "http://llm", "model": "m", "apiKey": "k"}},
            }
        )

        assert config.name == "Acme"
        assert config.content_dir == Path("pages")
        assert config.base_path == "/guide"
        assert config.navigation[0].href == "/guide/intro"
        assert config.navigation[0].children[0].title == "Sub"
        assert config.ai.mcp is True
        assert config.ai.provider.api_url == "http://llm"
        assert config.ai.provider.model == "m"
        assert config.ai.provider.api_key == "k"

    def test_ai_without_provider(self) -> None:
        config = config_from_mapping({"ai": {"chatbot": True}})

        assert config.ai is not None
        assert config.ai.provider is None

    def test_provider_defaults(self) -> None:
        provider = config_from_mapping({"ai": {"provider": {}}}).ai.provider

        assert provider.api_url == DEFAULT_API_URL
        assert provider.model == "gpt-4o-mini"
        assert provider.timeout == 30.0

    def test_relative_content_dir_uses_base_dir(self) -> None:
        config = config_from_mapping({"content_dir": "docs"}, base_dir=Path("/site"))

        assert config.content_dir == Path("/site/docs")


class TestLoadConfig:
    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "docshelf.yaml"
        path.write_text("name: Acme\ncontent_dir: content\n", encoding="utf-8")

        config = load_config(path)

        assert config.name == "Acme"
        assert config.content_dir == tmp_path / "content"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "docshelf.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(path).name == "Docs"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Unable to read"):
            load_config(tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("name: [oops\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)


class TestDocsContext:
    def test_from_config(self) -> None:
        config = SiteConfig(content_dir=Path("docs"), base_path="/ref")

        context = DocsContext.from_config(config, base_dir=Path("/srv"))

        assert context.content_root == Path("/srv/docs")
        assert context.base_path == "/ref"
        assert context.provider is None

    def test_absolute_content_dir_kept(self) -> None:
        context = DocsContext.from_config(SiteConfig(content_dir=Path("/abs")), base_dir=Path("/srv"))

        assert context.content_root == Path("/abs")


class TestWatchDisabled:
    @pytest.mark.parametrize(("value", "expected"), [("1", True), ("true", True), ("", False), ("0", False)])
    def test_env(self, monkeypatch, value: str, expected: bool) -> None:
        monkeypatch.setenv(NO_WATCH_ENV, value)

        assert watch_disabled() is expected
