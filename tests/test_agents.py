"""Tests for the AI-agent projections of the corpus."""

from __future__ import annotations

from pathlib import Path

from docshelf.agents import (
    all_docs_text,
    doc_text,
    docs_json,
    generate_full_docs,
    generate_llms_txt,
    search_docs_text,
)
from docshelf.config import AIConfig, SiteConfig
from docshelf.models import Document, Frontmatter, SearchIndexEntry, TocItem


def _doc(slug: str, title: str, content: str = "Body", **fm) -> Document:
    return Document(
        slug=slug,
        frontmatter=Frontmatter(title=title, **fm),
        content=content,
        source_path=Path(f"/docs/{slug}.md"),
    )


DOCS = [
    _doc("intro", "Intro", "Hello world", description="Start here"),
    _doc("install", "Install", "pip install it", ai_summary="Setup steps", ai_keywords=["pip", "setup"]),
    _doc("faq", "FAQ", "Questions"),
]


class TestLlmsTxt:
    """Test generate_llms_txt."""

    def test_lists_pages(self) -> None:
        text = generate_llms_txt(SiteConfig(name="Acme"), DOCS, "https://acme.dev")

        assert text.startswith("# Acme\n\n> Acme documentation")
        assert "- [Intro](https://acme.dev/docs/intro): Start here" in text
        assert "- [Install](https://acme.dev/docs/install): Setup steps" in text
        assert "- [FAQ](https://acme.dev/docs/faq): FAQ" in text
        assert "https://acme.dev/llms-full.txt" in text
        assert "MCP" not in text

    def test_mcp_section(self) -> None:
        config = SiteConfig(name="Acme", ai=AIConfig(mcp=True))

        text = generate_llms_txt(config, DOCS, "https://acme.dev")

        assert "## Agent tools" in text
        assert "`POST https://acme.dev/mcp/tools/{name}`" in text
        assert "docs://" not in text

    def test_custom_base_path(self) -> None:
        text = generate_llms_txt(SiteConfig(name="Acme", base_path="reference/"), DOCS, "")

        assert "- [Intro](/reference/intro)" in text


class TestFullDocs:
    def test_sections(self) -> None:
        text = generate_full_docs(SiteConfig(name="Acme"), DOCS)

        assert text.startswith("# Acme - Complete Documentation")
        assert "## Intro\n\n*Start here*\n\nHello world" in text
        assert "*Setup steps*\n\nKeywords: pip, setup\n\npip install it" in text
        assert text.count("---") == 3


class TestDocsJson:
    """Test docs_json."""

    def test_projection(self) -> None:
        headings = {"intro": [TocItem(id="hello", title="Hello", level=2)]}

        result = docs_json(SiteConfig(name="Acme"), DOCS, lambda d: headings.get(d.slug, []))

        assert result["name"] == "Acme"
        assert [p["slug"] for p in result["pages"]] == ["intro", "install", "faq"]
        intro = result["pages"][0]
        assert intro == {
            "slug": "intro",
            "title": "Intro",
            "description": "Start here",
            "aiSummary": None,
            "aiKeywords": [],
            "content": "Hello world",
            "headings": [{"level": 2, "title": "Hello", "id": "hello"}],
        }
        assert "llmsFullTxt" not in result

    def test_pointers_with_base_url(self) -> None:
        config = SiteConfig(name="Acme", ai=AIConfig(mcp=True))

        result = docs_json(config, DOCS, lambda d: [], base_url="https://acme.dev")

        assert result["llmsFullTxt"] == "https://acme.dev/llms-full.txt"
        assert result["mcp"]["endpoint"] == "https://acme.dev/mcp/tools"
        assert result["mcp"]["method"] == "POST"
        assert result["mcp"]["tools"] == ["search_docs", "get_doc", "get_all_docs"]


class TestToolText:
    """Test agent tool payloads."""

    def test_search_docs_text(self) -> None:
        index = [
            SearchIndexEntry(title="Install", slug="install", excerpt="Run pip install it", ai_keywords=["pip"]),
        ]

        text = search_docs_text(index, "pip")

        assert "## Install" in text
        assert "Slug: install" in text
        assert "Keywords: pip" in text
        assert "Run pip install it" in text

    def test_search_docs_no_results(self) -> None:
        assert search_docs_text([], "missing") == 'No results found for "missing"'

    def test_doc_text(self) -> None:
        assert doc_text(DOCS[0], "intro") == "# Intro\n\n> Start here\n\nHello world"
        assert doc_text(None, "gone") == "Page not found: gone"

    def test_all_docs_text(self) -> None:
        text = all_docs_text(DOCS)

        assert text.startswith("> 3 documents, ~")
        assert "# FAQ\n\nQuestions" in text
