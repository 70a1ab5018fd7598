"""Tests for data models."""

from __future__ import annotations

from pathlib import Path

from docshelf.models import (
    ChatMessage,
    ChatResponse,
    Document,
    Frontmatter,
    SearchIndexEntry,
    Source,
    TocItem,
)


class TestFrontmatter:
    """Test Frontmatter.from_mapping."""

    def test_defaults(self) -> None:
        fm = Frontmatter()

        assert fm.title == "Untitled"
        assert fm.ai_keywords == []
        assert fm.extra == {}

    def test_camel_and_snake_case_keys(self) -> None:
        camel = Frontmatter.from_mapping({"title": "A", "aiSummary": "s", "aiKeywords": ["k"]})
        snake = Frontmatter.from_mapping({"title": "A", "ai_summary": "s", "ai_keywords": ["k"]})

        assert camel.ai_summary == snake.ai_summary == "s"
        assert camel.ai_keywords == snake.ai_keywords == ["k"]

    def test_single_keyword_string(self) -> None:
        fm = Frontmatter.from_mapping({"title": "A", "ai-keywords": "solo"})

        assert fm.ai_keywords == ["solo"]

    def test_non_numeric_order_ignored(self) -> None:
        fm = Frontmatter.from_mapping({"title": "A", "order": "first"})

        assert fm.order is None

    def test_non_string_title_coerced(self) -> None:
        fm = Frontmatter.from_mapping({"title": 2024})

        assert fm.title == "2024"

    def test_to_dict_skips_missing_fields(self) -> None:
        fm = Frontmatter.from_mapping({"title": "A", "description": "d"})

        assert fm.to_dict() == {"title": "A", "description": "d", "aiKeywords": []}


class TestDocument:
    def test_title_property(self) -> None:
        doc = Document(
            slug="intro",
            frontmatter=Frontmatter(title="Intro"),
            content="Body",
            source_path=Path("/docs/intro.md"),
        )

        assert doc.title == "Intro"


class TestSerialization:
    def test_toc_item_to_dict(self) -> None:
        assert TocItem(id="a", title="A", level=2).to_dict() == {"id": "a", "title": "A", "level": 2}

    def test_search_entry_to_dict(self) -> None:
        entry = SearchIndexEntry(title="T", slug="t", excerpt="e", ai_keywords=["k"])

        assert entry.to_dict() == {
            "title": "T",
            "slug": "t",
            "description": None,
            "aiSummary": None,
            "aiKeywords": ["k"],
            "excerpt": "e",
        }

    def test_chat_response_to_dict(self) -> None:
        response = ChatResponse(
            message=ChatMessage(role="assistant", content="hi"),
            sources=[Source(title="Intro", slug="intro")],
            mode="search",
        )

        assert response.to_dict() == {
            "message": {"role": "assistant", "content": "hi"},
            "sources": [{"title": "Intro", "slug": "intro"}],
            "mode": "search",
        }
