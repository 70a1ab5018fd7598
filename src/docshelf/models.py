"""Core docshelf data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping

UNTITLED = "Untitled"

_KNOWN_KEYS = {
    "title",
    "description",
    "icon",
    "sidebarTitle",
    "sidebar_title",
    "order",
    "image",
    "ai-summary",
    "aiSummary",
    "ai_summary",
    "ai-keywords",
    "aiKeywords",
    "ai_keywords",
}


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


@dataclass(slots=True)
class Frontmatter:
    """Metadata block parsed from the top of a Markdown file."""

    title: str = UNTITLED
    description: str | None = None
    icon: str | None = None
    sidebar_title: str | None = None
    order: int | float | None = None
    image: str | None = None
    ai_summary: str | None = None
    ai_keywords: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Frontmatter":
        """Build frontmatter from a parsed YAML mapping.

        Accepts the hyphenated (``ai-summary``), camelCase and snake_case
        spellings of multi-word keys. Unknown keys are kept in ``extra``.
        """
        title = data.get("title")
        keywords = _first(data, "ai-keywords", "aiKeywords", "ai_keywords")
        if isinstance(keywords, str):
            keywords = [keywords]
        order = data.get("order")
        if isinstance(order, bool) or not isinstance(order, (int, float)):
            order = None
        return cls(
            title=str(title) if title not in (None, "") else UNTITLED,
            description=_optional_str(data.get("description")),
            icon=_optional_str(data.get("icon")),
            sidebar_title=_optional_str(_first(data, "sidebarTitle", "sidebar_title")),
            order=order,
            image=_optional_str(data.get("image")),
            ai_summary=_optional_str(_first(data, "ai-summary", "aiSummary", "ai_summary")),
            ai_keywords=[str(k) for k in keywords or []],
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title}
        optional = {
            "description": self.description,
            "icon": self.icon,
            "sidebarTitle": self.sidebar_title,
            "order": self.order,
            "image": self.image,
            "aiSummary": self.ai_summary,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        data["aiKeywords"] = list(self.ai_keywords)
        return data


@dataclass(slots=True)
class ParsedDocument:
    """Frontmatter plus the remaining Markdown body."""

    frontmatter: Frontmatter
    content: str


@dataclass(slots=True)
class Document:
    """A loaded documentation page."""

    slug: str
    frontmatter: Frontmatter
    content: str
    source_path: Path

    @property
    def title(self) -> str:
        return self.frontmatter.title


@dataclass(slots=True)
class TocItem:
    id: str
    title: str
    level: int

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "level": self.level}


@dataclass(slots=True)
class RenderResult:
    html: str
    toc: List[TocItem]


@dataclass(slots=True)
class RenderedDocument:
    """Rendered HTML and table of contents derived from a document."""

    document: Document
    html: str
    toc: List[TocItem]


@dataclass(slots=True)
class SearchIndexEntry:
    """Compact per-document summary used for ranking."""

    title: str
    slug: str
    excerpt: str
    description: str | None = None
    ai_summary: str | None = None
    ai_keywords: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "aiSummary": self.ai_summary,
            "aiKeywords": list(self.ai_keywords),
            "excerpt": self.excerpt,
        }


@dataclass(slots=True)
class ScoredDocument:
    title: str
    slug: str
    score: int


Role = Literal["user", "assistant"]
Mode = Literal["ai", "search"]


@dataclass(slots=True)
class ChatMessage:
    role: Role
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass(slots=True)
class Source:
    title: str
    slug: str


@dataclass(slots=True)
class ChatResponse:
    """Answer returned by the chat orchestrator.

    ``mode`` reports which path produced the answer, so an AI request that
    fell back to keyword search reports ``"search"``.
    """

    message: ChatMessage
    sources: List[Source]
    mode: Mode

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message.to_dict(),
            "sources": [{"title": s.title, "slug": s.slug} for s in self.sources],
            "mode": self.mode,
        }
