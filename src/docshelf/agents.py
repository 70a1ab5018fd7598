"""Corpus projections for AI agents: llms.txt, a full Markdown dump and JSON.

See https://llmstxt.org/ for the llms.txt format. Everything here is a pure
transformation of the loaded documents.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Sequence

from docshelf.config import SiteConfig
from docshelf.index.search import match_entries
from docshelf.models import Document, SearchIndexEntry, TocItem
from docshelf.utils.text import snippet

MCP_TOOLS = ["search_docs", "get_doc", "get_all_docs"]
TOOLS_PATH = "/mcp/tools"


def _page_url(base_url: str, base_path: str, slug: str) -> str:
    return f"{base_url}{base_path}/{slug}"


def generate_llms_txt(config: SiteConfig, docs: Sequence[Document], base_url: str) -> str:
    """Index of the documentation for AI agents."""
    lines: List[str] = [
        f"# {config.name}",
        "",
        f"> {config.name} documentation",
        "",
        "## Docs",
        "",
    ]
    for doc in docs:
        fm = doc.frontmatter
        desc = fm.ai_summary or fm.description or fm.title
        lines.append(f"- [{fm.title}]({_page_url(base_url, config.base_path, doc.slug)}): {desc}")

    lines += [
        "",
        "## API",
        "",
        f"- [Full docs as markdown]({base_url}/llms-full.txt): Complete documentation in a single markdown file",
        f"- [Structured JSON]({base_url}/api/docs): All documentation pages as structured JSON",
    ]

    if config.ai and config.ai.mcp:
        lines += [
            "",
            "## Agent tools",
            "",
            f"Call a tool with `POST {base_url}{TOOLS_PATH}/{{name}}` and a JSON body `{{\"arguments\": {{...}}}}`.",
            "Tools: search_docs (query), get_doc (slug), get_all_docs.",
        ]
    return "\n".join(lines)


def generate_full_docs(config: SiteConfig, docs: Sequence[Document]) -> str:
    """The whole corpus as one Markdown file, sized for an LLM context window."""
    sections: List[str] = [f"# {config.name} - Complete Documentation", ""]
    for doc in docs:
        fm = doc.frontmatter
        sections += ["---", "", f"## {fm.title}"]
        summary = fm.ai_summary or fm.description
        if summary:
            sections += ["", f"*{summary}*"]
        if fm.ai_keywords:
            sections += ["", f"Keywords: {', '.join(fm.ai_keywords)}"]
        sections += ["", doc.content, ""]
    return "\n".join(sections)


def docs_json(
    config: SiteConfig,
    docs: Sequence[Document],
    headings_for: Callable[[Document], List[TocItem]],
    base_url: str | None = None,
) -> Dict[str, Any]:
    """All pages as structured JSON, with headings from ``headings_for``."""
    result: Dict[str, Any] = {
        "name": config.name,
        "pages": [
            {
                "slug": doc.slug,
                "title": doc.frontmatter.title,
                "description": doc.frontmatter.description,
                "aiSummary": doc.frontmatter.ai_summary,
                "aiKeywords": list(doc.frontmatter.ai_keywords),
                "content": doc.content,
                "headings": [
                    {"level": item.level, "title": item.title, "id": item.id}
                    for item in headings_for(doc)
                ],
            }
            for doc in docs
        ],
    }

    if base_url:
        result["llmsFullTxt"] = f"{base_url}/llms-full.txt"
        if config.ai and config.ai.mcp:
            result["mcp"] = {
                "endpoint": f"{base_url}{TOOLS_PATH}",
                "method": "POST",
                "tools": list(MCP_TOOLS),
            }
    return result


def search_docs_text(index: Sequence[SearchIndexEntry], query: str) -> str:
    """Text payload of the ``search_docs`` tool."""
    results = match_entries(index, query)
    if not results:
        return f'No results found for "{query}"'

    blocks = []
    for entry in results:
        parts = [f"## {entry.title}", f"Slug: {entry.slug}"]
        if entry.description:
            parts.append(entry.description)
        if entry.ai_summary:
            parts.append(f"AI Summary: {entry.ai_summary}")
        if entry.ai_keywords:
            parts.append(f"Keywords: {', '.join(entry.ai_keywords)}")
        parts += ["", snippet(entry.excerpt, query.strip())]
        blocks.append("\n".join(parts))
    return "\n\n---\n\n".join(blocks)


def doc_text(doc: Document | None, slug: str) -> str:
    """Text payload of the ``get_doc`` tool."""
    if doc is None:
        return f"Page not found: {slug}"
    description = f"> {doc.frontmatter.description}\n\n" if doc.frontmatter.description else ""
    return f"# {doc.frontmatter.title}\n\n{description}{doc.content}"


def all_docs_text(docs: Sequence[Document]) -> str:
    """Text payload of the ``get_all_docs`` tool, with a rough token estimate."""
    body = "\n\n---\n\n".join(f"# {d.frontmatter.title}\n\n{d.content}" for d in docs)
    return f"> {len(docs)} documents, ~{round(len(body) / 4)} tokens\n\n{body}"
