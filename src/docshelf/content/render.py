"""Markdown rendering and the render cache."""

from __future__ import annotations

import html as html_lib
import logging
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List

import markdown
import nh3
from markdown.extensions.codehilite import CodeHiliteExtension
from markdown.extensions.toc import TocExtension

from docshelf.content.store import DocumentStore
from docshelf.models import RenderedDocument, RenderResult, TocItem
from docshelf.utils.text import slugify

LOGGER = logging.getLogger(__name__)

# Prefix some sanitizers put on generated ids to keep them out of the page's namespace.
USER_CONTENT_PREFIX = "user-content-"

Renderer = Callable[[str], RenderResult]

# Pygments classes and heading anchors survive sanitizing; table cells keep their alignment.
ALLOWED_ATTRIBUTES: Dict[str, set] = {tag: set(attrs) for tag, attrs in nh3.ALLOWED_ATTRIBUTES.items()}
ALLOWED_ATTRIBUTES.setdefault("*", set()).update({"id", "class"})
for _cell in ("th", "td"):
    ALLOWED_ATTRIBUTES.setdefault(_cell, set()).add("style")


def sanitize_html(raw: str) -> str:
    """Strip scripts, event handlers and other unsafe markup from rendered HTML."""
    return nh3.clean(
        raw,
        attributes=ALLOWED_ATTRIBUTES,
        filter_style_properties={"text-align"},
    )


def _flatten_toc(tokens: Iterable[dict]) -> Iterator[TocItem]:
    for token in tokens:
        yield TocItem(id=token["id"], title=html_lib.unescape(token["name"]), level=int(token["level"]))
        yield from _flatten_toc(token.get("children") or [])


def render_markdown(body: str) -> RenderResult:
    """Render Markdown to HTML and collect its headings in document order.

    Uses GitHub-style fenced code blocks and tables, with Pygments syntax
    highlighting. A fresh ``Markdown`` instance is built per call since
    instances carry per-document state.
    """
    md = markdown.Markdown(
        extensions=[
            "fenced_code",
            "tables",
            "sane_lists",
            CodeHiliteExtension(guess_lang=False, css_class="highlight"),
            TocExtension(slugify=slugify, permalink=False),
        ]
    )
    html = sanitize_html(md.convert(body))
    return RenderResult(html=html, toc=list(_flatten_toc(getattr(md, "toc_tokens", []))))


def strip_id_prefix(value: str) -> str:
    if value.startswith(USER_CONTENT_PREFIX):
        return value[len(USER_CONTENT_PREFIX) :]
    return value


def normalize_heading_ids(result: RenderResult) -> RenderResult:
    """Drop the sanitizer prefix so heading ids match the TOC anchors."""
    html = result.html.replace(f'id="{USER_CONTENT_PREFIX}', 'id="')
    toc = [TocItem(id=strip_id_prefix(item.id), title=item.title, level=item.level) for item in result.toc]
    return RenderResult(html=html, toc=toc)


class RenderCache:
    """Caches rendered HTML and TOC per slug, evicted together with the document."""

    def __init__(self, store: DocumentStore, renderer: Renderer = render_markdown) -> None:
        self.store = store
        self.renderer = renderer
        self._entries: Dict[str, RenderedDocument] = {}
        self._generation = 0
        self._lock = threading.RLock()
        store.add_listener(self.invalidate)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get_rendered(self, slug: str) -> RenderedDocument | None:
        with self._lock:
            cached = self._entries.get(slug)
            generation = self._generation
        if cached is not None:
            return cached

        document = self.store.get_document(slug)
        if document is None:
            return None

        result = normalize_heading_ids(self.renderer(document.content))
        rendered = RenderedDocument(document=document, html=result.html, toc=result.toc)

        with self._lock:
            if generation == self._generation:
                self._entries[slug] = rendered
            else:
                LOGGER.debug("Content changed while rendering %s, not caching", slug)
        return rendered

    def invalidate(self, path: Path | None = None, slugs: frozenset[str] = frozenset()) -> None:
        """Evict renders for ``slugs`` and for any document backed by ``path``.

        Without a path everything is dropped.
        """
        with self._lock:
            self._generation += 1
            if path is None:
                self._entries.clear()
                return
            stale: List[str] = [
                slug
                for slug, entry in self._entries.items()
                if slug in slugs or entry.document.source_path == path
            ]
            for slug in stale:
                del self._entries[slug]
