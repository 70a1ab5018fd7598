"""Content cache and retrieval engine for one documentation site.

``DocsEngine`` wires the document store, render cache, search index, change
watcher and chat orchestrator together and is what the web and CLI layers
talk to. Each engine owns its own caches, so several sites can share a
process.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

from docshelf import agents
from docshelf.chat.orchestrator import ChatOrchestrator
from docshelf.chat.provider import Completer, WarningState
from docshelf.config import DocsContext, SiteConfig, watch_disabled
from docshelf.content.render import RenderCache, Renderer, render_markdown
from docshelf.content.store import DocumentStore
from docshelf.content.watcher import ChangeWatcher
from docshelf.index.indexer import SearchIndex
from docshelf.index import search as ranking
from docshelf.models import (
    ChatMessage,
    ChatResponse,
    Document,
    RenderedDocument,
    ScoredDocument,
    SearchIndexEntry,
    TocItem,
)

LOGGER = logging.getLogger(__name__)


class DocsEngine:
    def __init__(
        self,
        context: DocsContext,
        *,
        renderer: Renderer = render_markdown,
        completer: Completer | None = None,
        watch: bool | None = None,
    ) -> None:
        self.context = context
        self.store = DocumentStore(context)
        self.renders = RenderCache(self.store, renderer)
        self.index = SearchIndex(self.store, excerpt_chars=context.config.excerpt_chars)
        self.warnings = WarningState()
        self.chat = ChatOrchestrator(
            context,
            self.index,
            self.llms_full_txt,
            completer=completer,
            warnings=self.warnings,
        )
        self.watcher = ChangeWatcher(self.store, context.content_root)
        if watch is None:
            watch = context.config.watch and not watch_disabled()
        self.watch = watch

    @classmethod
    def from_config(cls, config: SiteConfig, *, base_dir: Path | None = None, **kwargs: Any) -> "DocsEngine":
        return cls(DocsContext.from_config(config, base_dir=base_dir), **kwargs)

    @property
    def config(self) -> SiteConfig:
        return self.context.config

    def __enter__(self) -> "DocsEngine":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- watcher ---------------------------------------------------------

    def start_watcher(self) -> bool:
        return self.watcher.start()

    def stop_watcher(self) -> None:
        self.watcher.stop()

    def _ensure_watcher(self) -> None:
        if self.watch:
            self.watcher.start()

    def close(self) -> None:
        self.watcher.stop()

    # -- documents -------------------------------------------------------

    def get_document(self, slug: str) -> Document | None:
        document = self.store.get_document(slug)
        if document is not None:
            self._ensure_watcher()
        return document

    def get_all_documents(self) -> List[Document]:
        documents = self.store.get_all_documents()
        if documents:
            self._ensure_watcher()
        return documents

    def get_rendered_document(self, slug: str) -> RenderedDocument | None:
        rendered = self.renders.get_rendered(slug)
        if rendered is not None:
            self._ensure_watcher()
        return rendered

    def invalidate(self, path: str | Path | None = None) -> None:
        self.store.invalidate(path)

    # -- search ----------------------------------------------------------

    def build_search_index(self) -> List[SearchIndexEntry]:
        return self.index.build()

    def clear_search_index_cache(self) -> None:
        self.index.clear()

    def rank(self, query: str) -> List[ScoredDocument]:
        return ranking.rank(self.build_search_index(), query)

    def search(self, query: str) -> List[SearchIndexEntry]:
        return ranking.search(self.build_search_index(), query)

    def match(self, query: str) -> List[SearchIndexEntry]:
        return ranking.match_entries(self.build_search_index(), query)

    # -- chat ------------------------------------------------------------

    def handle_chat(self, messages: Sequence[ChatMessage]) -> ChatResponse:
        return self.chat.handle_chat(messages)

    # -- agent projections ----------------------------------------------

    def headings(self, document: Document) -> List[TocItem]:
        rendered = self.renders.get_rendered(document.slug)
        return rendered.toc if rendered is not None else []

    def docs_json(self, base_url: str | None = None) -> Dict[str, Any]:
        return agents.docs_json(self.config, self.get_all_documents(), self.headings, base_url)

    def llms_txt(self, base_url: str = "") -> str:
        return agents.generate_llms_txt(self.config, self.get_all_documents(), base_url)

    def llms_full_txt(self) -> str:
        return agents.generate_full_docs(self.config, self.get_all_documents())

    def search_docs_text(self, query: str) -> str:
        return agents.search_docs_text(self.build_search_index(), query)

    def doc_text(self, slug: str) -> str:
        return agents.doc_text(self.get_document(slug), slug)

    def all_docs_text(self) -> str:
        return agents.all_docs_text(self.get_all_documents())
