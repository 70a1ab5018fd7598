"""Search index built from the document store."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import List

from docshelf.content.store import DocumentStore
from docshelf.models import Document, SearchIndexEntry
from docshelf.utils.text import excerpt

LOGGER = logging.getLogger(__name__)

DEFAULT_EXCERPT_CHARS = 500


def build_entry(document: Document, *, excerpt_chars: int = DEFAULT_EXCERPT_CHARS) -> SearchIndexEntry:
    frontmatter = document.frontmatter
    return SearchIndexEntry(
        title=frontmatter.title,
        slug=document.slug,
        excerpt=excerpt(document.content, max_chars=excerpt_chars),
        description=frontmatter.description,
        ai_summary=frontmatter.ai_summary,
        ai_keywords=list(frontmatter.ai_keywords),
    )


class SearchIndex:
    """Caches one entry per document until cleared.

    The cached list is dropped whenever the store invalidates anything, so the
    index never outlives the documents it was built from.
    """

    def __init__(self, store: DocumentStore, *, excerpt_chars: int = DEFAULT_EXCERPT_CHARS) -> None:
        self.store = store
        self.excerpt_chars = excerpt_chars
        self._entries: List[SearchIndexEntry] | None = None
        self._generation = 0
        self._lock = threading.Lock()
        store.add_listener(self._on_invalidate)

    def build(self) -> List[SearchIndexEntry]:
        """Return the cached index, building it on first use."""
        with self._lock:
            if self._entries is not None:
                return self._entries
            generation = self._generation

        documents = self.store.get_all_documents()
        entries = [build_entry(doc, excerpt_chars=self.excerpt_chars) for doc in documents]
        LOGGER.debug("Built search index with %d entries", len(entries))

        with self._lock:
            if self._entries is not None:
                return self._entries
            if generation == self._generation:
                self._entries = entries
        return entries

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries = None

    def _on_invalidate(self, path: Path | None, slugs: frozenset) -> None:
        self.clear()
