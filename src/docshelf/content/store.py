"""Document loading with an in-memory cache keyed by slug.

The cache is filled lazily by single-slug lookups and eagerly by a full walk
of the content directory. Entries stay until ``invalidate`` evicts them, which
the change watcher does whenever a Markdown file is created, modified or
removed.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Dict, List

from docshelf.config import DocsContext
from docshelf.content.frontmatter import parse_frontmatter
from docshelf.models import Document
from docshelf.utils.files import (
    INDEX_FILE,
    candidate_paths,
    is_markdown_path,
    is_within,
    iter_markdown_paths,
    slug_for_path,
)

LOGGER = logging.getLogger(__name__)

# Called after an invalidation with the resolved path (None for a full reset)
# and the slugs that were evicted.
InvalidationListener = Callable[[Path | None, frozenset], None]


def load_document(path: Path, slug: str) -> Document:
    """Read and parse a single Markdown file."""
    parsed = parse_frontmatter(path.read_text(encoding="utf-8"))
    return Document(
        slug=slug,
        frontmatter=parsed.frontmatter,
        content=parsed.content,
        source_path=path,
    )


class DocumentStore:
    """Loads documents from a content directory and caches them by slug."""

    def __init__(self, context: DocsContext) -> None:
        self.context = context
        self._documents: Dict[str, Document] = {}
        self._corpus: List[str] = []
        self._all_loaded = False
        self._generation = 0
        self._listeners: List[InvalidationListener] = []
        self._lock = threading.RLock()

    @property
    def root(self) -> Path:
        return Path(self.context.content_root).resolve()

    def add_listener(self, listener: InvalidationListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def cached_slugs(self) -> List[str]:
        with self._lock:
            return list(self._documents)

    def _remember(self, slug: str, document: Document, generation: int) -> None:
        # Reads that raced an invalidation may be torn; serve them once but don't keep them.
        with self._lock:
            if generation == self._generation:
                self._documents[slug] = document

    def get_document(self, slug: str) -> Document | None:
        """Return the document for ``slug`` or None when there is none.

        ``{slug}.md`` is tried before ``{slug}/index.md``. Slugs that resolve
        outside the content root are treated as missing.
        """
        slug = slug.strip("/") or "index"
        with self._lock:
            cached = self._documents.get(slug)
            generation = self._generation
        if cached is not None:
            return cached

        root = self.root
        if "\0" in slug or not is_within((root / slug).resolve(), root):
            LOGGER.warning("Rejected slug outside content root: %r", slug)
            return None

        for candidate in candidate_paths(root, slug):
            resolved = candidate.resolve()
            if not is_within(resolved, root):
                LOGGER.warning("Rejected path outside content root: %s", candidate)
                return None
            try:
                document = load_document(resolved, slug)
            except (FileNotFoundError, NotADirectoryError):
                continue
            self._remember(slug, document, generation)
            return document

        return None

    def get_all_documents(self) -> List[Document]:
        """Walk the content directory and return every document.

        The first complete walk fills the cache for all slugs; later calls are
        served from memory until something is invalidated.
        """
        with self._lock:
            if self._all_loaded:
                return [self._documents[slug] for slug in self._corpus]
            generation = self._generation

        root = self.root
        if not root.is_dir():
            LOGGER.warning("Content directory not found at %s. No docs will be served.", root)
            return []

        documents: Dict[str, Document] = {}
        for path in iter_markdown_paths(root):
            resolved = path.resolve()
            if not is_within(resolved, root):
                LOGGER.warning("Skipping %s: links outside content root", path)
                continue
            slug = slug_for_path(path, root)
            try:
                document = load_document(resolved, slug)
            except FileNotFoundError:
                # Removed between listing and reading.
                continue

            existing = documents.get(slug)
            if existing is not None:
                if path.name == INDEX_FILE:
                    LOGGER.warning(
                        "Slug %r is defined by both %s and %s; using %s",
                        slug, existing.source_path, resolved, existing.source_path,
                    )
                    continue
                LOGGER.warning(
                    "Slug %r is defined by both %s and %s; using %s",
                    slug, resolved, existing.source_path, resolved,
                )
            documents[slug] = document

        with self._lock:
            if generation == self._generation:
                self._documents.update(documents)
                self._corpus = list(documents)
                self._all_loaded = True
            else:
                LOGGER.debug("Content changed during walk, not caching corpus")
        return list(documents.values())

    def invalidate(self, path: str | Path | None = None) -> None:
        """Evict cached documents backed by ``path``, or everything without one."""
        resolved: Path | None = None
        with self._lock:
            self._generation += 1
            self._all_loaded = False
            if path is None:
                evicted = frozenset(self._documents)
                self._documents.clear()
                self._corpus = []
            else:
                root = self.root
                # Relative paths resolve against the content root.
                resolved = (root / path).resolve()
                stale = {slug for slug, doc in self._documents.items() if doc.source_path == resolved}
                if is_markdown_path(resolved) and resolved != root and is_within(resolved, root):
                    # A new file can shadow a cached one with the same slug.
                    stale.add(slug_for_path(resolved, root))
                for slug in stale:
                    self._documents.pop(slug, None)
                evicted = frozenset(stale)
            listeners = list(self._listeners)

        LOGGER.debug("Invalidated %s (%d cached documents evicted)", resolved or "all", len(evicted))
        for listener in listeners:
            listener(resolved, evicted)
