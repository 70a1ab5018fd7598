"""Utility helpers for working with the content directory."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

MARKDOWN_SUFFIX = ".md"
INDEX_FILE = "index.md"


def is_markdown_path(path: str | Path) -> bool:
    return str(path).endswith(MARKDOWN_SUFFIX)


def iter_markdown_paths(root: Path) -> Iterator[Path]:
    """Yield Markdown files under ``root`` in a stable, sorted order."""
    for child in sorted(root.iterdir(), key=lambda p: p.name):
        if child.is_dir():
            yield from iter_markdown_paths(child)
        elif child.is_file() and is_markdown_path(child.name):
            yield child


def slug_for_path(path: Path, root: Path) -> str:
    """Derive the slug for a Markdown file relative to the content root.

    ``guide/intro.md`` becomes ``guide/intro``; ``guide/index.md`` becomes
    ``guide`` and a root ``index.md`` becomes ``index``.
    """
    relative = path.relative_to(root)
    if relative.name == INDEX_FILE:
        parent = relative.parent.as_posix()
        return "index" if parent == "." else parent
    return relative.with_suffix("").as_posix()


def is_within(path: Path, root: Path) -> bool:
    """Return True if ``path`` equals ``root`` or is one of its descendants.

    Both paths must already be resolved.
    """
    return path == root or root in path.parents


def candidate_paths(root: Path, slug: str) -> list[Path]:
    """Files that may back ``slug``, in lookup order."""
    return [root / f"{slug}{MARKDOWN_SUFFIX}", root / slug / INDEX_FILE]
