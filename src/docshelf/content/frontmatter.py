"""YAML frontmatter parsing.

A document may start with a block delimited by ``---`` lines. The block is
parsed as YAML; anything that goes wrong degrades to the default metadata
instead of failing the page.
"""

from __future__ import annotations

import logging
import re

import yaml

from docshelf.models import UNTITLED, Frontmatter, ParsedDocument

LOGGER = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r"\A---\n(.*?)\n---(?:\n|\Z)", re.DOTALL)


def _default(raw: str) -> ParsedDocument:
    return ParsedDocument(frontmatter=Frontmatter(title=UNTITLED), content=raw)


def parse_frontmatter(raw: str) -> ParsedDocument:
    """Split ``raw`` into frontmatter and Markdown body."""
    raw = raw.replace("\r\n", "\n")
    match = FRONTMATTER_RE.match(raw)
    if not match:
        return _default(raw)

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        LOGGER.warning("Failed to parse frontmatter YAML, using defaults: %s", exc)
        return _default(raw)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        LOGGER.warning("Frontmatter is not a mapping (got %s), using defaults", type(data).__name__)
        return _default(raw)

    if not data.get("title"):
        LOGGER.warning("No title found in frontmatter. Using '%s'.", UNTITLED)

    return ParsedDocument(
        frontmatter=Frontmatter.from_mapping(data),
        content=raw[match.end() :],
    )
