"""Checks a site's config, content directory, frontmatter and navigation."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Literal, Sequence

from docshelf.config import NavItem, SiteConfig
from docshelf.engine import DocsEngine
from docshelf.models import UNTITLED

HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
COLOR_FIELDS = ("primary", "accent", "background", "surface", "text", "border")

Severity = Literal["error", "warning"]


@dataclass(slots=True)
class ValidationIssue:
    severity: Severity
    message: str


def collect_nav_hrefs(items: Sequence[NavItem]) -> List[str]:
    hrefs: List[str] = []
    for item in items:
        if item.href:
            hrefs.append(item.href)
        hrefs.extend(collect_nav_hrefs(item.children))
    return hrefs


def _check_colors(colors: dict, prefix: str) -> List[ValidationIssue]:
    issues = []
    for name in COLOR_FIELDS:
        value = colors.get(name)
        if isinstance(value, str) and not HEX_COLOR_RE.match(value):
            issues.append(
                ValidationIssue("error", f'Config: {prefix}{name} "{value}" is not a valid hex color.')
            )
    return issues


def validate_config(config: SiteConfig) -> List[ValidationIssue]:
    issues: List[ValidationIssue] = []
    if not config.name or not config.name.strip():
        issues.append(ValidationIssue("error", "Config: 'name' is required."))
    if not config.navigation:
        issues.append(
            ValidationIssue("warning", "Config: 'navigation' is empty. No sidebar links will render.")
        )
    if config.colors:
        issues += _check_colors(config.colors, "colors.")
        dark = config.colors.get("dark")
        if isinstance(dark, dict):
            issues += _check_colors(dark, "colors.dark.")
    return issues


def validate(engine: DocsEngine) -> List[ValidationIssue]:
    """Run every check and return the issues found, errors and warnings mixed."""
    config = engine.config
    issues = validate_config(config)

    root = engine.context.content_root
    if not root.is_dir():
        issues.append(ValidationIssue("error", f"Content directory not found: {root}"))
        return issues

    docs = engine.get_all_documents()
    if not docs:
        issues.append(ValidationIssue("warning", "No markdown files found in content directory."))

    for doc in docs:
        if doc.frontmatter.title == UNTITLED:
            issues.append(
                ValidationIssue("warning", f"{doc.slug}: Missing or empty 'title' in frontmatter.")
            )

    base_path = engine.context.base_path.rstrip("/")
    known = {f"{base_path}/{doc.slug}" for doc in docs}
    for href in collect_nav_hrefs(config.navigation):
        if href.startswith(("http://", "https://")):
            continue
        if href not in known:
            issues.append(
                ValidationIssue("error", f'Navigation link "{href}" does not match any document.')
            )
    return issues
