"""Sidebar navigation helpers: previous/next links and breadcrumbs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from docshelf.config import NavItem


@dataclass(slots=True)
class NavLink:
    title: str
    href: str


@dataclass(slots=True)
class Breadcrumb:
    title: str
    href: str | None = None


def flatten_nav(items: Sequence[NavItem]) -> List[NavLink]:
    """Navigation tree to an ordered list of page links."""
    result: List[NavLink] = []
    for item in items:
        if item.href:
            result.append(NavLink(title=item.title, href=item.href))
        if item.children:
            result.extend(flatten_nav(item.children))
    return result


def get_prev_next(current: str, items: Sequence[NavItem]) -> tuple[NavLink | None, NavLink | None]:
    pages = flatten_nav(items)
    hrefs = [page.href for page in pages]
    if current not in hrefs:
        return None, None
    index = hrefs.index(current)
    prev = pages[index - 1] if index > 0 else None
    nxt = pages[index + 1] if index < len(pages) - 1 else None
    return prev, nxt


def get_breadcrumbs(current: str, items: Sequence[NavItem]) -> List[Breadcrumb]:
    """Section titles leading to ``current``, ending with the page itself."""

    def find(nodes: Sequence[NavItem], parents: List[Breadcrumb]) -> List[Breadcrumb] | None:
        for node in nodes:
            if node.children:
                found = find(node.children, parents + [Breadcrumb(title=node.title)])
                if found is not None:
                    return found
            if node.href == current:
                return parents + [Breadcrumb(title=node.title, href=node.href)]
        return None

    return find(items, []) or []
