"""Shared fixtures: a small documentation corpus on disk."""

from __future__ import annotations

from pathlib import Path

import pytest

from docshelf.config import DocsContext, SiteConfig
from docshelf.engine import DocsEngine

CORPUS = {
    "index.md": "---\ntitle: Welcome\ndescription: Start here\n---\n# Welcome\n\nWelcome to the docs.\n",
    "installation.md": (
        "---\n"
        "title: Installation\n"
        "description: How to install the package\n"
        "ai-summary: Step by step setup instructions\n"
        "ai-keywords:\n"
        "  - setup\n"
        "  - pip\n"
        "---\n"
        "## Requirements\n\nPython 3.10 or newer.\n\n## Install\n\nRun pip install docshelf.\n"
    ),
    "guide/index.md": "---\ntitle: Guide\n---\nAn overview of the guide section.\n",
    "guide/configuration.md": (
        "---\ntitle: Configuration\ndescription: Config file reference\n---\n"
        "## Options\n\nThe config file lives next to your content.\n"
    ),
}


def write_doc(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    for relative, text in CORPUS.items():
        write_doc(root, relative, text)
    return root


@pytest.fixture
def context(content_dir: Path) -> DocsContext:
    return DocsContext.from_config(SiteConfig(name="Test Docs", content_dir=content_dir))


@pytest.fixture
def engine(context: DocsContext):
    engine = DocsEngine(context, watch=False)
    yield engine
    engine.close()
