"""Command line interface for docshelf."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from docshelf.config import SiteConfig, load_config
from docshelf.engine import DocsEngine
from docshelf.errors import ConfigError
from docshelf.models import ChatMessage
from docshelf.validate import validate as run_validation
from docshelf.web.app import create_app


console = Console()
app = typer.Typer(help="docshelf - Markdown documentation engine with search and AI chat")

DEFAULT_CONFIG = Path("docshelf.yaml")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _load_site_config(config_path: Path | None, content: Path | None) -> SiteConfig:
    path = config_path
    if path is None and DEFAULT_CONFIG.exists():
        path = DEFAULT_CONFIG
    try:
        config = load_config(path) if path is not None else SiteConfig()
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if content is not None:
        config.content_dir = content
    return config


def _build_engine(config_path: Path | None, content: Path | None, *, watch: bool = False) -> DocsEngine:
    config = _load_site_config(config_path, content)
    return DocsEngine.from_config(config, base_dir=Path.cwd(), watch=watch)


ConfigOption = typer.Option(None, "--config", "-c", help="Site config file (YAML)")
ContentOption = typer.Option(None, "--content", help="Content directory with Markdown files")


@app.command()
def search(
    query: str = typer.Argument(..., help="Query text"),
    config: Optional[Path] = ConfigOption,
    content: Optional[Path] = ContentOption,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rank documents against a keyword query."""
    _setup_logging(verbose)
    engine = _build_engine(config, content)

    results = engine.rank(query)
    if not results:
        console.print("[yellow]No matches found.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Score")
    table.add_column("Title")
    table.add_column("Slug")
    for result in results:
        table.add_row(str(result.score), result.title, result.slug)
    console.print(table)


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question for the docs assistant"),
    config: Optional[Path] = ConfigOption,
    content: Optional[Path] = ContentOption,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Ask the documentation assistant a question."""
    _setup_logging(verbose)
    engine = _build_engine(config, content)

    response = engine.handle_chat([ChatMessage(role="user", content=question)])
    console.print(f"[dim]mode: {response.mode}[/dim]")
    console.print(response.message.content, markup=False)
    if response.sources:
        console.print("\n[bold]Sources:[/bold]")
        for source in response.sources:
            console.print(f"  {source.title} ({source.slug})", markup=False)


@app.command()
def validate(
    config: Optional[Path] = ConfigOption,
    content: Optional[Path] = ContentOption,
) -> None:
    """Check config, frontmatter and navigation links."""
    engine = _build_engine(config, content)
    issues = run_validation(engine)
    errors = [issue for issue in issues if issue.severity == "error"]
    warnings = [issue for issue in issues if issue.severity == "warning"]

    if not issues:
        console.print("[green]All checks passed.[/green]")
        return

    for issue in errors:
        console.print(f"[red]  x {issue.message}[/red]")
    for issue in warnings:
        console.print(f"[yellow]  ! {issue.message}[/yellow]")
    console.print(f"\n  {len(errors)} error(s), {len(warnings)} warning(s)")
    if errors:
        raise typer.Exit(code=1)


@app.command()
def llms(
    full: bool = typer.Option(False, "--full", help="Print the complete documentation dump"),
    base_url: str = typer.Option("", "--base-url", help="Public site URL used in links"),
    config: Optional[Path] = ConfigOption,
    content: Optional[Path] = ContentOption,
) -> None:
    """Print llms.txt (or llms-full.txt) for the site."""
    engine = _build_engine(config, content)
    text = engine.llms_full_txt() if full else engine.llms_txt(base_url.rstrip("/"))
    typer.echo(text)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host interface"),
    port: int = typer.Option(8000, help="Server port"),
    config: Optional[Path] = ConfigOption,
    content: Optional[Path] = ContentOption,
    watch: bool = typer.Option(True, "--watch/--no-watch", help="Reload content when files change"),
) -> None:
    """Start the HTTP API."""
    try:
        import uvicorn
    except ImportError as exc:  # pragma: no cover
        raise typer.BadParameter(
            "uvicorn is not installed. Install the web extras with \"python -m pip install '.[web]'\""
        ) from exc

    engine = _build_engine(config, content, watch=watch)
    root = engine.context.content_root
    if not root.is_dir():
        console.print(f"[yellow]Warning: content directory not found at {root}.[/yellow]")

    console.print(f"Serving {engine.config.name} on http://{host}:{port} (content: {root})")
    uvicorn.run(
        create_app(engine),
        host=host,
        port=port,
        reload=False,
        log_level="info",
    )
