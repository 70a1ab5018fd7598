"""docshelf: Markdown documentation engine."""

__version__ = "0.1.0"
