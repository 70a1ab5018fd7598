"""Site configuration and the request context shared by all components."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping

import yaml

from docshelf.errors import ConfigError

DEFAULT_CONTENT_DIR = Path("content/docs")
DEFAULT_BASE_PATH = "/docs"
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4o-mini"
API_KEY_ENV = "DOCSHELF_AI_API_KEY"
NO_WATCH_ENV = "DOCSHELF_NO_WATCH"


@dataclass(slots=True)
class NavItem:
    title: str
    href: str | None = None
    icon: str | None = None
    children: List["NavItem"] = field(default_factory=list)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NavItem":
        return cls(
            title=str(data.get("title", "")),
            href=data.get("href"),
            icon=data.get("icon"),
            children=[cls.from_mapping(child) for child in data.get("children") or []],
        )


@dataclass(slots=True)
class ProviderConfig:
    """OpenAI-compatible completion endpoint."""

    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    api_key: str | None = None
    timeout: float = 30.0
    max_tokens: int = 1024
    temperature: float = 0.3


@dataclass(slots=True)
class AIConfig:
    chatbot: bool = True
    mcp: bool = False
    provider: ProviderConfig | None = None


@dataclass(slots=True)
class SiteConfig:
    name: str = "Docs"
    content_dir: Path = DEFAULT_CONTENT_DIR
    base_path: str = DEFAULT_BASE_PATH
    navigation: List[NavItem] = field(default_factory=list)
    colors: Dict[str, Any] = field(default_factory=dict)
    ai: AIConfig | None = None
    excerpt_chars: int = 500
    watch: bool = True

    def __post_init__(self) -> None:
        self.content_dir = Path(self.content_dir)
        self.base_path = normalize_base_path(self.base_path)


def normalize_base_path(path: str) -> str:
    """Ensure a leading slash and strip any trailing slash."""
    if not path.startswith("/"):
        path = f"/{path}"
    if path.endswith("/") and path != "/":
        path = path.rstrip("/") or "/"
    return path


def _get(data: Mapping[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in data:
        return data[snake]
    return data.get(camel, default)


def _provider_from_mapping(data: Mapping[str, Any]) -> ProviderConfig:
    defaults = ProviderConfig()
    return ProviderConfig(
        api_url=_get(data, "api_url", "apiUrl") or defaults.api_url,
        model=data.get("model") or defaults.model,
        api_key=_get(data, "api_key", "apiKey"),
        timeout=float(data.get("timeout", defaults.timeout)),
        max_tokens=int(_get(data, "max_tokens", "maxTokens", defaults.max_tokens)),
        temperature=float(data.get("temperature", defaults.temperature)),
    )


def config_from_mapping(data: Mapping[str, Any], *, base_dir: Path | None = None) -> SiteConfig:
    """Build a SiteConfig from a parsed mapping (camelCase or snake_case keys)."""
    ai_data = data.get("ai")
    ai = None
    if isinstance(ai_data, Mapping):
        provider_data = ai_data.get("provider")
        ai = AIConfig(
            chatbot=bool(ai_data.get("chatbot", True)),
            mcp=bool(ai_data.get("mcp", False)),
            provider=_provider_from_mapping(provider_data)
            if isinstance(provider_data, Mapping)
            else None,
        )

    content_dir = Path(_get(data, "content_dir", "contentDir", DEFAULT_CONTENT_DIR))
    if base_dir is not None and not content_dir.is_absolute():
        content_dir = base_dir / content_dir

    return SiteConfig(
        name=str(data.get("name", "Docs")),
        content_dir=content_dir,
        base_path=str(_get(data, "base_path", "basePath", DEFAULT_BASE_PATH)),
        navigation=[NavItem.from_mapping(item) for item in data.get("navigation") or []],
        colors=dict(data.get("colors") or {}),
        ai=ai,
        excerpt_chars=int(_get(data, "excerpt_chars", "excerptChars", 500)),
        watch=bool(data.get("watch", True)),
    )


def load_config(path: Path) -> SiteConfig:
    """Load a YAML site configuration; relative content dirs resolve next to it."""
    path = Path(path)
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Config {path} must contain a mapping at the top level")
    return config_from_mapping(raw, base_dir=path.parent)


def watch_disabled() -> bool:
    return os.environ.get(NO_WATCH_ENV, "").lower() in {"1", "true", "yes"}


@dataclass(slots=True)
class DocsContext:
    """Everything a component needs to know about one documentation site."""

    config: SiteConfig
    content_root: Path
    base_path: str

    @classmethod
    def from_config(cls, config: SiteConfig, *, base_dir: Path | None = None) -> "DocsContext":
        root = config.content_dir
        if not root.is_absolute() and base_dir is not None:
            root = base_dir / root
        return cls(config=config, content_root=root, base_path=config.base_path)

    @property
    def provider(self) -> ProviderConfig | None:
        return self.config.ai.provider if self.config.ai else None
