"""The "Ask AI" assistant.

With an AI provider configured, questions go to the LLM with the whole
corpus as context. Without one, or when the provider fails, the answer is a
list of the best keyword matches.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Sequence

from docshelf.chat.provider import Completer, OpenAICompatibleCompleter, WarningState
from docshelf.config import DocsContext
from docshelf.errors import ProviderError
from docshelf.index.indexer import SearchIndex
from docshelf.index.search import rank
from docshelf.models import ChatMessage, ChatResponse, Source

LOGGER = logging.getLogger(__name__)

MAX_SOURCES = 5

NO_MATCHES_MESSAGE = (
    "I couldn't find any documentation matching your question. "
    "Try rephrasing or browse the docs directly."
)


def last_user_message(messages: Sequence[ChatMessage]) -> str:
    for message in reversed(messages):
        if message.role == "user":
            return message.content
    return ""


def build_system_prompt(site_name: str, full_docs: str) -> str:
    return (
        f"You are a helpful documentation assistant for {site_name}. "
        "Answer questions based ONLY on the documentation provided below. "
        "If the answer isn't in the docs, say so. Be concise and helpful.\n\n"
        f"--- DOCUMENTATION ---\n{full_docs}"
    )


class ChatOrchestrator:
    """Answers chat requests through the AI provider or the search fallback.

    Holds no state between calls apart from the one-time warning flags.
    """

    def __init__(
        self,
        context: DocsContext,
        index: SearchIndex,
        full_docs: Callable[[], str],
        *,
        completer: Completer | None = None,
        warnings: WarningState | None = None,
    ) -> None:
        self.context = context
        self.index = index
        self.full_docs = full_docs
        self.warnings = warnings or WarningState()
        self._completer = completer

    def _get_completer(self) -> Completer | None:
        if self._completer is not None:
            return self._completer
        provider = self.context.provider
        if provider is None:
            return None
        return OpenAICompatibleCompleter(provider, warnings=self.warnings)

    def find_sources(self, query: str) -> List[Source]:
        ranked = rank(self.index.build(), query)
        return [Source(title=item.title, slug=item.slug) for item in ranked[:MAX_SOURCES]]

    def handle_chat(self, messages: Sequence[ChatMessage]) -> ChatResponse:
        if self.context.provider is not None:
            completer = self._get_completer()
            try:
                return self._ai_chat(messages, completer)
            except ProviderError as exc:
                LOGGER.error("AI provider failed, falling back to search: %s", exc)
        return self._search_chat(messages)

    def _ai_chat(self, messages: Sequence[ChatMessage], completer: Completer) -> ChatResponse:
        prompt = build_system_prompt(self.context.config.name, self.full_docs())
        reply = completer(prompt, messages)
        return ChatResponse(
            message=ChatMessage(role="assistant", content=reply),
            sources=self.find_sources(last_user_message(messages)),
            mode="ai",
        )

    def _search_chat(self, messages: Sequence[ChatMessage]) -> ChatResponse:
        sources = self.find_sources(last_user_message(messages))
        if not sources:
            return ChatResponse(
                message=ChatMessage(role="assistant", content=NO_MATCHES_MESSAGE),
                sources=[],
                mode="search",
            )

        base_path = self.context.base_path.rstrip("/")
        listing = "\n".join(f"• **[{s.title}]({base_path}/{s.slug})**" for s in sources)
        content = (
            "Here are the most relevant documentation pages for your question:\n\n"
            f"{listing}\n\n"
            "Click a link to read more. For AI-powered answers, configure an AI "
            "provider in the site config."
        )
        return ChatResponse(
            message=ChatMessage(role="assistant", content=content),
            sources=sources,
            mode="search",
        )
