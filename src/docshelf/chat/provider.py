"""OpenAI-compatible chat completion client."""

from __future__ import annotations

import logging
import os
import threading
from typing import Any, Callable, Dict, List, Sequence

import httpx

from docshelf.config import API_KEY_ENV, ProviderConfig
from docshelf.errors import ProviderError
from docshelf.models import ChatMessage

LOGGER = logging.getLogger(__name__)

EMPTY_REPLY = "Sorry, I couldn't generate a response."

Completer = Callable[[str, Sequence[ChatMessage]], str]


class WarningState:
    """Remembers which one-time warnings were already emitted."""

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self._lock = threading.Lock()

    def warn_once(self, key: str, message: str, *args: Any) -> bool:
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
        LOGGER.warning(message, *args)
        return True

    def seen(self, key: str) -> bool:
        with self._lock:
            return key in self._seen


def resolve_api_key(provider: ProviderConfig, warnings: WarningState) -> str:
    """Pick the API key from config or environment, warning once about either problem."""
    if provider.api_key:
        warnings.warn_once(
            "config_api_key",
            "API key found in site config. Consider using the %s environment "
            "variable instead to avoid committing secrets.",
            API_KEY_ENV,
        )
        return provider.api_key

    api_key = os.environ.get(API_KEY_ENV, "")
    if not api_key:
        warnings.warn_once(
            "missing_api_key",
            "AI chat is configured but no API key found. Set the %s environment variable.",
            API_KEY_ENV,
        )
    return api_key


class OpenAICompatibleCompleter:
    """Calls a ``/chat/completions`` endpoint and returns the assistant text.

    Any failure, including a timeout, surfaces as ``ProviderError``.
    """

    def __init__(
        self,
        provider: ProviderConfig,
        *,
        warnings: WarningState | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.provider = provider
        self.warnings = warnings or WarningState()
        self._transport = transport

    def _payload(self, system_prompt: str, messages: Sequence[ChatMessage]) -> Dict[str, Any]:
        convo: List[Dict[str, str]] = [{"role": "system", "content": system_prompt}]
        convo += [message.to_dict() for message in messages]
        return {
            "model": self.provider.model,
            "messages": convo,
            "max_tokens": self.provider.max_tokens,
            "temperature": self.provider.temperature,
        }

    def __call__(self, system_prompt: str, messages: Sequence[ChatMessage]) -> str:
        api_key = resolve_api_key(self.provider, self.warnings)
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        try:
            with httpx.Client(timeout=self.provider.timeout, transport=self._transport) as client:
                response = client.post(
                    self.provider.api_url,
                    headers=headers,
                    json=self._payload(system_prompt, messages),
                )
        except httpx.TimeoutException as exc:
            raise ProviderError(f"AI provider timed out after {self.provider.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise ProviderError(f"AI provider request failed: {exc}") from exc

        if response.status_code >= 400:
            raise ProviderError(
                f"AI provider error: {response.status_code}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError("AI provider returned invalid JSON") from exc

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None
        return content or EMPTY_REPLY
