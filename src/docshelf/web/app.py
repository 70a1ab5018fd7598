"""FastAPI application exposing a docshelf engine over HTTP."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Literal

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from docshelf import __version__
from docshelf.agents import TOOLS_PATH
from docshelf.engine import DocsEngine
from docshelf.models import ChatMessage
from docshelf.navigation import get_breadcrumbs, get_prev_next
from docshelf.ratelimit import RateLimiter
from docshelf.utils.text import snippet

LOGGER = logging.getLogger(__name__)


class MessagePayload(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatPayload(BaseModel):
    messages: List[MessagePayload]


class InvalidatePayload(BaseModel):
    path: str | None = None


class ToolCallPayload(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


def _base_url(request: Request) -> str:
    return str(request.base_url).rstrip("/")


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def create_app(engine: DocsEngine, *, rate_limiter: RateLimiter | None = None) -> FastAPI:
    """Build the HTTP API around ``engine``.

    Blocking engine calls run on worker threads so disk reads and provider
    calls never stall the event loop.
    """
    app = FastAPI(title=f"{engine.config.name} Docs", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.engine = engine
    limiter = rate_limiter or RateLimiter()
    base_path = engine.context.base_path.rstrip("/")

    @app.on_event("startup")
    async def startup_event() -> None:
        logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        await asyncio.to_thread(engine.close)

    @app.get("/api/docs")
    async def docs_json(request: Request) -> Dict[str, Any]:
        return await asyncio.to_thread(engine.docs_json, _base_url(request))

    @app.get("/api/docs/{slug:path}")
    async def get_doc(slug: str) -> Dict[str, Any]:
        rendered = await asyncio.to_thread(engine.get_rendered_document, slug)
        if rendered is None:
            raise HTTPException(status_code=404, detail=f"Document not found: {slug}")

        document = rendered.document
        href = f"{base_path}/{document.slug}"
        prev, nxt = get_prev_next(href, engine.config.navigation)
        return {
            "slug": document.slug,
            "frontmatter": document.frontmatter.to_dict(),
            "html": rendered.html,
            "toc": [item.to_dict() for item in rendered.toc],
            "prev": {"title": prev.title, "href": prev.href} if prev else None,
            "next": {"title": nxt.title, "href": nxt.href} if nxt else None,
            "breadcrumbs": [
                {"title": crumb.title, "href": crumb.href}
                for crumb in get_breadcrumbs(href, engine.config.navigation)
            ],
        }

    @app.get("/api/search")
    async def search_docs(q: str = "") -> Dict[str, Any]:
        query = q.strip()
        if not query:
            raise HTTPException(status_code=400, detail="Empty query")

        matches = await asyncio.to_thread(engine.match, query)
        results = []
        for entry in matches:
            item = entry.to_dict()
            item["snippet"] = snippet(entry.excerpt, query)
            results.append(item)
        return {"results": results}

    @app.post("/api/chat")
    async def chat(payload: ChatPayload, request: Request) -> Dict[str, Any]:
        if not payload.messages:
            raise HTTPException(status_code=400, detail="No messages provided")
        if not limiter.is_allowed(_client_key(request)):
            raise HTTPException(status_code=429, detail="Too many requests. Please wait a minute.")

        messages = [ChatMessage(role=m.role, content=m.content) for m in payload.messages]
        response = await asyncio.to_thread(engine.handle_chat, messages)
        return response.to_dict()

    @app.post("/api/invalidate")
    async def invalidate(payload: InvalidatePayload) -> Dict[str, str]:
        await asyncio.to_thread(engine.invalidate, payload.path)
        return {"status": "ok"}

    @app.get("/llms.txt", response_class=PlainTextResponse)
    async def llms_txt(request: Request) -> PlainTextResponse:
        text = await asyncio.to_thread(engine.llms_txt, _base_url(request))
        return PlainTextResponse(text)

    @app.get("/llms-full.txt", response_class=PlainTextResponse)
    async def llms_full_txt() -> PlainTextResponse:
        text = await asyncio.to_thread(engine.llms_full_txt)
        return PlainTextResponse(text)

    @app.post(f"{TOOLS_PATH}/{{name}}")
    async def call_tool(name: str, payload: ToolCallPayload) -> Dict[str, Any]:
        ai = engine.config.ai
        if ai is None or not ai.mcp:
            raise HTTPException(status_code=404, detail="MCP is not enabled")

        args = payload.arguments
        if name == "search_docs":
            text = await asyncio.to_thread(engine.search_docs_text, str(args.get("query", "")))
        elif name == "get_doc":
            text = await asyncio.to_thread(engine.doc_text, str(args.get("slug", "")))
        elif name == "get_all_docs":
            text = await asyncio.to_thread(engine.all_docs_text)
        else:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")
        return {"content": [{"type": "text", "text": text}]}

    return app
