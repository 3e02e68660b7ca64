"""navchat/api.py

FastAPI HTTP interface for the chat orchestrator.

Endpoints:
  GET  /health     : liveness probe
  GET  /messages   : the conversation log, oldest first
  POST /messages   : post a user message, wait for its agent chain, return the log
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from navchat.message_log import ChatMessage
from navchat.orchestrator import ChatOrchestrator
from navchat.settings import NavchatSettings

logger = logging.getLogger("navchat.api")

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class SendRequest(BaseModel):
    text: str = Field(..., min_length=1, description="The user's message.")


class MessageOut(BaseModel):
    id: str
    content: str
    is_from_user: bool
    timestamp: datetime

    @classmethod
    def from_message(cls, message: ChatMessage) -> MessageOut:
        return cls(
            id=message.id,
            content=message.content,
            is_from_user=message.is_from_user,
            timestamp=message.timestamp,
        )


class ConversationOut(BaseModel):
    messages: list[MessageOut]


def _conversation(orchestrator: ChatOrchestrator) -> ConversationOut:
    return ConversationOut(
        messages=[MessageOut.from_message(m) for m in orchestrator.messages]
    )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------


def create_app(
    orchestrator: ChatOrchestrator | None = None,
    settings: NavchatSettings | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        orchestrator: Pre-built orchestrator (tests inject one with mocked
            agents).  When omitted one is wired from settings on startup.
        settings: Configuration used when building the orchestrator.

    Returns:
        The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = orchestrator is None
        active = orchestrator or ChatOrchestrator.from_settings(settings or NavchatSettings())
        app.state.orchestrator = active
        if owned:
            active.start()
        try:
            yield
        finally:
            active.shutdown()
            if owned and active.service is not None:
                await active.service.aclose()

    app = FastAPI(
        title="navchat",
        version="0.1.0",
        description="Intent-routed chat with map navigation over Ollama.",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", tags=["meta"])
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {"status": "ok", "server": "navchat-api"}

    @app.get("/messages", response_model=ConversationOut, tags=["chat"])
    async def list_messages(request: Request) -> ConversationOut:
        """Return the full conversation log."""
        return _conversation(request.app.state.orchestrator)

    @app.post("/messages", response_model=ConversationOut, tags=["chat"])
    async def send_message(body: SendRequest, request: Request) -> ConversationOut:
        """Post a user message and return the log once its chain has finished.

        Other chains started concurrently may still be running; their
        replies show up in later reads.
        """
        active: ChatOrchestrator = request.app.state.orchestrator
        await active.send_message(body.text)
        return _conversation(active)

    return app


def run_api() -> None:
    """Start the FastAPI server via uvicorn."""
    load_dotenv()
    settings = NavchatSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info("Starting navchat API on %s:%d", settings.api_host, settings.api_port)
    uvicorn.run(
        create_app(settings=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run_api()
