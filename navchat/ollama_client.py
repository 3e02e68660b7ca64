"""navchat/ollama_client.py

Single-shot client for the Ollama ``POST /api/chat`` endpoint.

One call sends one two-turn request (system + user) to one endpoint+model
pair.  Ordinary network and model errors never raise: they come back as a
:class:`CompletionFailure` so the caller can decide what to try next.
"""

from __future__ import annotations

import dataclasses
import logging
from enum import StrEnum
from typing import Literal

import httpx
from pydantic import BaseModel, ValidationError

from navchat.settings import build_timeout

logger = logging.getLogger("navchat.client")

CHAT_PATH: str = "/api/chat"

DEFAULT_TIMEOUT: httpx.Timeout = build_timeout()

_BODY_EXCERPT_CHARS: int = 500

# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


class PromptTurn(BaseModel):
    """One role-tagged turn of an outbound request."""

    role: Literal["system", "user", "assistant"]
    content: str


class CompletionRequest(BaseModel):
    """Body of ``POST /api/chat``.  Streaming is always disabled."""

    model: str
    messages: list[PromptTurn]
    stream: Literal[False] = False


class ResponseMessage(BaseModel):
    role: str = "assistant"
    content: str = ""


class CompletionResponse(BaseModel):
    """Non-streaming reply body returned by Ollama."""

    model: str = ""
    message: ResponseMessage
    done: bool = True


def build_request(model: str, system_prompt: str, user_input: str) -> CompletionRequest:
    """Build the two-turn request sent for every attempt."""
    return CompletionRequest(
        model=model,
        messages=[
            PromptTurn(role="system", content=system_prompt),
            PromptTurn(role="user", content=user_input),
        ],
    )


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class FailureKind(StrEnum):
    """Why a single completion attempt did not produce a reply."""

    TRANSPORT = "transport"
    HTTP_ERROR = "http_error"
    EMPTY_BODY = "empty_body"
    MALFORMED_BODY = "malformed_body"
    EMPTY_CONTENT = "empty_content"


@dataclasses.dataclass(slots=True, frozen=True)
class CompletionSuccess:
    """A reply with non-empty text.

    Attributes:
        text: The assistant message content.
        model: Model name echoed by the server (or the requested one).
    """

    text: str
    model: str


@dataclasses.dataclass(slots=True, frozen=True)
class CompletionFailure:
    """A failed attempt.

    Attributes:
        kind: Failure category.
        model: The model that was requested.
        endpoint: The base URL that was called.
        status_code: HTTP status for ``HTTP_ERROR``, otherwise ``None``.
        body: Truncated response body for ``HTTP_ERROR``.
        detail: Human-readable description for logs.
    """

    kind: FailureKind
    model: str
    endpoint: str
    status_code: int | None = None
    body: str = ""
    detail: str = ""

    @property
    def model_not_found(self) -> bool:
        """Heuristic used for logging; the retry policy does not depend on it."""
        if self.kind is not FailureKind.HTTP_ERROR:
            return False
        return self.status_code == 404 or "model" in self.body or "not found" in self.body


CompletionResult = CompletionSuccess | CompletionFailure


def _excerpt(text: str) -> str:
    flat = text.replace("\n", " ").strip()
    if len(flat) > _BODY_EXCERPT_CHARS:
        return f"{flat[:_BODY_EXCERPT_CHARS]}..."
    return flat


def parse_response(
    raw_body: str, *, model: str, endpoint: str
) -> CompletionResult:
    """Turn a 2xx response body into a typed result.

    Args:
        raw_body: Response text.
        model: Requested model, used when the body does not echo one.
        endpoint: Base URL, carried into failures for logging.

    Returns:
        :class:`CompletionSuccess` or a failure of kind ``EMPTY_BODY``,
        ``MALFORMED_BODY`` or ``EMPTY_CONTENT``.
    """
    if not raw_body.strip():
        return CompletionFailure(
            FailureKind.EMPTY_BODY, model, endpoint, detail="Response body is empty"
        )
    try:
        parsed = CompletionResponse.model_validate_json(raw_body)
    except ValidationError as exc:
        return CompletionFailure(
            FailureKind.MALFORMED_BODY,
            model,
            endpoint,
            body=_excerpt(raw_body),
            detail=f"Unparseable response: {exc.error_count()} error(s)",
        )
    if not parsed.message.content:
        return CompletionFailure(
            FailureKind.EMPTY_CONTENT,
            model,
            endpoint,
            detail="Empty content in response message",
        )
    return CompletionSuccess(text=parsed.message.content, model=parsed.model or model)


async def complete(
    endpoint: str,
    model: str,
    system_prompt: str,
    user_input: str,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: httpx.Timeout = DEFAULT_TIMEOUT,
) -> CompletionResult:
    """Send one chat-completion request to one endpoint+model pair.

    No retries happen here; the caller owns the fallback policy.

    Args:
        endpoint: Ollama base URL, e.g. ``http://127.0.0.1:11434``.
        model: Model tag to request.
        system_prompt: Content of the system turn.
        user_input: Content of the user turn.
        client: Shared ``httpx.AsyncClient``.  When omitted a short-lived
            client is created for this call.
        timeout: Connect/write/read limits for the request.

    Returns:
        A :class:`CompletionSuccess` or :class:`CompletionFailure`.
    """
    url: str = endpoint.rstrip("/") + CHAT_PATH
    request = build_request(model, system_prompt, user_input)
    payload = request.model_dump(mode="json")

    logger.info("[complete] model=%r url=%s", model, url)
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout) as owned:
                response = await owned.post(url, json=payload, timeout=timeout)
        else:
            response = await client.post(url, json=payload, timeout=timeout)
    except httpx.TransportError as exc:
        logger.warning("[complete] transport error model=%r url=%s: %s", model, url, exc)
        return CompletionFailure(
            FailureKind.TRANSPORT,
            model,
            endpoint,
            detail=f"{type(exc).__name__}: {exc}",
        )

    if not response.is_success:
        body = _excerpt(response.text)
        logger.warning(
            "[complete] HTTP %d model=%r url=%s body=%r",
            response.status_code,
            model,
            url,
            body,
        )
        return CompletionFailure(
            FailureKind.HTTP_ERROR,
            model,
            endpoint,
            status_code=response.status_code,
            body=body,
            detail=f"HTTP {response.status_code}",
        )

    result = parse_response(response.text, model=model, endpoint=endpoint)
    if isinstance(result, CompletionFailure):
        logger.warning("[complete] %s model=%r url=%s", result.detail, model, url)
    else:
        logger.info("[complete] model=%r reply length=%d chars", result.model, len(result.text))
    return result
