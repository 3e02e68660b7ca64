"""tests/conftest.py

Pytest configuration and shared fixtures for the navchat test suite.
"""

from __future__ import annotations

# Standard Library
import json
from collections.abc import Callable
from unittest.mock import AsyncMock, Mock

# Third-Party Libraries
import httpx
import pytest

# Local Modules
from navchat.agents import AgentRole

Handler = Callable[[httpx.Request], httpx.Response]


def _ollama_reply(content: str, model: str = "llama3.2") -> dict[str, object]:
    return {
        "model": model,
        "created_at": "2026-10-17T00:00:00Z",
        "message": {"role": "assistant", "content": content},
        "done": True,
    }


@pytest.fixture
def ollama_reply() -> Callable[..., dict[str, object]]:
    """Builder for non-streaming ``/api/chat`` reply bodies."""
    return _ollama_reply


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by the mock transport, in send order."""
    return []


@pytest.fixture
def mock_http_client(
    recorded_requests: list[httpx.Request],
) -> Callable[[Handler], httpx.AsyncClient]:
    """Factory for an ``httpx.AsyncClient`` backed by ``httpx.MockTransport``.

    Every request is recorded before the handler runs.
    """

    def _factory(handler: Handler) -> httpx.AsyncClient:
        def _recording(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        return httpx.AsyncClient(transport=httpx.MockTransport(_recording))

    return _factory


@pytest.fixture
def request_models(recorded_requests: list[httpx.Request]) -> Callable[[], list[str]]:
    """Return the ``model`` field of every recorded request."""

    def _models() -> list[str]:
        return [json.loads(r.content)["model"] for r in recorded_requests]

    return _models


@pytest.fixture
def mock_service() -> Mock:
    """Generation service stub with an async ``generate``."""
    service = Mock()
    service.generate = AsyncMock(return_value="This is a test response from the mock LLM.")
    return service


@pytest.fixture
def make_agent() -> Callable[[AgentRole, str], Mock]:
    """Factory for agent doubles whose ``respond`` returns a fixed reply."""

    def _factory(role: AgentRole, reply: str) -> Mock:
        agent = Mock()
        agent.role = role
        agent.respond = AsyncMock(return_value=reply)
        return agent

    return _factory


@pytest.fixture
def maps_launcher() -> Mock:
    """Maps-launch collaborator that succeeds by default."""
    launcher = Mock()
    launcher.open_with_directions.return_value = True
    return launcher


@pytest.fixture
def sample_messages() -> list[tuple[str, bool]]:
    """Sample conversation as ``(content, is_from_user)`` pairs."""
    return [
        ("Hello!", True),
        ("Hi there! How can I help you?", False),
        ("How do I get to Central Park?", True),
        ("I'll open the maps app for you with directions to Central Park.", False),
    ]
