"""navchat/orchestrator.py

Routes each user message through the agent chain.

Pipeline per ``send_message``:
  1. Append the user message to the log immediately.
  2. Intent agent classifies the raw text (``MAP_TASK: <destination>``).
  3. Branch:
       MAP_TASK      : task agent confirms, then the maps launcher opens
                       directions; a launch failure adds a second reply.
       AMBIGUOUS     : ask the user for the destination, nothing else runs.
       NOT_MAP_TASK  : general agent answers the raw text.

Each call runs as its own asyncio task.  Calls are not serialised: replies
land in the log in the order their chains finish.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any

from navchat.agents import (
    Agent,
    AgentRole,
    analyze_intent,
    respond_to_map_task,
)
from navchat.fallback import WARMUP_PROBE_TEXT
from navchat.generation import ResilientGenerationService
from navchat.intent_classifier import IntentKind
from navchat.maps import BrowserMapsLauncher, MapsLauncher
from navchat.message_log import ChatMessage, MessageListener, MessageLog
from navchat.settings import NavchatSettings

logger = logging.getLogger("navchat.orchestrator")

WELCOME_MESSAGE: str = "Hello! I'm your AI assistant. How can I help you today?"

AMBIGUOUS_DESTINATION_MESSAGE: str = (
    "I understand you want directions, but I couldn't determine the destination. "
    "Could you please specify where you want to go?"
)

MAPS_LAUNCH_FAILED_MESSAGE: str = (
    "Sorry, I couldn't open the maps app. "
    "Please make sure you have a maps app installed."
)


class ChatOrchestrator:
    """Owns the three agents, the message log and the maps launcher."""

    def __init__(
        self,
        service: ResilientGenerationService | None = None,
        maps_launcher: MapsLauncher | None = None,
        *,
        general_agent: Agent | None = None,
        intent_agent: Agent | None = None,
        task_agent: Agent | None = None,
        log: MessageLog | None = None,
        warmup_delay: float = 2.0,
    ) -> None:
        """Initialize the orchestrator and post the welcome message.

        Args:
            service: Shared generation service.  Required unless all three
                agents are supplied.
            maps_launcher: Collaborator that opens directions.  Defaults to
                :class:`BrowserMapsLauncher`.
            general_agent: Override for the conversation agent.
            intent_agent: Override for the intent classification agent.
            task_agent: Override for the navigation confirmation agent.
            log: Existing message log to append to.
            warmup_delay: Seconds to wait before the startup probe.

        Raises:
            ValueError: If an agent is missing and no service was given.
        """
        if service is None and None in (general_agent, intent_agent, task_agent):
            raise ValueError("service is required unless all three agents are given")

        self.service = service
        self.general_agent = general_agent or Agent(service, AgentRole.GENERAL)
        self.intent_agent = intent_agent or Agent(service, AgentRole.INTENT)
        self.task_agent = task_agent or Agent(service, AgentRole.TASK)
        self.maps_launcher: MapsLauncher = maps_launcher or BrowserMapsLauncher()
        self.log = log if log is not None else MessageLog()
        self.warmup_delay = warmup_delay
        self._pending: set[asyncio.Task[None]] = set()

        self.log.add_assistant_message(WELCOME_MESSAGE)

    @classmethod
    def from_settings(
        cls,
        settings: NavchatSettings,
        maps_launcher: MapsLauncher | None = None,
    ) -> ChatOrchestrator:
        """Wire a service and orchestrator from :class:`NavchatSettings`."""
        service = ResilientGenerationService.from_settings(settings)
        return cls(
            service,
            maps_launcher,
            warmup_delay=settings.warmup_delay_seconds,
        )

    # ------------------------------------------------------------------
    # UI boundary
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self.log.messages

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        return self.log.subscribe(listener)

    def start(self) -> asyncio.Task[None]:
        """Schedule the fire-and-forget connection warm-up.

        Must be called from inside a running event loop.
        """
        return self._spawn(self._warm_up(), name="navchat-warmup")

    def send_message(self, text: str) -> asyncio.Task[None]:
        """Post *text* as a user message and start its agent chain.

        The user message is in the log when this returns.  Must be called
        from inside a running event loop.

        Returns:
            The task running the chain; awaiting it is optional.
        """
        self.log.add_user_message(text)
        return self._spawn(self._handle(text), name="navchat-chain")

    async def wait_idle(self) -> None:
        """Wait until every chain started so far has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def shutdown(self) -> None:
        """Placeholder teardown; in-flight chains keep running."""
        logger.info("Orchestrator shutdown requested (%d chain(s) in flight)", len(self._pending))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, None], *, name: str) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "[%s] chain failed: %s",
                task.get_name(),
                exc,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    async def _warm_up(self) -> None:
        try:
            await asyncio.sleep(self.warmup_delay)
            logger.info("Initializing connection to Ollama...")
            response = await self.general_agent.respond(WARMUP_PROBE_TEXT)
            logger.info("Connection test response: %r", response[:200])
        except Exception as exc:
            logger.error("Error initializing connection: %s", exc, exc_info=True)

    async def _handle(self, text: str) -> None:
        intent = await analyze_intent(self.intent_agent, text)

        if intent.kind is IntentKind.MAP_TASK:
            destination = intent.destination or ""
            logger.info("Detected map task with destination: %r", destination)
            reply = await respond_to_map_task(self.task_agent, destination)
            self.log.add_assistant_message(reply)
            if not self._open_maps(destination):
                self.log.add_assistant_message(MAPS_LAUNCH_FAILED_MESSAGE)
            return

        if intent.kind is IntentKind.AMBIGUOUS:
            logger.info("Map task without destination, asking the user to clarify")
            self.log.add_assistant_message(AMBIGUOUS_DESTINATION_MESSAGE)
            return

        reply = await self.general_agent.respond(text)
        self.log.add_assistant_message(reply)

    def _open_maps(self, destination: str) -> bool:
        try:
            return bool(self.maps_launcher.open_with_directions(destination))
        except Exception as exc:
            logger.error("Maps launcher error: %s", exc, exc_info=True)
            return False
