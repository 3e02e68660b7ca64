"""navchat/agents.py

Prompt-bound agents sharing one generation service.

There is a single :class:`Agent` type; the general, intent and task agents
differ only in their role tag and system prompt.  The intent and task
helpers are free functions operating on an agent.
"""

from __future__ import annotations

import dataclasses
import logging
from enum import StrEnum
from typing import Protocol

from navchat.intent_classifier import IntentResult, classify_intent

logger = logging.getLogger("navchat.agents")


class TextGenerator(Protocol):
    async def generate(self, user_input: str, system_prompt: str = ...) -> str: ...


class AgentRole(StrEnum):
    GENERAL = "general"
    INTENT = "intent"
    TASK = "task"


GENERAL_SYSTEM_PROMPT: str = "You are a helpful assistant."

INTENT_SYSTEM_PROMPT: str = (
    "You are an intent analysis assistant. Your job is to determine if the user's "
    "message is asking for directions or location information.\n"
    "If the user is asking for directions, respond with \"MAP_TASK: [destination]\" "
    "where [destination] is the location they want to go to.\n"
    "For example, if the user says \"How do I get to Central Park?\", respond with "
    "\"MAP_TASK: Central Park\".\n"
    "If the user is not asking for directions or location information, respond with "
    "a brief analysis of what they are asking for.\n"
    "\n"
    "Examples:\n"
    "User: \"How do I get to the nearest grocery store?\"\n"
    "Response: \"MAP_TASK: nearest grocery store\"\n"
    "\n"
    "User: \"Can you show me directions to 123 Main Street?\"\n"
    "Response: \"MAP_TASK: 123 Main Street\"\n"
    "\n"
    "User: \"What's the weather like today?\"\n"
    "Response: \"The user is asking about weather information, not directions.\"\n"
    "\n"
    "User: \"Tell me a joke\"\n"
    "Response: \"The user is asking for entertainment, not directions.\""
)

TASK_SYSTEM_PROMPT: str = (
    "You are a navigation assistant. Your job is to provide clear instructions for "
    "map navigation.\n"
    "When the user asks for directions to a location, provide a helpful response "
    "that includes:\n"
    "1. Confirmation that you're opening the maps app for them\n"
    "2. The destination they're going to\n"
    "3. A brief, friendly message\n"
    "\n"
    "Examples:\n"
    "User: \"I need directions to Central Park\"\n"
    "Response: \"I'll open the maps app for you with directions to Central Park. "
    "Enjoy your visit to this beautiful urban oasis!\"\n"
    "\n"
    "User: \"I need directions to the nearest grocery store\"\n"
    "Response: \"I'll open the maps app for you with directions to the nearest "
    "grocery store. Happy shopping!\"\n"
    "\n"
    "User: \"I need directions to 123 Main Street\"\n"
    "Response: \"I'll open the maps app for you with directions to 123 Main Street. "
    "Have a safe journey!\""
)

DEFAULT_PROMPTS: dict[AgentRole, str] = {
    AgentRole.GENERAL: GENERAL_SYSTEM_PROMPT,
    AgentRole.INTENT: INTENT_SYSTEM_PROMPT,
    AgentRole.TASK: TASK_SYSTEM_PROMPT,
}


@dataclasses.dataclass(slots=True)
class Agent:
    """A system prompt bound to the shared generation service.

    Attributes:
        service: Anything with an async ``generate(user_input, system_prompt)``.
        role: Role tag, used for the default prompt and for logging.
        system_prompt: Override; defaults to the role's prompt.
    """

    service: TextGenerator
    role: AgentRole = AgentRole.GENERAL
    system_prompt: str = ""

    def __post_init__(self) -> None:
        if not self.system_prompt:
            self.system_prompt = DEFAULT_PROMPTS[self.role]

    async def respond(self, user_input: str) -> str:
        """Generate this agent's reply to *user_input*.

        Unexpected service errors are turned into an apology string so the
        orchestrator always has something to show.
        """
        try:
            response = await self.service.generate(user_input, self.system_prompt)
        except Exception as exc:
            logger.error("[%s agent] error generating response: %s", self.role, exc, exc_info=True)
            return f"Sorry, there was an error: {exc}"
        logger.debug("[%s agent] response: %r", self.role, response[:200])
        return response


def directions_prompt(destination: str) -> str:
    return f"I need directions to {destination}"


async def analyze_intent(agent: Agent, user_input: str) -> IntentResult:
    """Ask *agent* (normally the intent agent) and classify its reply."""
    raw = await agent.respond(user_input)
    logger.info("Intent analysis: %r", raw[:300])
    return classify_intent(raw)


async def respond_to_map_task(agent: Agent, destination: str) -> str:
    """Ask *agent* (normally the task agent) to confirm a navigation request."""
    response = await agent.respond(directions_prompt(destination))
    logger.info("Map task instructions for %r: %r", destination, response[:200])
    return response
