"""navchat: intent-routed chat client with map navigation over Ollama."""

from navchat.agents import Agent, AgentRole
from navchat.generation import ResilientGenerationService
from navchat.message_log import ChatMessage, MessageLog
from navchat.orchestrator import ChatOrchestrator

__all__ = [
    "Agent",
    "AgentRole",
    "ChatMessage",
    "ChatOrchestrator",
    "MessageLog",
    "ResilientGenerationService",
]
