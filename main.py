#!/usr/bin/env python3
"""main.py

Entry point for navchat - intent-routed chat with map navigation.
Provides an interactive CLI interface using the Rich library.
"""

from __future__ import annotations

# Standard Library
import asyncio
import logging
import sys

# Third-Party Libraries
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.theme import Theme

# Local Modules
from navchat.message_log import ChatMessage
from navchat.orchestrator import ChatOrchestrator
from navchat.settings import NavchatSettings

# Load environment variables from .env file
load_dotenv()

logger = logging.getLogger("navchat.cli")

# Initialize Rich console with custom theme
custom_theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "user": "bold blue",
        "assistant": "green",
    }
)
console = Console(theme=custom_theme)


def display_banner() -> None:
    """Display the navchat welcome banner."""
    console.print(
        Panel(
            "[bold cyan]navchat[/bold cyan]\n"
            "[dim]Ask anything, or ask for directions to open your maps app.[/dim]",
            border_style="cyan",
        )
    )
    console.print()


def display_help() -> None:
    """Display available commands and usage information."""
    help_text = """
**Available Commands:**

- `/help` - Show this help message
- `/history` - Reprint the whole conversation
- `/stats` - Show endpoints, models and message count
- `/quit` or `/exit` - Exit navchat
- Any other text - Chat with the assistant

**Tips:**

- Ask "How do I get to Central Park?" to open directions in your maps app
- Replies marked `[FALL BACK MODEL]` mean no Ollama endpoint answered
    """
    console.print(Panel(Markdown(help_text), title="Help", border_style="cyan"))


def display_stats(orchestrator: ChatOrchestrator, settings: NavchatSettings) -> None:
    """Display endpoint, model and conversation statistics.

    Args:
        orchestrator: The running orchestrator.
        settings: Active configuration.
    """
    endpoints = "\n".join(f"  - `{url}`" for url in settings.endpoints())
    first_model = settings.ollama_models[0] if settings.ollama_models else "-"
    stats_text = f"""
**Connection:**

- Endpoints (in order):
{endpoints}
- Models tried per endpoint: {len(settings.ollama_models)} (first: `{first_model}`)
- Messages in conversation: {len(orchestrator.messages)}
    """
    console.print(Panel(Markdown(stats_text), title="Statistics", border_style="cyan"))


def render_message(message: ChatMessage) -> None:
    """Print one message from the log."""
    if message.is_from_user:
        console.print(f"[user]You:[/user] {escape(message.content)}")
        return
    console.print(
        Panel(
            Markdown(message.content),
            title="[bold green]navchat[/bold green]",
            border_style="green",
        )
    )


async def chat_loop(settings: NavchatSettings) -> None:
    """Run the REPL until the user quits.

    Args:
        settings: Active configuration.
    """
    orchestrator = ChatOrchestrator.from_settings(settings)
    for message in orchestrator.messages:
        render_message(message)

    def _on_message(message: ChatMessage) -> None:
        # Assistant replies are printed as they land, in completion order.
        if not message.is_from_user:
            render_message(message)

    orchestrator.subscribe(_on_message)
    orchestrator.start()

    console.print(
        "Type [bold]/help[/bold] for commands, or start chatting!\n", style="info"
    )

    try:
        while True:
            user_input = (
                await asyncio.to_thread(Prompt.ask, "[bold blue]You[/bold blue]")
            ).strip()

            if not user_input:
                continue

            command = user_input.lower()
            if command in ("/quit", "/exit"):
                console.print("\nGoodbye!\n", style="success")
                break
            if command == "/help":
                display_help()
                continue
            if command == "/history":
                for message in orchestrator.messages:
                    render_message(message)
                continue
            if command == "/stats":
                display_stats(orchestrator, settings)
                continue

            try:
                with console.status("[bold green]Thinking...", spinner="dots"):
                    await orchestrator.send_message(user_input)
            except Exception as exc:
                logger.error("Chat error: %s", exc, exc_info=True)
                console.print(f"\nError: {exc}\n", style="error")
                console.print(
                    "You can continue chatting or type /quit to exit.\n", style="info"
                )
            console.print()
    finally:
        orchestrator.shutdown()
        if orchestrator.service is not None:
            await orchestrator.service.aclose()


def main() -> None:
    """Main entry point for the navchat CLI."""
    settings = NavchatSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    display_banner()
    console.print(f"Primary Ollama endpoint: {settings.ollama_base_url}", style="info")
    if settings.ollama_models:
        console.print(f"Preferred model: {settings.ollama_models[0]}\n", style="info")

    try:
        asyncio.run(chat_loop(settings))
    except KeyboardInterrupt:
        console.print("\n\nInterrupted. Goodbye!\n", style="warning")
        sys.exit(0)


if __name__ == "__main__":
    main()
