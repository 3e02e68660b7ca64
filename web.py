"""web.py

Gradio web interface for navchat.
Exposes the ChatOrchestrator over HTTP at 0.0.0.0:7860 (``WEB_PORT``).

It is a single-user, local-first interface. The orchestrator is a
module-level singleton that owns the conversation log; the chat widget is
always re-rendered from that log.

Exposed interfaces:
    demo (gr.Blocks): The Gradio application.  Launch via ``python web.py``.
"""

from __future__ import annotations

# Standard Library
import logging

# Third-Party Libraries
import gradio as gr
from dotenv import load_dotenv

# Local Modules
from navchat.orchestrator import ChatOrchestrator
from navchat.settings import NavchatSettings

load_dotenv()

settings: NavchatSettings = NavchatSettings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("navchat.web")

# ---------------------------------------------------------------------------
# Singleton orchestrator
# ---------------------------------------------------------------------------
orchestrator: ChatOrchestrator = ChatOrchestrator.from_settings(settings)
_warmed_up: bool = False
logger.info("ChatOrchestrator initialised: endpoints=%s", settings.endpoints())


# ---------------------------------------------------------------------------
# Gradio handler functions
# ---------------------------------------------------------------------------


def conversation() -> list[dict[str, str]]:
    """Render the orchestrator log as Gradio chat history."""
    return [{"role": m.role, "content": m.content} for m in orchestrator.messages]


async def on_load() -> list[dict[str, str]]:
    """Start the connection warm-up once, inside Gradio's event loop."""
    global _warmed_up
    if not _warmed_up:
        _warmed_up = True
        orchestrator.start()
    return conversation()


async def respond(
    message: str,
    history: list[dict[str, str]],
) -> tuple[str, list[dict[str, str]]]:
    """Send a user message and re-render the chat once its chain finishes.

    Args:
        message: The user's input text.
        history: Current Gradio chat history (ignored; the log is the source
            of truth).

    Returns:
        A tuple of (cleared input text, updated chat history).
    """
    if not message.strip():
        return "", conversation()

    await orchestrator.send_message(message)
    return "", conversation()


# ---------------------------------------------------------------------------
# Gradio UI layout
# ---------------------------------------------------------------------------

with gr.Blocks(title="navchat") as demo:
    gr.Markdown(
        "# navchat\n"
        "*Ask anything, or ask for directions to open your maps app.*"
    )

    chatbot = gr.Chatbot(
        label="navchat",
        height=540,
        layout="bubble",
    )

    with gr.Row():
        txt = gr.Textbox(
            placeholder="Type your message and press Enter…",
            show_label=False,
            container=False,
            scale=9,
            autofocus=True,
        )
        send_btn = gr.Button("Send", variant="primary", scale=1)

    refresh_btn = gr.Button("Refresh", variant="secondary")
    gr.Markdown(f"**Primary Ollama endpoint:** `{settings.ollama_base_url}`")

    # ------------------------------------------------------------------
    # Event wiring
    # ------------------------------------------------------------------
    demo.load(on_load, outputs=chatbot)
    txt.submit(respond, inputs=[txt, chatbot], outputs=[txt, chatbot])
    send_btn.click(respond, inputs=[txt, chatbot], outputs=[txt, chatbot])
    refresh_btn.click(conversation, outputs=chatbot)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    demo.launch(
        server_name="0.0.0.0",
        server_port=settings.web_port,
        theme=gr.themes.Soft(),
    )
