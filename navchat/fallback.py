"""navchat/fallback.py

Canned replies used when no endpoint/model pair answers.

Pure functions, no I/O.  Every reply except the probe diagnostic carries
the degraded-mode prefix so the user can tell it apart from a model answer.
"""

from __future__ import annotations

from typing import Final

WARMUP_PROBE_TEXT: Final[str] = "test"

DEGRADED_PREFIX: Final[str] = "[FALL BACK MODEL] "

PROBE_DIAGNOSTIC: Final[str] = (
    "I'm currently in fallback mode. Unable to connect to Ollama. Please check that:\n"
    "1. Ollama is running with 'ollama serve' in a separate terminal\n"
    "2. You have the llama3.2 model installed (run 'ollama list' to check)\n"
    "3. If not installed, run 'ollama pull llama3.2' to install it"
)

SHORT_INPUT_REPLY: Final[str] = "Could you please provide more details?"
GENERIC_REPLY: Final[str] = "That's interesting. Can you tell me more about that?"

# (keywords, reply); first rule with any keyword present wins.
_RULES: Final[tuple[tuple[tuple[str, ...], str], ...]] = (
    (("hello",), "Hello! How can I help you today?"),
    (("how are you",), "I'm doing well, thank you for asking!"),
    (
        ("weather",),
        "I don't have access to real-time weather data, but I can help you find "
        "a weather service.",
    ),
    (("name",), "I'm your navchat AI assistant."),
    (("help",), "I'm here to help! What do you need assistance with?"),
    (
        ("ollama",),
        "It looks like you're trying to use Ollama. Please check that:\n"
        "1. Ollama is installed on your machine\n"
        "2. Ollama is running with 'ollama serve' in a separate terminal\n"
        "3. You have the llama3.2 model installed (run 'ollama list' to check)\n"
        "4. If not installed, run 'ollama pull llama3.2' to install it\n"
        "5. OLLAMA_BASE_URL is set to http://127.0.0.1:11434 "
        "(or http://10.0.2.2:11434 for emulators)",
    ),
    (
        ("error", "issue", "problem"),
        "I'm currently experiencing connection issues with the Ollama server. "
        "Please check that:\n"
        "1. Ollama is installed and running on your machine\n"
        "2. The correct model is available (try 'ollama list' in terminal)\n"
        "3. OLLAMA_BASE_URL is correct\n"
        "4. Your device can connect to the Ollama server",
    ),
    (
        ("model",),
        "I'm using a fallback mode because I couldn't connect to any Ollama models. "
        "Please make sure you have models installed with 'ollama pull llama3' or "
        "similar commands.",
    ),
    (
        ("connect",),
        "I'm having trouble connecting to the Ollama server. Please check your "
        "network connection and make sure Ollama is running.",
    ),
)


def _match_rule(user_input: str) -> str:
    lowered = user_input.lower()
    for keywords, reply in _RULES:
        if any(keyword in lowered for keyword in keywords):
            return reply
    if len(user_input) < 5:
        return SHORT_INPUT_REPLY
    return GENERIC_REPLY


def fallback_response(user_input: str) -> str:
    """Return the degraded-mode reply for *user_input*.

    Args:
        user_input: The text the model would have answered.

    Returns:
        The probe diagnostic when *user_input* is exactly the warm-up probe,
        otherwise :data:`DEGRADED_PREFIX` plus the first matching rule.
    """
    if user_input == WARMUP_PROBE_TEXT:
        return PROBE_DIAGNOSTIC
    return DEGRADED_PREFIX + _match_rule(user_input)
