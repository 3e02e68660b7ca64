"""navchat/settings.py

Runtime configuration loaded from environment variables / .env file.

Configure via environment variables:
  OLLAMA_BASE_URL        : primary Ollama endpoint (tried first)
  OLLAMA_FALLBACK_URLS   : JSON list of loopback endpoints tried afterwards
  OLLAMA_MODELS          : JSON list of model tags, most capable first
  WARMUP_DELAY_SECONDS   : pause before the first attempt of every generation
"""

from __future__ import annotations

import httpx
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Android emulator alias for the host loopback, then the host loopback itself.
DEFAULT_FALLBACK_URLS: list[str] = [
    "http://10.0.2.2:11434",
    "http://127.0.0.1:11434",
]

DEFAULT_MODELS: list[str] = [
    "llama3.2",
    "llama3.2:8b",
    "llama3.2:latest",
    "llama3",
    "llama3:8b",
    "llama3:latest",
    "llama3.1",
    "llama3.1:8b",
    "llama3.1:latest",
    "llama2",
    "mistral",
    "gemma:2b",
    "phi",
    "orca-mini",
]


DEFAULT_CONNECT_TIMEOUT: float = 15.0
DEFAULT_WRITE_TIMEOUT: float = 30.0
DEFAULT_READ_TIMEOUT: float = 60.0


def build_timeout(
    *,
    connect: float = DEFAULT_CONNECT_TIMEOUT,
    write: float = DEFAULT_WRITE_TIMEOUT,
    read: float = DEFAULT_READ_TIMEOUT,
) -> httpx.Timeout:
    """Return an ``httpx.Timeout`` with separate connect, write and read limits."""
    return httpx.Timeout(read, connect=connect, read=read, write=write)


def candidate_endpoints(primary: str | None, fallbacks: list[str]) -> list[str]:
    """Build the prioritized endpoint list.

    The primary URL comes first, followed by the fallbacks.  Trailing slashes
    are normalised, blanks are skipped and duplicates removed so that the
    first occurrence wins.

    Args:
        primary: Configured base URL, may be empty.
        fallbacks: Documented loopback URLs.

    Returns:
        Ordered, de-duplicated list of base URLs.
    """
    ordered: list[str] = []
    for url in [primary or "", *fallbacks]:
        normalised = url.strip().rstrip("/")
        if normalised and normalised not in ordered:
            ordered.append(normalised)
    return ordered


class NavchatSettings(BaseSettings):
    """Runtime configuration.

    Attributes:
        ollama_base_url: Primary Ollama base URL.
        ollama_fallback_urls: Loopback URLs tried after the primary one.
        ollama_models: Model tags in preference order.
        warmup_delay_seconds: Delay applied once per generation and before
            the startup probe.
        connect_timeout_seconds: HTTP connect timeout.
        write_timeout_seconds: HTTP write timeout.
        read_timeout_seconds: HTTP read timeout, long enough for slow models.
        log_level: Root logging level for the entry points.
        api_host: Bind address for the HTTP API.
        api_port: Port for the HTTP API.
        web_port: Port for the Gradio web UI.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    ollama_base_url: str = Field(
        "http://127.0.0.1:11434",
        description="Primary Ollama base URL.",
    )
    ollama_fallback_urls: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FALLBACK_URLS),
        description="Loopback URLs tried after the primary one.",
    )
    ollama_models: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MODELS),
        description="Model tags, newest and most capable first.",
    )
    warmup_delay_seconds: float = Field(2.0, ge=0.0)
    connect_timeout_seconds: float = Field(DEFAULT_CONNECT_TIMEOUT, gt=0.0)
    write_timeout_seconds: float = Field(DEFAULT_WRITE_TIMEOUT, gt=0.0)
    read_timeout_seconds: float = Field(DEFAULT_READ_TIMEOUT, gt=0.0)
    log_level: str = Field("INFO")
    api_host: str = Field("0.0.0.0")
    api_port: int = Field(8300)
    web_port: int = Field(7860)

    def endpoints(self) -> list[str]:
        """Return the de-duplicated endpoint list, primary first."""
        return candidate_endpoints(self.ollama_base_url, self.ollama_fallback_urls)

    def http_timeout(self) -> httpx.Timeout:
        """Return the per-request timeout used by the completion client."""
        return build_timeout(
            connect=self.connect_timeout_seconds,
            write=self.write_timeout_seconds,
            read=self.read_timeout_seconds,
        )
