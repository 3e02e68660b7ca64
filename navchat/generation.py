"""navchat/generation.py

Resilient text generation over a list of Ollama endpoints and models.

``generate`` walks the endpoint × model cross product in priority order and
returns the first non-empty reply.  When every pair fails it answers from
the canned fallback table, so callers always get a displayable string.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from types import TracebackType

import httpx

from navchat.fallback import fallback_response
from navchat.ollama_client import DEFAULT_TIMEOUT, CompletionFailure, complete
from navchat.settings import NavchatSettings

logger = logging.getLogger("navchat.generation")

DEFAULT_SYSTEM_PROMPT: str = "You are a helpful assistant."


class ResilientGenerationService:
    """Multi-endpoint, multi-model generation with a canned last resort.

    One ``httpx.AsyncClient`` is shared by every attempt and every agent that
    holds a reference to this service.
    """

    def __init__(
        self,
        endpoints: Sequence[str],
        models: Sequence[str],
        *,
        warmup_delay: float = 2.0,
        timeout: httpx.Timeout = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            endpoints: Base URLs in priority order (already de-duplicated).
            models: Model tags in preference order.
            warmup_delay: Seconds to wait once per ``generate`` call before
                the first attempt.
            timeout: Per-request timeout handed to the completion client.
            http_client: Optional pre-built client (tests inject one backed
                by ``httpx.MockTransport``).  The service only closes clients
                it created itself.
        """
        self.endpoints: list[str] = list(endpoints)
        self.models: list[str] = list(models)
        self.warmup_delay = warmup_delay
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client: httpx.AsyncClient = http_client or httpx.AsyncClient(timeout=timeout)

        logger.info(
            "ResilientGenerationService initialized: endpoints=%s models=%d warmup=%.1fs",
            self.endpoints,
            len(self.models),
            self.warmup_delay,
        )

    @classmethod
    def from_settings(
        cls,
        settings: NavchatSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> ResilientGenerationService:
        """Build a service from :class:`NavchatSettings`."""
        return cls(
            settings.endpoints(),
            settings.ollama_models,
            warmup_delay=settings.warmup_delay_seconds,
            timeout=settings.http_timeout(),
            http_client=http_client,
        )

    async def generate(
        self, user_input: str, system_prompt: str = DEFAULT_SYSTEM_PROMPT
    ) -> str:
        """Produce a reply for *user_input*.

        Cancelling the awaiting task abandons the remaining attempts.

        Args:
            user_input: Content of the user turn.
            system_prompt: Content of the system turn.

        Returns:
            The first non-empty model reply, or the canned fallback reply.
        """
        if self.warmup_delay > 0:
            logger.debug("[generate] waiting %.1fs before connecting", self.warmup_delay)
            await asyncio.sleep(self.warmup_delay)

        for endpoint in self.endpoints:
            logger.info("[generate] trying endpoint %s", endpoint)
            for model in self.models:
                try:
                    result = await complete(
                        endpoint,
                        model,
                        system_prompt,
                        user_input,
                        client=self._client,
                        timeout=self.timeout,
                    )
                except Exception as exc:
                    logger.error(
                        "[generate] unexpected error model=%r endpoint=%s: %s",
                        model,
                        endpoint,
                        exc,
                        exc_info=True,
                    )
                    continue

                if isinstance(result, CompletionFailure):
                    if result.model_not_found:
                        logger.warning(
                            "[generate] model %r not found or not loaded at %s, trying next model",
                            model,
                            endpoint,
                        )
                    else:
                        logger.warning(
                            "[generate] %s with model %r at %s, trying next model",
                            result.kind,
                            model,
                            endpoint,
                        )
                    continue

                logger.info("[generate] reply from model=%r endpoint=%s", result.model, endpoint)
                return result.text

            logger.warning("[generate] all models failed for %s, trying next endpoint", endpoint)

        logger.warning("[generate] all endpoints failed, using canned fallback")
        return fallback_response(user_input)

    async def aclose(self) -> None:
        """Close the shared HTTP client if this service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> ResilientGenerationService:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
