"""navchat/message_log.py

Append-only conversation log rendered by the front-ends.

Messages are never edited or removed.  Appends are serialised with a lock so
concurrent agent chains (and front-ends calling from worker threads) cannot
lose updates.  Subscribers are notified after each append.
"""

from __future__ import annotations

# Standard Library
import dataclasses
import logging
import threading
import uuid
from collections.abc import Callable, Iterator
from datetime import datetime, timezone

logger = logging.getLogger("navchat.log")

MessageListener = Callable[["ChatMessage"], None]


def _new_message_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclasses.dataclass(slots=True, frozen=True)
class ChatMessage:
    """A single visible turn of the conversation.

    Attributes:
        content: Text shown to the user.
        is_from_user: ``True`` for user input, ``False`` for assistant replies.
        id: Unique identifier, stable for list rendering.
        timestamp: Creation time (UTC).
    """

    content: str
    is_from_user: bool
    id: str = dataclasses.field(default_factory=_new_message_id)
    timestamp: datetime = dataclasses.field(default_factory=_utcnow)

    @property
    def role(self) -> str:
        """Chat role name used by the web front-ends."""
        return "user" if self.is_from_user else "assistant"


class MessageLog:
    """Thread-safe, append-only sequence of :class:`ChatMessage`."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._listeners: list[MessageListener] = []
        self._lock = threading.Lock()

    def append(self, message: ChatMessage) -> ChatMessage:
        """Append *message* and notify subscribers.

        Args:
            message: The message to add.

        Returns:
            The same message, for chaining.
        """
        with self._lock:
            self._messages.append(message)
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(message)
            except Exception as exc:
                logger.warning("message listener error: %s", exc, exc_info=True)
        return message

    def add_user_message(self, content: str) -> ChatMessage:
        return self.append(ChatMessage(content=content, is_from_user=True))

    def add_assistant_message(self, content: str) -> ChatMessage:
        return self.append(ChatMessage(content=content, is_from_user=False))

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        """Register *listener* for future appends.

        Returns:
            A callable that removes the listener again.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """Read-only snapshot in arrival order."""
        with self._lock:
            return tuple(self._messages)

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.messages)
