"""tests/test_message_log.py

Unit tests for the append-only MessageLog (navchat/message_log.py).
"""

from __future__ import annotations

# Standard Library
import dataclasses
import threading
from unittest.mock import Mock

# Third-Party Libraries
import pytest

# Local Modules
from navchat.message_log import ChatMessage, MessageLog


class TestChatMessage:
    """Test suite for ChatMessage."""

    def test_defaults(self) -> None:
        message = ChatMessage(content="Hello!", is_from_user=True)
        assert message.id
        assert message.timestamp.tzinfo is not None
        assert message.role == "user"

    def test_ids_are_unique(self) -> None:
        ids = {ChatMessage(content="x", is_from_user=False).id for _ in range(100)}
        assert len(ids) == 100

    def test_immutable(self) -> None:
        message = ChatMessage(content="Hello!", is_from_user=False)
        with pytest.raises(dataclasses.FrozenInstanceError):
            message.content = "edited"  # type: ignore[misc]


class TestMessageLog:
    """Test suite for MessageLog."""

    def test_starts_empty(self) -> None:
        log = MessageLog()
        assert len(log) == 0
        assert log.messages == ()

    def test_arrival_order_preserved(self, sample_messages: list[tuple[str, bool]]) -> None:
        log = MessageLog()
        for content, from_user in sample_messages:
            if from_user:
                log.add_user_message(content)
            else:
                log.add_assistant_message(content)

        assert [(m.content, m.is_from_user) for m in log] == sample_messages

    def test_snapshot_is_read_only(self) -> None:
        log = MessageLog()
        log.add_user_message("one")
        snapshot = log.messages
        log.add_assistant_message("two")

        assert isinstance(snapshot, tuple)
        assert len(snapshot) == 1
        assert len(log) == 2

    def test_subscribers_notified(self) -> None:
        log = MessageLog()
        listener = Mock()
        log.subscribe(listener)

        message = log.add_assistant_message("Hi")

        listener.assert_called_once_with(message)

    def test_unsubscribe(self) -> None:
        log = MessageLog()
        listener = Mock()
        unsubscribe = log.subscribe(listener)
        unsubscribe()
        unsubscribe()

        log.add_user_message("ignored")

        listener.assert_not_called()

    def test_failing_listener_does_not_block_append(self) -> None:
        log = MessageLog()
        log.subscribe(Mock(side_effect=RuntimeError("render failed")))
        second = Mock()
        log.subscribe(second)

        log.add_user_message("still stored")

        assert len(log) == 1
        second.assert_called_once()

    def test_concurrent_appends_are_not_lost(self) -> None:
        log = MessageLog()

        def writer(worker: int) -> None:
            for i in range(200):
                log.add_assistant_message(f"{worker}-{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(log) == 1600
        assert len({m.id for m in log}) == 1600
