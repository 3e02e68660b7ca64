"""tests/test_intent_classifier.py

Unit tests for MAP_TASK parsing (navchat/intent_classifier.py).
"""

from __future__ import annotations

import pytest

from navchat.intent_classifier import (
    IntentKind,
    IntentResult,
    classify_intent,
    extract_destination,
)


class TestClassifyIntent:
    """Test suite for ``classify_intent``."""

    def test_map_task_with_destination(self) -> None:
        result = classify_intent("MAP_TASK: Central Park")
        assert result == IntentResult(
            IntentKind.MAP_TASK, destination="Central Park", raw="MAP_TASK: Central Park"
        )
        assert result.is_map_task

    def test_marker_without_destination_is_ambiguous(self) -> None:
        result = classify_intent("MAP_TASK:")
        assert result.kind is IntentKind.AMBIGUOUS
        assert result.destination is None
        assert not result.is_map_task

    def test_marker_with_only_whitespace_is_ambiguous(self) -> None:
        assert classify_intent("MAP_TASK:    ").kind is IntentKind.AMBIGUOUS

    def test_no_marker(self) -> None:
        result = classify_intent("The user wants entertainment.")
        assert result.kind is IntentKind.NOT_MAP_TASK
        assert result.destination is None

    @pytest.mark.parametrize(
        "raw",
        ["map_task: the airport", "Map_Task:the airport", "MAP_TASK:\tthe airport  "],
    )
    def test_case_and_spacing_insensitive(self, raw: str) -> None:
        result = classify_intent(raw)
        assert result.kind is IntentKind.MAP_TASK
        assert result.destination == "the airport"

    def test_marker_inside_quoted_sentence(self) -> None:
        """Small models often wrap the marker in prose."""
        raw = 'Sure! Response: "MAP_TASK: 123 Main Street"'
        assert extract_destination(raw) == "123 Main Street"

    def test_destination_stops_at_line_end(self) -> None:
        raw = "MAP_TASK: nearest grocery store\nThe user wants to buy food."
        assert classify_intent(raw).destination == "nearest grocery store"

    def test_destination_does_not_come_from_next_line(self) -> None:
        """An empty marker line stays ambiguous even if more text follows."""
        assert classify_intent("MAP_TASK:\nCentral Park").kind is IntentKind.AMBIGUOUS

    def test_first_marker_wins(self) -> None:
        raw = "MAP_TASK: Paris\nMAP_TASK: Rome"
        assert classify_intent(raw).destination == "Paris"

    @pytest.mark.parametrize(
        "raw",
        [
            'MAP_TASK: "Central Park".',
            "MAP_TASK: 'Central Park'!",
            'MAP_TASK: Central Park."',
            "MAP_TASK: Central Park, ",
        ],
    )
    def test_quotes_and_sentence_punctuation_removed(self, raw: str) -> None:
        assert classify_intent(raw).destination == "Central Park"

    def test_inner_apostrophe_kept(self) -> None:
        assert extract_destination("MAP_TASK: Joe's Diner.") == "Joe's Diner"

    def test_only_quotes_is_ambiguous(self) -> None:
        assert classify_intent('MAP_TASK: "".').kind is IntentKind.AMBIGUOUS
