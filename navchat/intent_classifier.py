"""navchat/intent_classifier.py

Parser for the intent agent's raw output.

The intent agent is prompted to answer ``MAP_TASK: <destination>`` for
navigation requests and free text otherwise.  This module does not make any
model call; it only reads that text and produces a three-way result:

  MAP_TASK      : marker present with a destination
  AMBIGUOUS     : marker present but nothing after it on the line
  NOT_MAP_TASK  : no marker at all
"""

from __future__ import annotations

import dataclasses
import logging
import re
from enum import StrEnum
from typing import Final

logger = logging.getLogger("navchat.intent")

MAP_TASK_MARKER: Final[str] = "MAP_TASK:"

# Destination is the remainder of the marker's line; the marker may appear
# anywhere in the output since small models rarely keep it on line one.
_MAP_TASK_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"MAP_TASK:[ \t]*([^\r\n]*)",
    re.IGNORECASE,
)

# Echoed quotes and sentence-final punctuation around the destination.
_LEADING_JUNK: Final[str] = "\"' \t"
_TRAILING_JUNK: Final[str] = "\"' \t.,;:!?"


class IntentKind(StrEnum):
    """Routing decision derived from the intent agent's reply."""

    MAP_TASK = "MAP_TASK"
    AMBIGUOUS = "AMBIGUOUS"
    NOT_MAP_TASK = "NOT_MAP_TASK"


@dataclasses.dataclass(slots=True, frozen=True)
class IntentResult:
    """Structured intent classification.

    Attributes:
        kind: The routing decision.
        destination: Trimmed destination, only set for ``MAP_TASK``.
        raw: The unmodified agent output.
    """

    kind: IntentKind
    destination: str | None = None
    raw: str = ""

    @property
    def is_map_task(self) -> bool:
        return self.kind is IntentKind.MAP_TASK


def extract_destination(llm_output: str) -> str | None:
    """Return the trimmed text after the first ``MAP_TASK:`` marker.

    Args:
        llm_output: Raw text from the intent agent.

    Returns:
        The destination (possibly empty, with surrounding quotes and
        trailing sentence punctuation removed) or ``None`` when no marker
        exists.
    """
    match = _MAP_TASK_PATTERN.search(llm_output)
    if not match:
        return None
    return match.group(1).strip().lstrip(_LEADING_JUNK).rstrip(_TRAILING_JUNK)


def classify_intent(llm_output: str) -> IntentResult:
    """Classify the intent agent's reply.

    Args:
        llm_output: Raw text from the intent agent.

    Returns:
        An :class:`IntentResult`.
    """
    destination = extract_destination(llm_output)
    if destination is None:
        logger.info("Intent classifier resolved: %s", IntentKind.NOT_MAP_TASK)
        return IntentResult(IntentKind.NOT_MAP_TASK, raw=llm_output)
    if not destination:
        logger.warning("MAP_TASK marker without destination in: %r", llm_output[:200])
        return IntentResult(IntentKind.AMBIGUOUS, raw=llm_output)
    logger.info("Intent classifier resolved: %s destination=%r", IntentKind.MAP_TASK, destination)
    return IntentResult(IntentKind.MAP_TASK, destination=destination, raw=llm_output)
