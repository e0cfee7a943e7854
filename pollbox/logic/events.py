"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by the
question repository on every successful write.
"""

from __future__ import annotations

from typing import Any, Dict, List
import logging

logger = logging.getLogger(__name__)

QUESTION_CREATED = "question.created"
QUESTION_UPDATED = "question.updated"
QUESTION_DELETED = "question.deleted"
ANSWER_APPENDED = "answer.appended"


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    In this minimal implementation, we log the event for observability.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


# In-memory buffer for domain events (read by tests)
EVENT_BUFFER: List[Dict[str, Any]] = []


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events

__all__ = [
    "QUESTION_CREATED",
    "QUESTION_UPDATED",
    "QUESTION_DELETED",
    "ANSWER_APPENDED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
