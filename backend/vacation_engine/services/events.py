# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from vacation_engine.models.base import now_utc
from vacation_engine.models.enums import RequestStatus

logger = logging.getLogger(__name__)


class LifecycleEvent(BaseModel):
    """Emitted after every committed request transition."""

    company_id: uuid.UUID
    request_id: uuid.UUID
    from_state: RequestStatus | None
    to_state: RequestStatus
    actor_id: uuid.UUID
    comment: str | None = None
    timestamp: datetime


@runtime_checkable
class EventSink(Protocol):
    """Interface for downstream notification delivery."""

    async def publish(self, event: LifecycleEvent) -> None:
        """Deliver one event."""
        ...


class LoggingEventSink:
    """Default sink: logs each event and keeps nothing."""

    async def publish(self, event: LifecycleEvent) -> None:
        logger.info(
            "Request %s: %s -> %s by %s",
            event.request_id,
            event.from_state or "-",
            event.to_state,
            event.actor_id,
        )


class InMemoryEventSink:
    """Collects events in order; used in tests."""

    def __init__(self) -> None:
        self.events: list[LifecycleEvent] = []

    async def publish(self, event: LifecycleEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()


_event_sink: EventSink = LoggingEventSink()


def get_event_sink() -> EventSink:
    """Return the configured event sink."""
    return _event_sink


def set_event_sink(sink: EventSink) -> None:
    """Override the event sink (for testing or production wiring)."""
    global _event_sink
    _event_sink = sink


def reset_event_sink() -> None:
    """Restore the default logging sink."""
    set_event_sink(LoggingEventSink())


def build_event(
    *,
    company_id: uuid.UUID,
    request_id: uuid.UUID,
    from_state: RequestStatus | None,
    to_state: RequestStatus,
    actor_id: uuid.UUID,
    comment: str | None = None,
) -> LifecycleEvent:
    return LifecycleEvent(
        company_id=company_id,
        request_id=request_id,
        from_state=from_state,
        to_state=to_state,
        actor_id=actor_id,
        comment=comment,
        timestamp=now_utc(),
    )


async def publish_events(events: list[LifecycleEvent]) -> None:
    """Publish committed transitions. Delivery failures are logged, never raised."""
    sink = get_event_sink()
    for event in events:
        try:
            await sink.publish(event)
        except Exception:
            logger.exception("Failed to publish lifecycle event for request %s", event.request_id)
