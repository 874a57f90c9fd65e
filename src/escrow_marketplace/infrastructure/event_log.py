"""Append-only event log.

``record`` is the only write the engine performs during normal operation.
``rollback_to`` exists solely so a rejected operation leaves no trace.
"""

from __future__ import annotations

from typing import Any

from escrow_marketplace.domain.enums import EventType
from escrow_marketplace.domain.models import ListingEvent


class EventLog:
    """Data access for marketplace events, ordered by sequence number."""

    def __init__(self) -> None:
        self._events: list[ListingEvent] = []

    def __len__(self) -> int:
        return len(self._events)

    def record(
        self,
        listing_id: int,
        event_type: EventType,
        data: dict[str, Any] | None = None,
    ) -> ListingEvent:
        """Append a new event with the next sequence number."""
        evt = ListingEvent(
            sequence=len(self._events) + 1,
            event_type=event_type,
            listing_id=listing_id,
            data=data or {},
        )
        self._events.append(evt)
        return evt

    def get_range(self, start: int = 1, end: int | None = None) -> list[ListingEvent]:
        """Fetch events with ``start <= sequence <= end`` in order."""
        start = max(start, 1)
        stop = len(self._events) if end is None else min(end, len(self._events))
        if stop < start:
            return []
        return self._events[start - 1 : stop]

    def get_by_listing(self, listing_id: int) -> list[ListingEvent]:
        """Fetch all events for a listing in chronological order."""
        return [evt for evt in self._events if evt.listing_id == listing_id]

    def latest(self) -> ListingEvent | None:
        return self._events[-1] if self._events else None

    def rollback_to(self, size: int) -> None:
        del self._events[size:]
