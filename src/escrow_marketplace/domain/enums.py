"""Domain enumerations for the escrow marketplace.

Framework-agnostic: no pydantic or structlog imports here.
"""

import enum


class ListingStatus(enum.StrEnum):
    """Lifecycle states of a listing.

    Transitions are enforced by ListingStateMachine.
    See domain/state_machine.py for the transition table.
    """

    OPEN = "OPEN"
    SOLD = "SOLD"
    SETTLED = "SETTLED"
    ABORTED = "ABORTED"


class EventType(enum.StrEnum):
    """Types of events appended to the marketplace event log.

    Every successful engine operation produces exactly one event.
    """

    LISTING_CREATED = "LISTING_CREATED"
    LISTING_PAID = "LISTING_PAID"
    PAYMENT_WITHDRAWN = "PAYMENT_WITHDRAWN"
    FEE_WITHDRAWN = "FEE_WITHDRAWN"
    LISTING_ABORTED = "LISTING_ABORTED"
