"""Listing and event records.

A Listing is never deleted. Once SETTLED or ABORTED it stays in the store,
inert but queryable.

Invariants maintained by the engine:
    - price > 0 only while the listing is OPEN and the asset is in escrow.
    - pending_payment + pending_fee equals the price at purchase, and only
      decreases afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from escrow_marketplace.domain.enums import EventType, ListingStatus


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class Listing:
    """One sale attempt for one asset.

    Attributes:
        id: Sequential listing id, assigned by the store.
        asset_id: Registry id of the asset under escrow.
        seller: Account entitled to the sale proceeds.
        price: Smallest currency unit; 0 means not for sale.
        pending_payment: Owed to the seller after a purchase.
        pending_fee: Owed to the platform operator after a purchase.
        status: Named lifecycle state, guarded by ListingStateMachine.
    """

    id: int
    asset_id: int
    seller: str
    price: int
    pending_payment: int = 0
    pending_fee: int = 0
    status: ListingStatus = ListingStatus.OPEN
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_open(self) -> bool:
        return self.price > 0

    @property
    def is_settled(self) -> bool:
        return self.pending_payment == 0 and self.pending_fee == 0


@dataclass(frozen=True)
class ListingEvent:
    """An immutable entry in the append-only event log."""

    sequence: int
    event_type: EventType
    listing_id: int
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=_utcnow)
