"""Listing store: an arena of listings indexed by id.

Ids are stable 1-based indices into the arena. The store never manages
its own consistency across operations; the engine is the only writer and
rolls back through ``rollback_to``/``restore`` when an operation fails.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from escrow_marketplace.domain.models import Listing

if TYPE_CHECKING:
    from escrow_marketplace.domain.enums import ListingStatus


class ListingStore:
    """Data access for listings."""

    def __init__(self) -> None:
        self._listings: list[Listing] = []

    def __len__(self) -> int:
        return len(self._listings)

    def create(self, asset_id: int, seller: str, price: int) -> Listing:
        """Append a new OPEN listing under the next id."""
        listing = Listing(
            id=len(self._listings) + 1,
            asset_id=asset_id,
            seller=seller,
            price=price,
        )
        self._listings.append(listing)
        return listing

    def get_by_id(self, listing_id: int) -> Listing | None:
        if not 1 <= listing_id <= len(self._listings):
            return None
        return self._listings[listing_id - 1]

    def get_by_seller(self, seller: str) -> list[Listing]:
        """Fetch all listings for a seller, oldest first."""
        return [listing for listing in self._listings if listing.seller == seller]

    def get_open_by_asset(self, asset_id: int) -> Listing | None:
        """Return the listing currently escrowing ``asset_id``, if any."""
        for listing in reversed(self._listings):
            if listing.asset_id == asset_id and listing.is_open:
                return listing
        return None

    def update_status(self, listing: Listing, new_status: ListingStatus) -> Listing:
        """Update the status of a listing (call AFTER state machine validation)."""
        listing.status = new_status
        return self.touch(listing)

    def touch(self, listing: Listing) -> Listing:
        listing.updated_at = datetime.now(UTC)
        return listing

    # ------------------------------------------------------------------
    # Rollback support
    # ------------------------------------------------------------------

    def snapshot(self, listing: Listing) -> Listing:
        return replace(listing)

    def restore(self, snapshot: Listing) -> None:
        """Put a snapshot back in its slot, discarding later field changes."""
        if self.get_by_id(snapshot.id) is not None:
            self._listings[snapshot.id - 1] = snapshot

    def rollback_to(self, size: int) -> None:
        """Drop listings appended after the store held ``size`` entries."""
        del self._listings[size:]
