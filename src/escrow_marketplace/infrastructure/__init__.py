"""Infrastructure: in-memory stores and collaborator implementations."""

from escrow_marketplace.infrastructure.asset_registry import InMemoryAssetRegistry
from escrow_marketplace.infrastructure.event_log import EventLog
from escrow_marketplace.infrastructure.ledger import InMemoryLedger
from escrow_marketplace.infrastructure.listing_store import ListingStore

__all__ = [
    "EventLog",
    "InMemoryAssetRegistry",
    "InMemoryLedger",
    "ListingStore",
]
