"""Pydantic schemas."""

from escrow_marketplace.schemas.listing import (
    ListingEventView,
    ListingView,
    ResellInstruction,
)

__all__ = [
    "ListingEventView",
    "ListingView",
    "ResellInstruction",
]
