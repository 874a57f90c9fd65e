"""Application services: use case orchestration."""

from escrow_marketplace.services.listing_engine import ListingEngine

__all__ = ["ListingEngine"]
