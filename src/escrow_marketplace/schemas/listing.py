"""Pydantic schemas for listing reads and custody-transfer payloads.

These are separate from the domain dataclasses: callers only ever see
frozen snapshots, so the listing store stays exclusively owned by the
engine.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from escrow_marketplace.domain.enums import EventType, ListingStatus
from escrow_marketplace.domain.exceptions import InvalidPayloadError

# ---------------------------------------------------------------------------
# Payload Schemas
# ---------------------------------------------------------------------------


class ResellInstruction(BaseModel):
    """Sale data carried by a safe transfer into the engine's custody."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    price: int = Field(
        ...,
        description="Asking price in the smallest currency unit; must be positive",
        examples=[1_000_000],
    )

    @classmethod
    def from_payload(cls, payload: Any) -> ResellInstruction:
        """Read a payload given as a mapping, JSON text/bytes, or a bare price.

        Raises:
            InvalidPayloadError: If the payload is missing or malformed.
        """
        if payload is None:
            raise InvalidPayloadError("Transfer into escrow carried no sale data")
        try:
            if isinstance(payload, Mapping):
                return cls.model_validate(dict(payload))
            if isinstance(payload, (str, bytes, bytearray)):
                return cls.model_validate_json(payload)
            if isinstance(payload, int) and not isinstance(payload, bool):
                return cls(price=payload)
        except ValidationError as err:
            raise InvalidPayloadError(f"Malformed sale data: {err}") from err
        raise InvalidPayloadError(
            f"Unsupported sale data type: {type(payload).__name__}"
        )


# ---------------------------------------------------------------------------
# Read Schemas
# ---------------------------------------------------------------------------


class ListingView(BaseModel):
    """Read-only snapshot of a listing."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    asset_id: int
    seller: str
    price: int
    pending_payment: int
    pending_fee: int
    status: ListingStatus
    created_at: datetime
    updated_at: datetime


class ListingEventView(BaseModel):
    """Read-only snapshot of an event log entry."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    sequence: int
    event_type: EventType
    listing_id: int
    data: dict[str, Any]
    created_at: datetime
