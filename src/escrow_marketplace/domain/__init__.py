"""Domain layer: listing rules with no infrastructure dependencies."""

from escrow_marketplace.domain.collaborators import (
    AssetReceiver,
    AssetRegistry,
    FundsGateway,
)
from escrow_marketplace.domain.enums import EventType, ListingStatus
from escrow_marketplace.domain.exceptions import (
    AlreadyWithdrawnError,
    AssetNotFoundError,
    IncorrectAmountError,
    InsufficientFundsError,
    InvalidPayloadError,
    InvalidPriceError,
    InvalidStateTransitionError,
    ListingNotFoundError,
    MarketplaceError,
    NotAuthorizedError,
    NotForSaleError,
    UnauthorizedTransferError,
)
from escrow_marketplace.domain.fee_policy import FeePolicy
from escrow_marketplace.domain.models import Listing, ListingEvent
from escrow_marketplace.domain.state_machine import (
    ListingStateMachine,
    validate_transition,
)

__all__ = [
    "AssetReceiver",
    "AssetRegistry",
    "FundsGateway",
    "EventType",
    "ListingStatus",
    "AlreadyWithdrawnError",
    "AssetNotFoundError",
    "IncorrectAmountError",
    "InsufficientFundsError",
    "InvalidPayloadError",
    "InvalidPriceError",
    "InvalidStateTransitionError",
    "ListingNotFoundError",
    "MarketplaceError",
    "NotAuthorizedError",
    "NotForSaleError",
    "UnauthorizedTransferError",
    "FeePolicy",
    "Listing",
    "ListingEvent",
    "ListingStateMachine",
    "validate_transition",
]
