"""Listing Engine: core business logic for the listing lifecycle.

This is the application layer that coordinates between:
    - Domain state machine (transition guard)
    - Fee policy (sale split)
    - Listing store and event log (state and audit trail)
    - Asset registry and funds gateway (custody and currency)

The engine is the only writer of the listing store. Every operation either
commits fully or raises with the store, the event log and custody exactly
as they were.

Effects before interactions: ``pay``, ``withdraw_payment`` and
``withdraw_fee`` commit every field change before calling out, so a call
that re-enters the engine during a transfer already sees the updated
listing.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from statemachine.exceptions import TransitionNotAllowed

from escrow_marketplace.domain.enums import EventType, ListingStatus
from escrow_marketplace.domain.exceptions import (
    AlreadyWithdrawnError,
    IncorrectAmountError,
    InvalidPriceError,
    InvalidStateTransitionError,
    ListingNotFoundError,
    NotAuthorizedError,
    NotForSaleError,
)
from escrow_marketplace.domain.state_machine import ListingStateMachine
from escrow_marketplace.infrastructure.event_log import EventLog
from escrow_marketplace.infrastructure.listing_store import ListingStore
from escrow_marketplace.logging_config import get_logger
from escrow_marketplace.schemas.listing import (
    ListingEventView,
    ListingView,
    ResellInstruction,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from escrow_marketplace.domain.collaborators import AssetRegistry, FundsGateway
    from escrow_marketplace.domain.fee_policy import FeePolicy
    from escrow_marketplace.domain.models import Listing

logger = get_logger(__name__)


class ListingEngine:
    """Manages the listing lifecycle: create, pay, withdraw, resell, abort."""

    def __init__(
        self,
        fee_policy: FeePolicy,
        registry: AssetRegistry,
        funds: FundsGateway,
        operator: str,
        account: str,
        store: ListingStore | None = None,
        events: EventLog | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            fee_policy: Commission rate captured for the engine's lifetime.
            registry: Asset registry that records custody.
            funds: Gateway that collects payments and releases settlements.
            operator: Platform operator, the only account allowed to withdraw fees.
            account: The engine's own custody account in the registry.
        """
        self._fee_policy = fee_policy
        self._registry = registry
        self._funds = funds
        self._operator = operator
        self._account = account
        self._store = store if store is not None else ListingStore()
        self._events = events if events is not None else EventLog()
        self._lock = threading.RLock()

    @property
    def fee_policy(self) -> FeePolicy:
        return self._fee_policy

    @property
    def operator(self) -> str:
        return self._operator

    @property
    def account(self) -> str:
        return self._account

    @property
    def listing_count(self) -> int:
        return len(self._store)

    # ------------------------------------------------------------------
    # Listing Creation
    # ------------------------------------------------------------------

    def create_listing(self, price: int, caller: str) -> int:
        """Mint an asset for ``caller``, escrow it and open a listing."""
        if price <= 0:
            raise InvalidPriceError(price)

        with self._lock, self._atomic():
            asset_id = self._registry.mint(caller)
            self._registry.transfer(asset_id, caller, self._account, caller=caller)
            listing = self._open_listing(asset_id, caller, price)

        return listing.id

    # ------------------------------------------------------------------
    # Purchase
    # ------------------------------------------------------------------

    def pay(self, listing_id: int, caller: str, amount_sent: int) -> None:
        """Buy an open listing for exactly its price."""
        with self._lock:
            listing = self._store.get_by_id(listing_id)
            if listing is None or listing.price == 0:
                raise NotForSaleError(listing_id)
            if amount_sent != listing.price:
                raise IncorrectAmountError(listing_id, listing.price, amount_sent)

            new_status = self._fire_transition(listing, "purchase")
            payment, fee = self._fee_policy.split(listing.price)

            self._funds.collect(caller, amount_sent)
            try:
                with self._atomic(listing):
                    listing.pending_payment = payment
                    listing.pending_fee = fee
                    listing.price = 0
                    self._store.update_status(listing, new_status)
                    self._events.record(
                        listing.id,
                        EventType.LISTING_PAID,
                        {"id": listing.id, "payment": payment, "fee": fee},
                    )
                    self._registry.transfer(
                        listing.asset_id, self._account, caller, caller=self._account
                    )
            except Exception:
                self._funds.refund(caller, amount_sent)
                raise

        logger.info(
            "listing.paid",
            listing_id=listing_id,
            buyer=caller,
            payment=payment,
            fee=fee,
        )

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def withdraw_payment(self, listing_id: int, caller: str) -> None:
        """Release the seller's share of a completed sale, exactly once."""
        with self._lock:
            listing = self._store.get_by_id(listing_id)
            if listing is None or caller != listing.seller:
                raise NotAuthorizedError(caller, f"withdraw payment for listing {listing_id}")
            amount = listing.pending_payment
            if amount == 0:
                raise AlreadyWithdrawnError(listing_id, "payment")

            with self._atomic(listing):
                listing.pending_payment = 0
                self._settle_if_complete(listing)
                self._events.record(
                    listing.id,
                    EventType.PAYMENT_WITHDRAWN,
                    {"id": listing.id, "amount": amount},
                )
                self._funds.send(caller, amount)

        logger.info(
            "listing.payment_withdrawn", listing_id=listing_id, seller=caller, amount=amount
        )

    def withdraw_fee(self, listing_id: int, caller: str) -> None:
        """Release the platform's share of a completed sale to the operator."""
        with self._lock:
            if caller != self._operator:
                raise NotAuthorizedError(caller, f"withdraw fee for listing {listing_id}")
            listing = self._store.get_by_id(listing_id)
            if listing is None or listing.pending_fee == 0:
                raise AlreadyWithdrawnError(listing_id, "fee")
            amount = listing.pending_fee

            with self._atomic(listing):
                listing.pending_fee = 0
                self._settle_if_complete(listing)
                self._events.record(
                    listing.id,
                    EventType.FEE_WITHDRAWN,
                    {"id": listing.id, "amount": amount},
                )
                self._funds.send(caller, amount)

        logger.info("listing.fee_withdrawn", listing_id=listing_id, amount=amount)

    # ------------------------------------------------------------------
    # Resale (custody-transfer hook)
    # ------------------------------------------------------------------

    def on_asset_received(
        self,
        operator: str,
        previous_owner: str,
        asset_id: int,
        payload: Any,
    ) -> None:
        """Open a listing for an asset safe-transferred into escrow.

        ``payload`` carries the asking price; see ResellInstruction.from_payload.
        """
        instruction = ResellInstruction.from_payload(payload)
        logger.debug(
            "listing.asset_received",
            asset_id=asset_id,
            previous_owner=previous_owner,
            operator=operator,
        )
        self.resell(asset_id, instruction.price, previous_owner)

    def resell(self, asset_id: int, new_price: int, previous_owner: str) -> int:
        """Open a new listing for an asset already in the engine's custody.

        The seller is the account the asset came from, not the caller of the
        transfer, so an approved agent can list on the holder's behalf.
        Only callable while the registry is delivering the asset from
        ``previous_owner``.
        """
        with self._lock:
            if self._registry.owner_of(asset_id) != self._account:
                raise NotAuthorizedError(previous_owner, f"resell asset {asset_id} outside escrow")
            if self._registry.delivering_from(asset_id) != previous_owner:
                raise NotAuthorizedError(previous_owner, f"resell asset {asset_id} it did not send")
            if self._store.get_open_by_asset(asset_id) is not None:
                raise NotAuthorizedError(previous_owner, f"resell asset {asset_id} already listed")
            if new_price <= 0:
                raise InvalidPriceError(new_price)

            with self._atomic():
                listing = self._open_listing(asset_id, previous_owner, new_price)

        return listing.id

    # ------------------------------------------------------------------
    # Abort
    # ------------------------------------------------------------------

    def abort(self, listing_id: int, caller: str) -> None:
        """Withdraw an unsold listing and return the asset to its seller."""
        with self._lock:
            listing = self._store.get_by_id(listing_id)
            if listing is None or caller != listing.seller:
                raise NotAuthorizedError(caller, f"abort listing {listing_id}")
            if listing.price == 0:
                raise NotForSaleError(listing_id)

            with self._atomic(listing):
                new_status = self._fire_transition(listing, "cancel")
                listing.price = 0
                self._store.update_status(listing, new_status)
                self._events.record(listing.id, EventType.LISTING_ABORTED, {"id": listing.id})
                self._registry.transfer(
                    listing.asset_id, self._account, caller, caller=self._account
                )

        logger.info("listing.aborted", listing_id=listing_id, seller=caller)

    # ------------------------------------------------------------------
    # Read helpers
    # ------------------------------------------------------------------

    def get_listing(self, listing_id: int) -> ListingView:
        """Get a listing snapshot or raise."""
        return ListingView.model_validate(self._get_listing_or_raise(listing_id))

    def get_status(self, listing_id: int) -> dict:
        """Get listing status with allowed lifecycle events."""
        listing = self._get_listing_or_raise(listing_id)
        sm = ListingStateMachine(current_status=listing.status.value)
        return {
            "listing_id": listing.id,
            "status": listing.status.value,
            "price": listing.price,
            "pending_payment": listing.pending_payment,
            "pending_fee": listing.pending_fee,
            "allowed_events": sm.get_allowed_events(),
        }

    def listings_by_seller(self, seller: str) -> list[ListingView]:
        return [ListingView.model_validate(item) for item in self._store.get_by_seller(seller)]

    def get_events(self, start: int = 1, end: int | None = None) -> list[ListingEventView]:
        """Get events whose sequence lies in ``[start, end]``."""
        return [ListingEventView.model_validate(evt) for evt in self._events.get_range(start, end)]

    def get_listing_events(self, listing_id: int) -> list[ListingEventView]:
        """Get the audit trail of one listing."""
        self._get_listing_or_raise(listing_id)
        return [
            ListingEventView.model_validate(evt)
            for evt in self._events.get_by_listing(listing_id)
        ]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _open_listing(self, asset_id: int, seller: str, price: int) -> Listing:
        listing = self._store.create(asset_id, seller, price)
        self._events.record(
            listing.id,
            EventType.LISTING_CREATED,
            {"id": listing.id, "asset_id": asset_id, "seller": seller, "price": price},
        )
        logger.info(
            "listing.created",
            listing_id=listing.id,
            asset_id=asset_id,
            seller=seller,
            price=price,
        )
        return listing

    def _settle_if_complete(self, listing: Listing) -> None:
        if listing.is_settled:
            self._store.update_status(listing, self._fire_transition(listing, "settle"))
        else:
            self._store.touch(listing)

    def _get_listing_or_raise(self, listing_id: int) -> Listing:
        listing = self._store.get_by_id(listing_id)
        if listing is None:
            raise ListingNotFoundError(listing_id)
        return listing

    def _fire_transition(self, listing: Listing, event_name: str) -> ListingStatus:
        """Validate a state machine transition and return the resulting status.

        Raises InvalidStateTransitionError if the transition is illegal.
        """
        sm = ListingStateMachine(current_status=listing.status.value)
        event_method = getattr(sm, event_name, None)
        if event_method is None:
            raise InvalidStateTransitionError(listing.status, event_name)
        try:
            event_method()
        except TransitionNotAllowed as err:
            raise InvalidStateTransitionError(listing.status, event_name) from err
        return ListingStatus(sm.status)

    @contextmanager
    def _atomic(self, listing: Listing | None = None) -> Iterator[None]:
        """Undo store and event-log changes if the wrapped block raises."""
        store_size = len(self._store)
        event_count = len(self._events)
        snapshot = self._store.snapshot(listing) if listing is not None else None
        try:
            yield
        except Exception as exc:
            if snapshot is not None:
                self._store.restore(snapshot)
            self._store.rollback_to(store_size)
            self._events.rollback_to(event_count)
            logger.warning(
                "listing.operation_reverted",
                listing_id=snapshot.id if snapshot is not None else None,
                error=str(exc),
            )
            raise
