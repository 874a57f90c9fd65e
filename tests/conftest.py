"""Shared test fixtures for the escrow marketplace test suite.

Provides:
    - A wired engine with in-memory registry and ledger
    - Funded buyer accounts
    - Helpers for reading the latest listing id
"""

from __future__ import annotations

import pytest

from escrow_marketplace.domain.fee_policy import FeePolicy
from escrow_marketplace.infrastructure.asset_registry import InMemoryAssetRegistry
from escrow_marketplace.infrastructure.ledger import InMemoryLedger
from escrow_marketplace.services.listing_engine import ListingEngine

ENGINE = "escrow-engine"
OPERATOR = "operator"
SELLER = "alice"
BUYER = "bob"
SECOND_BUYER = "carol"

PRICE = 1_000_000
COMMISSION_RATE = 2
STARTING_BALANCE = 10 * PRICE


@pytest.fixture
def registry() -> InMemoryAssetRegistry:
    return InMemoryAssetRegistry()


@pytest.fixture
def ledger() -> InMemoryLedger:
    ledger = InMemoryLedger(treasury=ENGINE)
    for account in (BUYER, SECOND_BUYER):
        ledger.deposit(account, STARTING_BALANCE)
    return ledger


@pytest.fixture
def engine(registry: InMemoryAssetRegistry, ledger: InMemoryLedger) -> ListingEngine:
    """Return an engine at a 2% commission, registered as the escrow receiver."""
    engine = ListingEngine(
        fee_policy=FeePolicy(COMMISSION_RATE),
        registry=registry,
        funds=ledger,
        operator=OPERATOR,
        account=ENGINE,
    )
    registry.register_receiver(ENGINE, engine)
    return engine


@pytest.fixture
def open_listing(engine: ListingEngine) -> int:
    """Return the id of an OPEN listing by SELLER at PRICE."""
    return engine.create_listing(PRICE, caller=SELLER)


@pytest.fixture
def sold_listing(engine: ListingEngine, open_listing: int) -> int:
    """Return the id of a listing BUYER has paid for."""
    engine.pay(open_listing, caller=BUYER, amount_sent=PRICE)
    return open_listing
