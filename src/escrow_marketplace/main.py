"""Marketplace entry point.

Wires settings, fee policy, the in-memory collaborators and the listing
engine into one bundle, and registers the engine as the registry's
receiver for its custody account so safe transfers into escrow open
listings.

Usage:
    from escrow_marketplace.main import create_marketplace
    market = create_marketplace()
    listing_id = market.engine.create_listing(1_000_000, caller="alice")
"""

from __future__ import annotations

from dataclasses import dataclass

from escrow_marketplace.config import Settings, get_settings
from escrow_marketplace.domain.fee_policy import FeePolicy
from escrow_marketplace.infrastructure.asset_registry import InMemoryAssetRegistry
from escrow_marketplace.infrastructure.ledger import InMemoryLedger
from escrow_marketplace.logging_config import get_logger, setup_logging
from escrow_marketplace.services.listing_engine import ListingEngine


@dataclass(frozen=True)
class Marketplace:
    """A ready-to-use engine together with the collaborators it was built on."""

    settings: Settings
    engine: ListingEngine
    registry: InMemoryAssetRegistry
    ledger: InMemoryLedger


def create_marketplace(
    settings: Settings | None = None,
    configure_logging: bool = False,
) -> Marketplace:
    """Marketplace factory: creates and wires the engine and its collaborators."""
    settings = settings or get_settings()

    if configure_logging:
        setup_logging(
            log_level=settings.app_log_level,
            json_logs=not settings.is_development,
        )
    logger = get_logger(__name__)

    registry = InMemoryAssetRegistry()
    ledger = InMemoryLedger(treasury=settings.engine_account)
    engine = ListingEngine(
        fee_policy=FeePolicy(settings.commission_rate),
        registry=registry,
        funds=ledger,
        operator=settings.operator_account,
        account=settings.engine_account,
    )
    registry.register_receiver(settings.engine_account, engine)

    logger.info(
        "marketplace.created",
        env=settings.app_env,
        commission_rate=settings.commission_rate,
        operator=settings.operator_account,
        engine_account=settings.engine_account,
    )
    return Marketplace(settings=settings, engine=engine, registry=registry, ledger=ledger)
