"""Unit tests for the in-memory funds ledger."""

from __future__ import annotations

import pytest

from escrow_marketplace.domain.collaborators import FundsGateway
from escrow_marketplace.domain.exceptions import InsufficientFundsError
from escrow_marketplace.infrastructure.ledger import InMemoryLedger


@pytest.fixture
def ledger() -> InMemoryLedger:
    ledger = InMemoryLedger(treasury="vault")
    ledger.deposit("bob", 100)
    return ledger


class TestCollect:
    def test_moves_funds_to_treasury(self, ledger: InMemoryLedger) -> None:
        ledger.collect("bob", 60)
        assert ledger.balance_of("bob") == 40
        assert ledger.balance_of("vault") == 60

    def test_insufficient_funds(self, ledger: InMemoryLedger) -> None:
        with pytest.raises(InsufficientFundsError) as exc_info:
            ledger.collect("bob", 101)
        assert exc_info.value.available == 100
        assert ledger.balance_of("bob") == 100

    def test_negative_amount(self, ledger: InMemoryLedger) -> None:
        with pytest.raises(ValueError):
            ledger.collect("bob", -1)


class TestSend:
    def test_releases_from_treasury(self, ledger: InMemoryLedger) -> None:
        ledger.collect("bob", 60)
        ledger.send("alice", 50)
        assert ledger.balance_of("alice") == 50
        assert ledger.balance_of("vault") == 10

    def test_receive_hook_runs_after_credit(self, ledger: InMemoryLedger) -> None:
        seen: list[tuple[str, int, int]] = []
        ledger.register_receive_hook(
            "alice",
            lambda sender, amount: seen.append((sender, amount, ledger.balance_of("alice"))),
        )
        ledger.collect("bob", 30)
        ledger.send("alice", 30)
        assert seen == [("vault", 30, 30)]

    def test_hook_error_reverts_movement(self, ledger: InMemoryLedger) -> None:
        def refuse(sender: str, amount: int) -> None:
            raise RuntimeError("no thanks")

        ledger.register_receive_hook("alice", refuse)
        ledger.collect("bob", 30)

        with pytest.raises(RuntimeError):
            ledger.send("alice", 30)

        assert ledger.balance_of("alice") == 0
        assert ledger.balance_of("vault") == 30

    def test_satisfies_protocol(self, ledger: InMemoryLedger) -> None:
        assert isinstance(ledger, FundsGateway)


class TestRefund:
    def test_returns_collection_to_payer(self, ledger: InMemoryLedger) -> None:
        ledger.collect("bob", 60)
        ledger.refund("bob", 60)
        assert ledger.balance_of("bob") == 100
        assert ledger.balance_of("vault") == 0

    def test_skips_receive_hook(self, ledger: InMemoryLedger) -> None:
        def refuse(sender: str, amount: int) -> None:
            raise RuntimeError("no thanks")

        ledger.register_receive_hook("bob", refuse)
        ledger.collect("bob", 60)
        ledger.refund("bob", 60)

        assert ledger.balance_of("bob") == 100
