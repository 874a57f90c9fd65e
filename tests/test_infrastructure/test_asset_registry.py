"""Unit tests for the in-memory asset registry."""

from __future__ import annotations

from typing import Any

import pytest

from escrow_marketplace.domain.collaborators import AssetReceiver, AssetRegistry
from escrow_marketplace.domain.exceptions import (
    AssetNotFoundError,
    NotAuthorizedError,
    UnauthorizedTransferError,
)
from escrow_marketplace.infrastructure.asset_registry import InMemoryAssetRegistry


class RecordingReceiver:
    def __init__(self, fail: bool = False) -> None:
        self.received: list[tuple[str, str, int, Any]] = []
        self._fail = fail

    def on_asset_received(
        self, operator: str, previous_owner: str, asset_id: int, payload: Any
    ) -> None:
        self.received.append((operator, previous_owner, asset_id, payload))
        if self._fail:
            raise ValueError("rejected")


class TestMinting:
    def test_ids_are_sequential(self) -> None:
        registry = InMemoryAssetRegistry()
        assert registry.mint("alice") == 1
        assert registry.mint("bob") == 2
        assert registry.owner_of(2) == "bob"

    def test_unknown_asset(self) -> None:
        with pytest.raises(AssetNotFoundError):
            InMemoryAssetRegistry().owner_of(42)

    def test_satisfies_protocols(self) -> None:
        assert isinstance(InMemoryAssetRegistry(), AssetRegistry)
        assert isinstance(RecordingReceiver(), AssetReceiver)


class TestTransferAuthorization:
    def test_owner_can_transfer(self) -> None:
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        registry.transfer(asset_id, "alice", "bob", caller="alice")
        assert registry.owner_of(asset_id) == "bob"

    def test_stranger_cannot_transfer(self) -> None:
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        with pytest.raises(UnauthorizedTransferError):
            registry.transfer(asset_id, "alice", "mallory", caller="mallory")
        assert registry.owner_of(asset_id) == "alice"

    def test_wrong_from_account(self) -> None:
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        with pytest.raises(UnauthorizedTransferError):
            registry.transfer(asset_id, "bob", "carol", caller="bob")

    def test_approved_agent_can_transfer_once(self) -> None:
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        registry.approve(asset_id, "agent", caller="alice")
        assert registry.get_approved(asset_id) == "agent"

        registry.transfer(asset_id, "alice", "bob", caller="agent")
        assert registry.owner_of(asset_id) == "bob"
        assert registry.get_approved(asset_id) is None

    def test_operator_for_all(self) -> None:
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        registry.set_approval_for_all("alice", "broker", True)
        registry.transfer(asset_id, "alice", "bob", caller="broker")
        assert registry.owner_of(asset_id) == "bob"

        registry.set_approval_for_all("alice", "broker", False)
        assert not registry.is_approved_for_all("alice", "broker")

    def test_only_owner_can_approve(self) -> None:
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        with pytest.raises(NotAuthorizedError):
            registry.approve(asset_id, "mallory", caller="mallory")


class TestSafeTransfer:
    def test_receiver_is_notified(self) -> None:
        registry = InMemoryAssetRegistry()
        receiver = RecordingReceiver()
        registry.register_receiver("vault", receiver)
        asset_id = registry.mint("alice")

        registry.safe_transfer(asset_id, "alice", "vault", caller="alice", payload={"price": 5})

        assert registry.owner_of(asset_id) == "vault"
        assert receiver.received == [("alice", "alice", asset_id, {"price": 5})]

    def test_plain_transfer_skips_receiver(self) -> None:
        registry = InMemoryAssetRegistry()
        receiver = RecordingReceiver()
        registry.register_receiver("vault", receiver)
        asset_id = registry.mint("alice")

        registry.transfer(asset_id, "alice", "vault", caller="alice")

        assert receiver.received == []

    def test_receiver_error_reverts_transfer(self) -> None:
        registry = InMemoryAssetRegistry()
        registry.register_receiver("vault", RecordingReceiver(fail=True))
        asset_id = registry.mint("alice")
        registry.approve(asset_id, "agent", caller="alice")

        with pytest.raises(ValueError, match="rejected"):
            registry.safe_transfer(asset_id, "alice", "vault", caller="agent")

        assert registry.owner_of(asset_id) == "alice"
        assert registry.get_approved(asset_id) == "agent"

    def test_sender_visible_only_during_delivery(self) -> None:
        registry = InMemoryAssetRegistry()
        seen: list[str | None] = []

        class Observer:
            def on_asset_received(
                self, operator: str, previous_owner: str, asset_id: int, payload: Any
            ) -> None:
                seen.append(registry.delivering_from(asset_id))

        registry.register_receiver("vault", Observer())
        asset_id = registry.mint("alice")
        registry.safe_transfer(asset_id, "alice", "vault", caller="alice")

        assert seen == ["alice"]
        assert registry.delivering_from(asset_id) is None

    def test_delivery_record_cleared_when_receiver_fails(self) -> None:
        registry = InMemoryAssetRegistry()
        registry.register_receiver("vault", RecordingReceiver(fail=True))
        asset_id = registry.mint("alice")

        with pytest.raises(ValueError):
            registry.safe_transfer(asset_id, "alice", "vault", caller="alice")

        assert registry.delivering_from(asset_id) is None

    def test_plain_transfer_records_no_delivery(self) -> None:
        registry = InMemoryAssetRegistry()
        asset_id = registry.mint("alice")
        registry.transfer(asset_id, "alice", "vault", caller="alice")
        assert registry.delivering_from(asset_id) is None
