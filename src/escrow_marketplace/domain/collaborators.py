"""Collaborator Protocols.

Defines the interfaces the listing engine consumes from the outside world:
the asset registry that tracks custody, the funds gateway that moves
currency, and the receiver hook the registry calls when an asset lands in
an account's custody.

These are Protocols (structural subtyping): the in-memory implementations in
infrastructure/ satisfy them without inheriting from anything here.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AssetReceiver(Protocol):
    """Anything that can take custody of assets via a safe transfer."""

    def on_asset_received(
        self,
        operator: str,
        previous_owner: str,
        asset_id: int,
        payload: Any,
    ) -> None:
        """Handle an asset that has just been transferred in.

        Raising from this hook rejects the transfer; the registry reverts
        ownership before propagating the error.
        """
        ...


@runtime_checkable
class AssetRegistry(Protocol):
    """Asset identity and custody records.

    Concrete implementation:
        - infrastructure/asset_registry.py (InMemoryAssetRegistry)
    """

    def mint(self, owner: str) -> int:
        """Allocate a new asset owned by ``owner`` and return its id."""
        ...

    def owner_of(self, asset_id: int) -> str:
        """Return the account currently holding ``asset_id``."""
        ...

    def transfer(self, asset_id: int, from_: str, to: str, caller: str) -> None:
        """Move custody without notifying the recipient.

        Raises UnauthorizedTransferError unless ``caller`` is ``from_`` or
        is approved by ``from_``.
        """
        ...

    def safe_transfer(
        self,
        asset_id: int,
        from_: str,
        to: str,
        caller: str,
        payload: Any = None,
    ) -> None:
        """Move custody and deliver ``on_asset_received`` to the recipient."""
        ...

    def delivering_from(self, asset_id: int) -> str | None:
        """Return the sender while a safe transfer of ``asset_id`` is being delivered.

        Returns None outside a receiver hook.
        """
        ...


@runtime_checkable
class FundsGateway(Protocol):
    """Currency movements between accounts and the engine's treasury.

    Concrete implementation:
        - infrastructure/ledger.py (InMemoryLedger)
    """

    def collect(self, payer: str, amount: int) -> None:
        """Take ``amount`` from ``payer`` into the treasury."""
        ...

    def send(self, recipient: str, amount: int) -> None:
        """Release ``amount`` from the treasury to ``recipient``.

        May call back into the engine before returning.
        """
        ...

    def refund(self, payer: str, amount: int) -> None:
        """Return ``amount`` from the treasury to ``payer`` without running hooks."""
        ...
