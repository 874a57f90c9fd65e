"""In-memory asset registry.

Tracks which account holds each asset and who may move it on the holder's
behalf. Authorization follows the usual non-fungible token rules: a
transfer succeeds only when ``from_`` is the current holder and the caller
is that holder, the asset's approved agent, or an operator approved for
all of the holder's assets. Per-asset approval is cleared on every move.

``safe_transfer`` notifies a receiver registered for the destination
account; if the receiver raises, ownership is put back before the error
propagates. While the receiver runs, ``delivering_from`` reports the account
the asset came from, so the receiver can tell a real delivery from a
direct call.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from escrow_marketplace.domain.exceptions import (
    AssetNotFoundError,
    NotAuthorizedError,
    UnauthorizedTransferError,
)
from escrow_marketplace.logging_config import get_logger

if TYPE_CHECKING:
    from escrow_marketplace.domain.collaborators import AssetReceiver

logger = get_logger(__name__)


class InMemoryAssetRegistry:
    """Asset identities, custody and approvals held in process memory."""

    def __init__(self) -> None:
        self._owners: dict[int, str] = {}
        self._approvals: dict[int, str] = {}
        self._operators: dict[str, set[str]] = {}
        self._receivers: dict[str, AssetReceiver] = {}
        self._deliveries: dict[int, str] = {}
        self._next_asset_id = 1

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def mint(self, owner: str) -> int:
        """Allocate a new asset owned by ``owner``."""
        asset_id = self._next_asset_id
        self._next_asset_id += 1
        self._owners[asset_id] = owner
        logger.info("registry.minted", asset_id=asset_id, owner=owner)
        return asset_id

    def owner_of(self, asset_id: int) -> str:
        try:
            return self._owners[asset_id]
        except KeyError:
            raise AssetNotFoundError(asset_id) from None

    def register_receiver(self, account: str, receiver: AssetReceiver) -> None:
        """Deliver ``on_asset_received`` to ``receiver`` for safe transfers to ``account``."""
        self._receivers[account] = receiver

    def delivering_from(self, asset_id: int) -> str | None:
        """Return the sender of an in-flight safe transfer of ``asset_id``, if any."""
        return self._deliveries.get(asset_id)

    # ------------------------------------------------------------------
    # Approvals
    # ------------------------------------------------------------------

    def approve(self, asset_id: int, approved: str, caller: str) -> None:
        """Let ``approved`` move a single asset on the holder's behalf."""
        owner = self.owner_of(asset_id)
        if caller != owner and not self.is_approved_for_all(owner, caller):
            raise NotAuthorizedError(caller, f"approve asset {asset_id}")
        self._approvals[asset_id] = approved

    def get_approved(self, asset_id: int) -> str | None:
        self.owner_of(asset_id)
        return self._approvals.get(asset_id)

    def set_approval_for_all(self, owner: str, operator: str, approved: bool) -> None:
        operators = self._operators.setdefault(owner, set())
        if approved:
            operators.add(operator)
        else:
            operators.discard(operator)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return operator in self._operators.get(owner, set())

    # ------------------------------------------------------------------
    # Transfers
    # ------------------------------------------------------------------

    def transfer(self, asset_id: int, from_: str, to: str, caller: str) -> None:
        """Move custody without notifying the recipient."""
        self._move(asset_id, from_, to, caller)

    def safe_transfer(
        self,
        asset_id: int,
        from_: str,
        to: str,
        caller: str,
        payload: Any = None,
    ) -> None:
        """Move custody, then hand the asset to the recipient's receiver hook."""
        previous_approval = self._move(asset_id, from_, to, caller)

        receiver = self._receivers.get(to)
        if receiver is None:
            return
        self._deliveries[asset_id] = from_
        try:
            receiver.on_asset_received(caller, from_, asset_id, payload)
        except Exception as exc:
            self._owners[asset_id] = from_
            if previous_approval is not None:
                self._approvals[asset_id] = previous_approval
            logger.info(
                "registry.transfer_reverted",
                asset_id=asset_id,
                from_account=from_,
                to_account=to,
                error=str(exc),
            )
            raise
        finally:
            self._deliveries.pop(asset_id, None)

    def _move(self, asset_id: int, from_: str, to: str, caller: str) -> str | None:
        owner = self.owner_of(asset_id)
        if owner != from_ or not self._is_approved_or_owner(caller, asset_id, owner):
            raise UnauthorizedTransferError(caller, asset_id)

        previous_approval = self._approvals.pop(asset_id, None)
        self._owners[asset_id] = to
        logger.debug(
            "registry.transferred",
            asset_id=asset_id,
            from_account=from_,
            to_account=to,
            caller=caller,
        )
        return previous_approval

    def _is_approved_or_owner(self, caller: str, asset_id: int, owner: str) -> bool:
        return (
            caller == owner
            or self._approvals.get(asset_id) == caller
            or self.is_approved_for_all(owner, caller)
        )
