"""In-memory funds ledger.

Integer balances per account, with the engine's treasury as the counter
party of every movement. An account may register a receive hook that runs
after it is credited; the hook may call back into the engine, which is
how re-entrant settlement is exercised. A hook error reverts that one
movement before propagating.
"""

from __future__ import annotations

from collections.abc import Callable

from escrow_marketplace.domain.exceptions import InsufficientFundsError
from escrow_marketplace.logging_config import get_logger

logger = get_logger(__name__)

ReceiveHook = Callable[[str, int], None]


class InMemoryLedger:
    """Handles buyer collections and settlement releases."""

    def __init__(self, treasury: str) -> None:
        """Initialize the ledger.

        Args:
            treasury: Account that holds collected funds until settlement.
        """
        self._treasury = treasury
        self._balances: dict[str, int] = {}
        self._receive_hooks: dict[str, ReceiveHook] = {}

    @property
    def treasury(self) -> str:
        return self._treasury

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def deposit(self, account: str, amount: int) -> None:
        """Credit ``account`` from outside the marketplace."""
        _require_non_negative(amount)
        self._balances[account] = self.balance_of(account) + amount
        logger.debug("ledger.deposited", account=account, amount=amount)

    def register_receive_hook(self, account: str, hook: ReceiveHook) -> None:
        """Call ``hook(sender, amount)`` whenever ``account`` is credited by ``send``."""
        self._receive_hooks[account] = hook

    def collect(self, payer: str, amount: int) -> None:
        """Move ``amount`` from ``payer`` into the treasury."""
        self._move(payer, self._treasury, amount)
        logger.info("ledger.collected", payer=payer, amount=amount)

    def send(self, recipient: str, amount: int) -> None:
        """Release ``amount`` from the treasury to ``recipient``."""
        self._move(self._treasury, recipient, amount)

        hook = self._receive_hooks.get(recipient)
        if hook is not None:
            try:
                hook(self._treasury, amount)
            except Exception as exc:
                self._move(recipient, self._treasury, amount)
                logger.info(
                    "ledger.send_reverted",
                    recipient=recipient,
                    amount=amount,
                    error=str(exc),
                )
                raise

        logger.info("ledger.sent", recipient=recipient, amount=amount)

    def refund(self, payer: str, amount: int) -> None:
        """Give back a collection that could not complete. Receive hooks are skipped."""
        self._move(self._treasury, payer, amount)
        logger.info("ledger.refunded", payer=payer, amount=amount)

    def _move(self, source: str, destination: str, amount: int) -> None:
        _require_non_negative(amount)
        available = self.balance_of(source)
        if available < amount:
            raise InsufficientFundsError(source, required=amount, available=available)
        self._balances[source] = available - amount
        self._balances[destination] = self.balance_of(destination) + amount


def _require_non_negative(amount: int) -> None:
    if amount < 0:
        raise ValueError(f"amount must be non-negative, got {amount}")
