"""Platform fee policy."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FeePolicy:
    """Commission rate in integer percent, fixed for the engine's lifetime."""

    commission_rate: int

    def __post_init__(self) -> None:
        if not 0 <= self.commission_rate <= 100:
            raise ValueError(
                f"commission_rate must be within [0, 100], got {self.commission_rate}"
            )

    def fee_for(self, price: int) -> int:
        return price * self.commission_rate // 100

    def split(self, price: int) -> tuple[int, int]:
        """Split a sale price into (seller payment, platform fee).

        The fee truncates toward zero; the seller receives the remainder, so
        the two parts always add back up to the price.
        """
        fee = self.fee_for(price)
        return price - fee, fee
