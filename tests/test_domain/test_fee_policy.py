"""Tests for the commission split."""

from __future__ import annotations

import pytest

from escrow_marketplace.domain.fee_policy import FeePolicy


class TestSplit:
    def test_two_percent_of_one_million(self) -> None:
        assert FeePolicy(2).split(1_000_000) == (980_000, 20_000)

    def test_fee_truncates_toward_zero(self) -> None:
        # 2% of 149 is 2.98
        assert FeePolicy(2).split(149) == (147, 2)

    def test_zero_rate_pays_seller_everything(self) -> None:
        assert FeePolicy(0).split(500) == (500, 0)

    def test_full_rate_pays_platform_everything(self) -> None:
        assert FeePolicy(100).split(500) == (0, 500)

    @pytest.mark.parametrize("price", [1, 7, 99, 101, 123_456_789])
    def test_parts_reconstruct_price_for_every_rate(self, price: int) -> None:
        for rate in range(101):
            payment, fee = FeePolicy(rate).split(price)
            assert payment + fee == price
            assert payment >= 0
            assert fee >= 0


class TestValidation:
    @pytest.mark.parametrize("rate", [-1, 101])
    def test_rate_out_of_range(self, rate: int) -> None:
        with pytest.raises(ValueError, match="commission_rate"):
            FeePolicy(rate)

    def test_policy_is_immutable(self) -> None:
        policy = FeePolicy(2)
        with pytest.raises(AttributeError):
            policy.commission_rate = 50  # type: ignore[misc]
