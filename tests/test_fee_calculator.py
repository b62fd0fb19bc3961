"""
Unit tests for the fee calculator.
"""

import pytest

from claimguard.fee_calculator import calculate_smart_fee, calculate_success_fee
from claimguard.money import round_cents
from claimguard.schemas import FeeType


class TestSmartFee:

    def test_zero_savings(self):
        fee = calculate_smart_fee(0)
        assert fee.fee == 0
        assert fee.fee_rate == 0
        assert fee.net_savings == 0
        assert fee.fee_type == FeeType.QUICK_WIN
        assert fee.fee_label == "$10 Quick Win"

    def test_negative_savings(self):
        fee = calculate_smart_fee(-25)
        assert fee.gross_savings == 0
        assert fee.fee == 0
        assert fee.net_savings == fee.gross_savings - fee.fee
        assert fee.fee_type == FeeType.QUICK_WIN

    @pytest.mark.parametrize("gross", [-25, 0, 12.345, 50, 50.01, 333.333, 1000])
    def test_net_is_gross_minus_fee(self, gross):
        fee = calculate_smart_fee(gross)
        assert fee.net_savings == round_cents(fee.gross_savings - fee.fee)

    def test_gross_rounded_to_cents(self):
        assert calculate_smart_fee(12.345).gross_savings == 12.35
        assert calculate_smart_fee(333.333).gross_savings == 333.33

    def test_quick_win_boundary_is_inclusive(self):
        fee = calculate_smart_fee(50)
        assert fee.fee == 10
        assert fee.fee_rate == 0.2
        assert fee.net_savings == 40
        assert fee.fee_type == FeeType.QUICK_WIN

    @pytest.mark.parametrize("gross,rate,net", [
        (25, 0.4, 15),
        (5, 2.0, -5),
        (30, 0.33, 20),
    ])
    def test_quick_win_rate(self, gross, rate, net):
        fee = calculate_smart_fee(gross)
        assert fee.fee == 10
        assert fee.fee_rate == rate
        assert fee.net_savings == net

    def test_just_above_boundary(self):
        fee = calculate_smart_fee(50.01)
        assert fee.fee_type == FeeType.SUCCESS_FEE
        assert fee.fee == 10.00
        assert fee.net_savings == 40.01
        assert fee.fee_label == "20% Success Fee"

    def test_success_fee(self):
        fee = calculate_smart_fee(1000)
        assert fee.fee == 200
        assert fee.net_savings == 800
        assert fee.fee_rate == 0.20

    def test_serializes_with_camel_case(self):
        data = calculate_smart_fee(1000).model_dump(by_alias=True)
        assert data["feeType"] == "success_fee"
        assert data["netSavings"] == 800


def test_plain_success_fee_applies_to_small_amounts():
    fee = calculate_success_fee(20)
    assert fee.fee == 4.0
    assert fee.net_savings == 16.0


@pytest.mark.parametrize("gross", [0, -10])
def test_plain_success_fee_without_savings(gross):
    fee = calculate_success_fee(gross)
    assert fee.gross_savings == 0
    assert fee.fee == 0
    assert fee.net_savings == 0
    assert fee.fee_rate == 0.20
