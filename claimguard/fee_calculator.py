"""
Fee calculator for recovered savings.

Small disputes pay a flat quick-win fee; larger ones pay a percentage of what
was recovered.
"""

from .money import round_cents
from .schemas import FeeCalculation, FeeType, SmartFeeCalculation

SUCCESS_FEE_RATE = 0.20
QUICK_WIN_FEE = 10.0
# Savings at or below this pay the flat fee
QUICK_WIN_CEILING = 50.0

QUICK_WIN_LABEL = "$10 Quick Win"
SUCCESS_FEE_LABEL = "20% Success Fee"


def calculate_success_fee(gross_savings: float) -> FeeCalculation:
    """Plain 20% success fee on recovered savings.

    Nothing is charged when nothing was recovered.
    """
    if gross_savings <= 0:
        return FeeCalculation(gross_savings=0, fee_rate=SUCCESS_FEE_RATE, fee=0, net_savings=0)

    gross = round_cents(gross_savings)
    fee = round_cents(gross * SUCCESS_FEE_RATE)
    return FeeCalculation(
        gross_savings=gross,
        fee_rate=SUCCESS_FEE_RATE,
        fee=fee,
        net_savings=round_cents(gross - fee),
    )


def calculate_smart_fee(gross_savings: float) -> SmartFeeCalculation:
    """Pick the pricing tier for the given savings.

    Args:
        gross_savings: Total potential savings from an analysis

    Returns:
        SmartFeeCalculation with the applied fee type and its label
    """
    if gross_savings <= 0:
        return SmartFeeCalculation(
            gross_savings=0,
            fee_rate=0,
            fee=0,
            net_savings=0,
            fee_type=FeeType.QUICK_WIN,
            fee_label=QUICK_WIN_LABEL,
        )

    if gross_savings <= QUICK_WIN_CEILING:
        gross = round_cents(gross_savings)
        return SmartFeeCalculation(
            gross_savings=gross,
            fee_rate=round_cents(QUICK_WIN_FEE / gross_savings),
            fee=QUICK_WIN_FEE,
            net_savings=round_cents(gross - QUICK_WIN_FEE),
            fee_type=FeeType.QUICK_WIN,
            fee_label=QUICK_WIN_LABEL,
        )

    base = calculate_success_fee(gross_savings)
    return SmartFeeCalculation(
        **base.model_dump(),
        fee_type=FeeType.SUCCESS_FEE,
        fee_label=SUCCESS_FEE_LABEL,
    )
