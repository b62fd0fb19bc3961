"""
Pydantic schemas for the ClaimGuard analysis engine.

These models are the shared result shapes consumed by the HTTP API, the CLI,
the letter generators and any persistence layer. Field names are snake_case in
Python and camelCase on the wire.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class BillCategory(str, Enum):
    """Supported bill categories."""
    MEDICAL = "medical"
    AUTO = "auto"
    RENT = "rent"
    UTILITY = "utility"


class FeeType(str, Enum):
    """Pricing model applied to recovered savings."""
    QUICK_WIN = "quick_win"
    SUCCESS_FEE = "success_fee"


class AmountUnit(str, Enum):
    """What the billed/fair amounts of a flagged item measure."""
    CURRENCY = "currency"        # dollar totals
    UNIT_RATE = "unit_rate"      # price per metered unit (e.g. $/therm)


class FlaggedItem(BaseModel):
    """A single detected overcharge or violation."""

    code: str = Field(
        ...,
        description="Procedure code, coverage key, fee key or synthetic tag",
        min_length=1,
        examples=["99285", "ADMIN_FEE", "NOTICE_VIOLATION"]
    )

    description: str = Field(
        ...,
        description="Human-readable explanation including the legal rationale"
    )

    billed_amount: float = Field(
        ...,
        description="Amount billed",
        alias="billedAmount"
    )

    fair_price: float = Field(
        ...,
        description="Benchmark or legal maximum for the billed amount",
        alias="fairPrice"
    )

    savings: float = Field(
        ...,
        description="billed_amount - fair_price, rounded to cents"
    )

    confidence: float = Field(
        ...,
        description="Heuristic confidence (0-100)",
        ge=0,
        le=100
    )

    unit: AmountUnit = Field(
        default=AmountUnit.CURRENCY,
        description="Unit of billed_amount and fair_price"
    )

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class MedicalAnalysisResult(BaseModel):
    """Native medical analyzer output (no category tag)."""

    line_items: List[FlaggedItem] = Field(default_factory=list, alias="lineItems")
    total_billed: float = Field(default=0.0, alias="totalBilled")
    total_fair_price: float = Field(default=0.0, alias="totalFairPrice")
    potential_savings: float = Field(default=0.0, alias="potentialSavings")
    provider_name: Optional[str] = Field(default=None, alias="providerName")
    analysis_notes: str = Field(default="", alias="analysisNotes")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class UnifiedAnalysisResult(BaseModel):
    """Category-tagged analysis result shared by every analyzer."""

    category: BillCategory = Field(..., description="Bill category")

    dispute_type: str = Field(
        ...,
        description="Category-specific dispute label",
        alias="disputeType",
        examples=["Medical Bill Overcharge"]
    )

    line_items: List[FlaggedItem] = Field(
        default_factory=list,
        description="Flagged items",
        alias="lineItems"
    )

    total_billed: float = Field(default=0.0, alias="totalBilled")
    total_fair_price: float = Field(default=0.0, alias="totalFairPrice")
    potential_savings: float = Field(default=0.0, alias="potentialSavings")

    provider_name: Optional[str] = Field(
        default=None,
        description="Best-effort provider name",
        alias="providerName"
    )

    analysis_notes: str = Field(default="", alias="analysisNotes")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class FeeCalculation(BaseModel):
    """Plain success-fee calculation."""

    gross_savings: float = Field(..., alias="grossSavings")
    fee_rate: float = Field(..., alias="feeRate")
    fee: float = Field(...)
    net_savings: float = Field(..., alias="netSavings")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class SmartFeeCalculation(FeeCalculation):
    """Fee calculation with the two-tier pricing model applied."""

    fee_type: FeeType = Field(..., alias="feeType")
    fee_label: str = Field(..., alias="feeLabel")


class StatementRow(BaseModel):
    """A single transaction parsed from a CSV statement."""

    date: str
    description: str
    amount: float
    category: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ChargeOccurrence(BaseModel):
    """One dated occurrence of a recurring charge."""

    date: str
    amount: float

    model_config = ConfigDict(frozen=True)


class RecurringCharge(BaseModel):
    """A merchant that was charged two or more times."""

    description: str
    normalized_name: str = Field(..., alias="normalizedName")
    occurrences: List[ChargeOccurrence] = Field(default_factory=list)
    avg_amount: float = Field(..., alias="avgAmount")
    latest_amount: float = Field(..., alias="latestAmount")
    month_over_month_change: Optional[float] = Field(
        default=None,
        description="Percent change between the last two occurrences",
        alias="monthOverMonthChange"
    )
    flagged: bool = Field(default=False, description="More than 10% increase")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class StatementAnalysis(BaseModel):
    """Recurring-charge analysis of a CSV statement."""

    total_transactions: int = Field(default=0, alias="totalTransactions")
    total_spent: float = Field(default=0.0, alias="totalSpent")
    recurring: List[RecurringCharge] = Field(default_factory=list)
    flagged_count: int = Field(default=0, alias="flaggedCount")
    potential_overcharges: float = Field(default=0.0, alias="potentialOvercharges")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CategoryMeta(BaseModel):
    """Display metadata for a bill category."""

    id: BillCategory
    label: str
    tagline: str
    scan_description: str = Field(..., alias="scanDescription")

    model_config = ConfigDict(populate_by_name=True, frozen=True)
