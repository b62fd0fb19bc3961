"""
ClaimGuard - bill analysis engine.

Finds overcharges in medical bills, auto insurance renewals, rental statements
and utility bills, and price increases in recurring card charges.
"""

__version__ = "1.0.0"

from .exceptions import ClaimGuardError, UnsupportedCategoryError
from .fee_calculator import calculate_smart_fee, calculate_success_fee
from .router import analyze_by_category
from .schemas import (
    BillCategory,
    FlaggedItem,
    SmartFeeCalculation,
    StatementAnalysis,
    UnifiedAnalysisResult,
)
from .statement_analyzer import analyze_statement

__all__ = [
    "__version__",
    "BillCategory",
    "ClaimGuardError",
    "FlaggedItem",
    "SmartFeeCalculation",
    "StatementAnalysis",
    "UnifiedAnalysisResult",
    "UnsupportedCategoryError",
    "analyze_by_category",
    "analyze_statement",
    "calculate_smart_fee",
    "calculate_success_fee",
]
