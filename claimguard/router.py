"""
Category router - dispatches bill text to the analyzer for its category.
"""

from typing import Callable, Dict, Union

import structlog

from .auto_insurance_analyzer import analyze_auto_insurance
from .exceptions import UnsupportedCategoryError
from .medical_analyzer import analyze_bill_text
from .rent_analyzer import analyze_rent_bill
from .schemas import BillCategory, UnifiedAnalysisResult
from .utility_analyzer import analyze_utility_bill

logger = structlog.get_logger(__name__)

MEDICAL_DISPUTE_TYPE = "Medical Bill Overcharge"


def _analyze_medical(bill_text: str) -> UnifiedAnalysisResult:
    result = analyze_bill_text(bill_text)
    return UnifiedAnalysisResult(
        category=BillCategory.MEDICAL,
        dispute_type=MEDICAL_DISPUTE_TYPE,
        **result.model_dump(),
    )


ANALYZERS: Dict[BillCategory, Callable[[str], UnifiedAnalysisResult]] = {
    BillCategory.MEDICAL: _analyze_medical,
    BillCategory.AUTO: analyze_auto_insurance,
    BillCategory.RENT: analyze_rent_bill,
    BillCategory.UTILITY: analyze_utility_bill,
}


def resolve_category(category: Union[str, BillCategory]) -> BillCategory:
    """Map a category name onto BillCategory.

    Raises:
        UnsupportedCategoryError: If the category has no analyzer
    """
    try:
        return BillCategory(category)
    except ValueError:
        raise UnsupportedCategoryError(category) from None


def analyze_by_category(bill_text: str, category: Union[str, BillCategory]) -> UnifiedAnalysisResult:
    """Analyze bill text with the analyzer registered for its category."""
    resolved = resolve_category(category)
    logger.info("Routing bill for analysis", category=resolved.value, text_length=len(bill_text))
    return ANALYZERS[resolved](bill_text)
