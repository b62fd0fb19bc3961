"""
Unit tests for category routing.
"""

import pytest

from claimguard.categories import CATEGORIES, DEMO_BILLS
from claimguard.exceptions import ClaimGuardError, UnsupportedCategoryError
from claimguard.money import round_cents
from claimguard.router import analyze_by_category
from claimguard.schemas import BillCategory


class TestRouting:

    @pytest.mark.parametrize("category", list(BillCategory))
    def test_demo_bill_routes_to_its_category(self, category):
        result = analyze_by_category(DEMO_BILLS[category], category)
        assert result.category == category
        assert result.line_items
        assert result.potential_savings == round_cents(sum(i.savings for i in result.line_items))

    def test_accepts_plain_strings(self):
        result = analyze_by_category(DEMO_BILLS[BillCategory.RENT], "rent")
        assert result.category == BillCategory.RENT

    def test_medical_result_is_wrapped(self):
        result = analyze_by_category("99285  ER visit  $2,450.00", BillCategory.MEDICAL)
        assert result.dispute_type == "Medical Bill Overcharge"
        assert result.line_items[0].savings == 1740.00

    def test_unknown_category_raises(self):
        with pytest.raises(UnsupportedCategoryError) as exc_info:
            analyze_by_category("anything", "dental")
        assert exc_info.value.category == "dental"
        assert str(exc_info.value) == "Unknown category: dental"

    def test_unsupported_category_is_value_error(self):
        with pytest.raises(ValueError):
            analyze_by_category("anything", "")
        assert issubclass(UnsupportedCategoryError, ClaimGuardError)

    def test_blank_text_yields_empty_result(self):
        result = analyze_by_category("   ", "utility")
        assert result.line_items == []
        assert result.potential_savings == 0


def test_every_category_has_metadata():
    assert [meta.id for meta in CATEGORIES] == list(BillCategory)
