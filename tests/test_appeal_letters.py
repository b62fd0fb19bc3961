"""
Unit tests for dispute letters and submission instructions.
"""

from datetime import date

import pytest

from claimguard.appeal_letters import generate_appeal_by_category, generate_instructions_by_category
from claimguard.categories import DEMO_BILLS
from claimguard.exceptions import UnsupportedCategoryError
from claimguard.router import analyze_by_category
from claimguard.schemas import BillCategory

LETTER_DATE = date(2024, 3, 1)


@pytest.fixture
def demo_results():
    return {category: analyze_by_category(text, category) for category, text in DEMO_BILLS.items()}


class TestLetters:

    @pytest.mark.parametrize("category,heading", [
        (BillCategory.MEDICAL, "# Formal Billing Dispute"),
        (BillCategory.AUTO, "# Comparative Rate Analysis"),
        (BillCategory.RENT, "# Formal Dispute: Rental Charges"),
        (BillCategory.UTILITY, "# Formal Dispute: Utility Billing Errors"),
    ])
    def test_heading_and_date(self, demo_results, category, heading):
        letter = generate_appeal_by_category(demo_results[category], today=LETTER_DATE)
        assert letter.startswith(heading)
        assert "**Date:** March 1, 2024" in letter
        assert f"${demo_results[category].potential_savings:.2f}" in letter

    def test_medical_letter_lists_codes(self, demo_results):
        letter = generate_appeal_by_category(demo_results[BillCategory.MEDICAL], today=LETTER_DATE)
        assert "| 99285 |" in letter
        assert "MEMORIAL GENERAL HOSPITAL" in letter

    def test_auto_letter_good_driver_section(self, demo_results):
        letter = generate_appeal_by_category(demo_results[BillCategory.AUTO], today=LETTER_DATE)
        assert "Good Driver & Loyalty Statute Violations" in letter
        assert "+40%" in letter

    def test_rent_letter_notice_section(self):
        result = analyze_by_category(
            "Base Rent    $2,000.00\n"
            "Rent Increase: previous $1,800.00 new $2,000.00\n"
            "Notice: 10-day notice provided",
            BillCategory.RENT,
        )
        letter = generate_appeal_by_category(result, today=LETTER_DATE)
        assert "## Notice Period Violations" in letter
        assert "Property Management" in letter

    def test_utility_rate_rendered_per_unit(self, demo_results):
        letter = generate_appeal_by_category(demo_results[BillCategory.UTILITY], today=LETTER_DATE)
        assert "$1.62/unit" in letter
        assert "$1.45/unit" in letter

    def test_default_date_is_today(self, demo_results):
        letter = generate_appeal_by_category(demo_results[BillCategory.RENT])
        today = date.today()
        assert f"{today:%B} {today.day}, {today.year}" in letter


class TestInstructions:

    def test_rent_uses_provider_name(self):
        text = generate_instructions_by_category("rent", "Greenfield Property Management")
        assert "Greenfield Property Management" in text
        assert "Small Claims Court" in text

    @pytest.mark.parametrize("category", list(BillCategory))
    def test_every_category_has_instructions(self, category):
        assert "### Important" in generate_instructions_by_category(category, None)

    def test_unknown_category(self):
        with pytest.raises(UnsupportedCategoryError):
            generate_instructions_by_category("dental", None)
