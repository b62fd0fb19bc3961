"""
Unit tests for MedicalBillAnalyzer.

Tests cover:
- Code and amount extraction
- Overcharge detection against the fair-price table
- Totals, notes and provider detection
"""

import pytest

from claimguard.categories import MEDICAL_DEMO
from claimguard.medical_analyzer import MedicalBillAnalyzer, analyze_bill_text
from claimguard.reference_data import FairPrice
from claimguard.money import round_cents


@pytest.fixture
def analyzer():
    return MedicalBillAnalyzer()


class TestExtraction:
    """Test charge extraction from statement text."""

    def test_extracts_code_and_largest_amount(self, analyzer):
        charges = analyzer.extract_charges("99285  ER visit  1 x $950.00   $2,450.00")
        assert len(charges) == 1
        assert charges[0].code == "99285"
        assert charges[0].billed_amount == 2450.00

    def test_hcpcs_code(self, analyzer):
        charges = analyzer.extract_charges("J1885  Ketorolac injection   $95.00")
        assert charges[0].code == "J1885"

    def test_lines_without_codes_are_ignored(self, analyzer):
        assert analyzer.extract_charges("Facility Fee:   $1,850.00\nTotal:  $9,257.00") == []

    def test_empty_text(self, analyzer):
        assert analyzer.extract_charges("") == []

    def test_code_digits_are_not_an_amount(self, analyzer):
        charges = analyzer.extract_charges("36415    Venipuncture (blood draw)    $85.00")
        assert charges[0].billed_amount == 85.00

    def test_demo_amounts_match_listed_charges(self, analyzer):
        billed = {c.code: c.billed_amount for c in analyzer.extract_charges(MEDICAL_DEMO)}
        assert billed["36415"] == 85.00
        assert billed["85025"] == 147.00
        assert billed["71046"] == 380.00
        assert billed["96372"] == 185.00
        assert billed["88305"] == 450.00


class TestOvercharges:
    """Test detection against fair prices."""

    def test_emergency_visit_savings(self, analyzer):
        result = analyzer.analyze("99285    Emergency dept visit    $2,450.00")
        assert len(result.line_items) == 1
        item = result.line_items[0]
        assert item.savings == 1740.00
        assert item.fair_price == 710.00
        assert item.confidence == 95

    def test_below_threshold_not_flagged(self, analyzer):
        result = analyzer.analyze("99285    Emergency dept visit    $900.00")
        assert result.line_items == []
        assert result.total_billed == 900.00
        assert result.total_fair_price == 900.00
        assert "No significant overcharges detected" in result.analysis_notes

    def test_unknown_code_skipped(self, analyzer):
        result = analyzer.analyze("12345    Mystery procedure    $5,000.00")
        assert result.line_items == []
        assert result.total_billed == 5000.00

    def test_confidence_scales_with_ratio(self):
        analyzer = MedicalBillAnalyzer(fair_prices={
            "11111": FairPrice(code="11111", description="Test", fair_price=100.0),
        })
        result = analyzer.analyze("11111 Test $150.00")
        # ratio 1.5 -> 50 + 0.5 * 30
        assert result.line_items[0].confidence == 65.0

    def test_sorted_by_savings(self, analyzer):
        result = analyzer.analyze(MEDICAL_DEMO)
        savings = [item.savings for item in result.line_items]
        assert savings == sorted(savings, reverse=True)
        assert result.line_items[0].code == "74177"


class TestDemoStatement:
    """Test the sample hospital statement end to end."""

    def test_all_listed_codes_flagged(self, analyzer):
        result = analyzer.analyze(MEDICAL_DEMO)
        assert {item.code for item in result.line_items} == {
            "99285", "36415", "85025", "80053", "71046", "93000", "96372", "74177", "88305"
        }
        assert result.potential_savings == 6107.00

    def test_savings_invariants(self, analyzer):
        result = analyzer.analyze(MEDICAL_DEMO)
        for item in result.line_items:
            assert item.savings == round_cents(item.billed_amount - item.fair_price)
        assert result.potential_savings == round_cents(sum(i.savings for i in result.line_items))

    def test_provider_name(self, analyzer):
        assert analyzer.analyze(MEDICAL_DEMO).provider_name == "MEMORIAL GENERAL HOSPITAL"

    def test_idempotent(self):
        assert analyze_bill_text(MEDICAL_DEMO) == analyze_bill_text(MEDICAL_DEMO)
