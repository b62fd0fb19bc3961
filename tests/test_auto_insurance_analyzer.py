"""
Unit tests for AutoInsuranceAnalyzer.
"""

import pytest

from claimguard.auto_insurance_analyzer import AutoInsuranceAnalyzer, analyze_auto_insurance
from claimguard.categories import AUTO_DEMO
from claimguard.money import round_cents
from claimguard.schemas import BillCategory


@pytest.fixture
def analyzer():
    return AutoInsuranceAnalyzer()


class TestPremiumExtraction:

    def test_increase_extracted(self, analyzer):
        premiums = analyzer.extract_premiums("Collision   $310.00/6mo   $485.00/6mo")
        assert len(premiums) == 1
        assert premiums[0].key == "collision"
        assert premiums[0].previous_premium == 310.00
        assert premiums[0].new_premium == 485.00
        assert premiums[0].description == "Collision Coverage"

    def test_decrease_ignored(self, analyzer):
        assert analyzer.extract_premiums("Collision   $400.00   $350.00") == []

    def test_single_amount_ignored(self, analyzer):
        assert analyzer.extract_premiums("Collision   $400.00") == []

    def test_first_matching_pattern_wins(self, analyzer):
        premiums = analyzer.extract_premiums("Bodily Injury / Property Damage  $100.00  $200.00")
        assert [p.key for p in premiums] == ["bodily_injury"]


class TestBenchmarking:

    def test_demo_renewal(self, analyzer):
        result = analyzer.analyze(AUTO_DEMO)
        assert result.category == BillCategory.AUTO
        assert result.dispute_type == "Premium Hike Re-evaluation"
        assert len(result.line_items) == 6
        assert result.total_billed == 1436.00
        assert result.total_fair_price == 1042.00
        assert result.potential_savings == 394.00
        assert result.provider_name == "NATIONAL SHIELD AUTO INSURANCE"

    def test_confidence_is_percent_above_benchmark(self, analyzer):
        result = analyzer.analyze("Bodily Injury    $280.00/6mo    $412.00/6mo")
        item = result.line_items[0]
        assert item.code == "BODILY_INJURY"
        assert item.savings == 117.00
        assert item.confidence == 40

    def test_within_threshold_not_flagged(self, analyzer):
        result = analyzer.analyze("Collision    $300.00    $380.00")
        assert result.line_items == []
        assert result.total_billed == 380.00
        assert result.total_fair_price == 340.00
        assert result.analysis_notes == "No significant premium hikes detected above state average rates."

    def test_missing_benchmark_uses_previous_premium(self):
        analyzer = AutoInsuranceAnalyzer(state_rates={})
        result = analyzer.analyze("Collision    $100.00    $120.00")
        item = result.line_items[0]
        assert item.fair_price == 100.00
        assert item.savings == 20.00
        assert item.description == "Collision"

    def test_confidence_capped(self, analyzer):
        result = analyzer.analyze("Roadside    $10.00    $90.00")
        assert result.line_items[0].confidence == 95

    def test_savings_invariants(self, analyzer):
        result = analyzer.analyze(AUTO_DEMO)
        for item in result.line_items:
            assert item.savings == round_cents(item.billed_amount - item.fair_price)
        assert result.potential_savings == round_cents(sum(i.savings for i in result.line_items))

    def test_idempotent(self):
        assert analyze_auto_insurance(AUTO_DEMO) == analyze_auto_insurance(AUTO_DEMO)
