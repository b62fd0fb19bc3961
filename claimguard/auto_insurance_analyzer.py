"""
Auto Insurance Analyzer for ClaimGuard

Scans auto insurance renewal notices for premium hikes per coverage line and
benchmarks each new premium against state-average rates.
"""

import re
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

import structlog

from .money import dollar_tokens, parse_amount, round_cents, round_whole
from .reference_data import STATE_AVG_RATES, StateAverageRate
from .schemas import BillCategory, FlaggedItem, UnifiedAnalysisResult

DISPUTE_TYPE = "Premium Hike Re-evaluation"

# Flag if the new premium exceeds 115% of the state average
HIKE_THRESHOLD = 1.15
MAX_CONFIDENCE = 95

# Checked in order; the first match classifies the line
COVERAGE_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r'bodily\s+injury', re.IGNORECASE), "bodily_injury"),
    (re.compile(r'property\s+damage', re.IGNORECASE), "property_damage"),
    (re.compile(r'collision', re.IGNORECASE), "collision"),
    (re.compile(r'comprehensive', re.IGNORECASE), "comprehensive"),
    (re.compile(r'uninsured|underinsured', re.IGNORECASE), "uninsured"),
    (re.compile(r'medical\s+pay', re.IGNORECASE), "medical_payments"),
    (re.compile(r'personal\s+injury|pip', re.IGNORECASE), "pip"),
    (re.compile(r'rental\s+reimburse', re.IGNORECASE), "rental"),
    (re.compile(r'roadside', re.IGNORECASE), "roadside"),
)

PROVIDER_PATTERN = re.compile(
    r'insurance|auto|shield|mutual|state\s+farm|geico|progressive|allstate',
    re.IGNORECASE
)


@dataclass(frozen=True)
class ExtractedPremium:
    """Previous and renewed premium for one coverage line."""
    key: str
    description: str
    previous_premium: float
    new_premium: float
    raw_line: str


class AutoInsuranceAnalyzer:
    """Detects coverage lines priced above state averages."""

    def __init__(self, state_rates: Optional[Mapping[str, StateAverageRate]] = None):
        self.logger = structlog.get_logger(__name__, component="auto_insurance_analyzer")
        self.state_rates = STATE_AVG_RATES if state_rates is None else state_rates

    def _describe(self, key: str, line: str) -> str:
        ref = self.state_rates.get(key)
        if ref is not None:
            return ref.description
        return re.split(r'\s{2,}', line.strip())[0]

    def extract_premiums(self, bill_text: str) -> List[ExtractedPremium]:
        """Extract (previous, new) premium pairs for recognised coverage lines.

        Only increases are kept.
        """
        results = []

        for line in bill_text.split("\n"):
            for pattern, key in COVERAGE_PATTERNS:
                if not pattern.search(line):
                    continue

                amounts = dollar_tokens(line)
                if len(amounts) >= 2:
                    previous = parse_amount(amounts[0])
                    current = parse_amount(amounts[1])
                    if previous is not None and current is not None and current > previous:
                        results.append(ExtractedPremium(
                            key=key,
                            description=self._describe(key, line),
                            previous_premium=previous,
                            new_premium=current,
                            raw_line=line.strip(),
                        ))
                break

        return results

    def extract_provider_name(self, bill_text: str) -> Optional[str]:
        lines = [line.strip() for line in bill_text.split("\n") if line.strip()]
        for line in lines:
            if PROVIDER_PATTERN.search(line):
                return line
        return lines[0] if lines else None

    def analyze(self, bill_text: str) -> UnifiedAnalysisResult:
        """Benchmark every extracted coverage line against the state average."""
        premiums = self.extract_premiums(bill_text)

        flagged_items = []
        total_billed = 0.0
        total_fair = 0.0

        for premium in premiums:
            ref = self.state_rates.get(premium.key)
            benchmark = ref.avg_premium if ref is not None else premium.previous_premium
            total_billed += premium.new_premium
            total_fair += benchmark

            if premium.new_premium > benchmark * HIKE_THRESHOLD:
                excess = premium.new_premium - benchmark
                flagged_items.append(FlaggedItem(
                    code=premium.key.upper(),
                    description=premium.description,
                    billed_amount=premium.new_premium,
                    fair_price=benchmark,
                    savings=round_cents(excess),
                    confidence=min(MAX_CONFIDENCE, round_whole(excess / benchmark * 100)),
                ))

        potential_savings = sum(item.savings for item in flagged_items)

        if flagged_items:
            notes = (
                f"Found {len(flagged_items)} coverage line(s) where your premium exceeds the state "
                f"average by more than 15%. No claims or violations detected, so you qualify for a "
                f"re-evaluation request."
            )
        else:
            notes = "No significant premium hikes detected above state average rates."

        self.logger.info(
            "Auto insurance analysis complete",
            coverage_lines=len(premiums),
            flagged=len(flagged_items)
        )

        return UnifiedAnalysisResult(
            category=BillCategory.AUTO,
            dispute_type=DISPUTE_TYPE,
            line_items=flagged_items,
            total_billed=round_cents(total_billed),
            total_fair_price=round_cents(total_fair),
            potential_savings=round_cents(potential_savings),
            provider_name=self.extract_provider_name(bill_text),
            analysis_notes=notes,
        )


_default_analyzer = AutoInsuranceAnalyzer()


def analyze_auto_insurance(bill_text: str) -> UnifiedAnalysisResult:
    """Analyze an auto insurance renewal notice."""
    return _default_analyzer.analyze(bill_text)
