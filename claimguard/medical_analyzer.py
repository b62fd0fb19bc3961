"""
Medical Bill Analyzer for ClaimGuard

Extracts CPT/HCPCS procedure codes and billed amounts from itemized medical
statements, compares them against the fair-price reference table and flags
charges billed well above fair market value.
"""

import re
from dataclasses import dataclass
from typing import List, Mapping, Optional

import structlog

from .money import parse_amount, round_cents
from .reference_data import FAIR_PRICE_DB, FairPrice
from .schemas import FlaggedItem, MedicalAnalysisResult

# Flag if billed exceeds 130% of the fair price
OVERCHARGE_THRESHOLD = 1.3

BASE_CONFIDENCE = 50
CONFIDENCE_PER_RATIO = 30
MAX_CONFIDENCE = 95

# Amounts at or above this are account numbers, not charges
MAX_LINE_AMOUNT = 1_000_000

PROVIDER_SCAN_LINES = 10
PROVIDER_NAME_MAX_LENGTH = 100
PROVIDER_KEYWORDS = ("hospital", "medical", "health", "clinic", "center", "care", "physician")

# CPT (5 digits) or HCPCS (letter + 4 digits)
CODE_PATTERN = re.compile(r'\b([0-9]{5}|[A-Z][0-9]{4})\b')
AMOUNT_PATTERN = re.compile(r'\$?\s*([0-9]{1,3}(?:,?[0-9]{3})*(?:\.[0-9]{2})?)')


@dataclass(frozen=True)
class ExtractedCharge:
    """A procedure code with the amount billed for it."""
    code: str
    billed_amount: float
    raw_line: str


class MedicalBillAnalyzer:
    """Detects overcharged procedure codes in medical statements."""

    def __init__(self, fair_prices: Optional[Mapping[str, FairPrice]] = None):
        """Initialize the analyzer.

        Args:
            fair_prices: Fair-price table keyed by procedure code
        """
        self.logger = structlog.get_logger(__name__, component="medical_analyzer")
        self.fair_prices = FAIR_PRICE_DB if fair_prices is None else fair_prices

    def extract_charges(self, bill_text: str) -> List[ExtractedCharge]:
        """Extract procedure codes and billed amounts line by line.

        The billed amount is the largest amount on the line, since charge
        lines usually also carry unit prices or quantities.

        Args:
            bill_text: Raw statement text

        Returns:
            List of extracted charges in statement order
        """
        charges = []

        for line in bill_text.split("\n"):
            code_match = CODE_PATTERN.search(line)
            if not code_match:
                continue

            # The code's own digits are not an amount
            remainder = line[:code_match.start()] + " " + line[code_match.end():]

            max_amount = 0.0
            for amount_match in AMOUNT_PATTERN.finditer(remainder):
                amount = parse_amount(amount_match.group(1))
                if amount is None:
                    continue
                if max_amount < amount < MAX_LINE_AMOUNT:
                    max_amount = amount

            if max_amount > 0:
                charges.append(ExtractedCharge(
                    code=code_match.group(1),
                    billed_amount=max_amount,
                    raw_line=line.strip()
                ))

        return charges

    def _calculate_confidence(self, billed_amount: float, fair_price: float) -> float:
        """Confidence grows with the size of the overcharge ratio."""
        ratio = billed_amount / fair_price
        confidence = min(MAX_CONFIDENCE, BASE_CONFIDENCE + (ratio - 1) * CONFIDENCE_PER_RATIO)
        return round_cents(confidence)

    def detect_overcharges(self, charges: List[ExtractedCharge]) -> List[FlaggedItem]:
        """Compare charges against the fair-price table.

        Codes missing from the table are skipped.

        Returns:
            Flagged items, largest savings first
        """
        overcharges = []

        for charge in charges:
            ref = self.fair_prices.get(charge.code)
            if ref is None:
                continue

            if charge.billed_amount > ref.fair_price * OVERCHARGE_THRESHOLD:
                overcharges.append(FlaggedItem(
                    code=charge.code,
                    description=ref.description,
                    billed_amount=charge.billed_amount,
                    fair_price=ref.fair_price,
                    savings=round_cents(charge.billed_amount - ref.fair_price),
                    confidence=self._calculate_confidence(charge.billed_amount, ref.fair_price),
                ))

        overcharges.sort(key=lambda item: item.savings, reverse=True)
        return overcharges

    def extract_provider_name(self, bill_text: str) -> Optional[str]:
        """First provider-looking line in the statement header."""
        for line in bill_text.split("\n")[:PROVIDER_SCAN_LINES]:
            lower = line.lower()
            stripped = line.strip()
            if any(kw in lower for kw in PROVIDER_KEYWORDS) and len(stripped) > 3:
                return stripped[:PROVIDER_NAME_MAX_LENGTH]
        return None

    def analyze(self, bill_text: str) -> MedicalAnalysisResult:
        """Run the full medical analysis on a statement.

        Args:
            bill_text: Raw statement text

        Returns:
            MedicalAnalysisResult with flagged items and totals
        """
        charges = self.extract_charges(bill_text)
        line_items = self.detect_overcharges(charges)

        flagged_codes = {item.code for item in line_items}
        total_billed = sum(c.billed_amount for c in charges)
        # Unflagged charges are assumed fair at their billed amount
        total_fair_price = (
            sum(item.fair_price for item in line_items)
            + sum(c.billed_amount for c in charges if c.code not in flagged_codes)
        )
        potential_savings = sum(item.savings for item in line_items)

        notes = f"Scanned {len(charges)} line items. "
        if not line_items:
            notes += "No significant overcharges detected. All charges appear to be within fair market range."
        else:
            notes += (
                f"Found {len(line_items)} potentially overcharged items totaling "
                f"${potential_savings:.2f} in possible savings."
            )

        self.logger.info(
            "Medical analysis complete",
            charges=len(charges),
            flagged=len(line_items),
            potential_savings=round_cents(potential_savings)
        )

        return MedicalAnalysisResult(
            line_items=line_items,
            total_billed=round_cents(total_billed),
            total_fair_price=round_cents(total_fair_price),
            potential_savings=round_cents(potential_savings),
            provider_name=self.extract_provider_name(bill_text),
            analysis_notes=notes,
        )


_default_analyzer = MedicalBillAnalyzer()


def analyze_bill_text(bill_text: str) -> MedicalAnalysisResult:
    """Analyze a medical statement with the built-in fair-price table."""
    return _default_analyzer.analyze(bill_text)
