"""
Rent Analyzer for ClaimGuard

Scans rental statements for hidden fees, CAM overcharges, illegal late fees,
missing grace periods and rent increases applied without proper notice.
"""

import re
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

import structlog

from .money import dollar_tokens, first_dollar_amount, parse_amount, round_cents
from .reference_data import QUESTIONABLE_FEES, QuestionableFee
from .schemas import BillCategory, FlaggedItem, UnifiedAnalysisResult

DISPUTE_TYPE = "Hidden Fees, CAM Overcharges & Notice Violations"

# Most states require 30-60 days written notice for a rent increase
MIN_NOTICE_DAYS = 30
# Most states cap late fees at 4-5% of monthly rent
MAX_LATE_FEE_PERCENT = 0.05
# Most states require at least a 3-5 day grace period
MIN_GRACE_PERIOD_DAYS = 3

PROHIBITED_FEE_CONFIDENCE = 90
CAPPED_FEE_CONFIDENCE = 75
NOTICE_VIOLATION_CONFIDENCE = 92
NOTICE_INFORMATIONAL_CONFIDENCE = 90
LATE_FEE_CONFIDENCE = 88
NO_GRACE_CONFIDENCE = 85

NOTICE_VIOLATION = "NOTICE_VIOLATION"
LATE_FEE = "LATE_FEE"
NO_GRACE = "NO_GRACE"

# Checked in order; the first match classifies the line. CAM reconciliation
# precedes the general CAM pattern, which would otherwise swallow it.
FEE_PATTERNS: Tuple[Tuple[re.Pattern, str], ...] = (
    (re.compile(r'admin|processing', re.IGNORECASE), "admin_fee"),
    (re.compile(r'amenity', re.IGNORECASE), "amenity_fee"),
    (re.compile(r'trash|garbage|waste', re.IGNORECASE), "trash_fee"),
    (re.compile(r'digital|portal|access|technology', re.IGNORECASE), "digital_fee"),
    (re.compile(r'insurance\s+(require|fee)', re.IGNORECASE), "insurance_fee"),
    (re.compile(r'parking', re.IGNORECASE), "parking_fee"),
    (re.compile(r'cam\s+reconcil|cam\s+adjust|cam\s+true.?up', re.IGNORECASE), "cam_reconciliation"),
    (re.compile(r'common\s+area|cam\b|maintenance\s+(charge|fee)', re.IGNORECASE), "cam_fee"),
)

BASE_RENT_RE = re.compile(r'base\s+rent', re.IGNORECASE)
NOT_BASE_RENT_RE = re.compile(r'late|fee|charge', re.IGNORECASE)
LATE_FEE_RE = re.compile(r'late\s+(fee|charge|penalty)', re.IGNORECASE)
RENT_INCREASE_RE = re.compile(r'rent\s+increase|new\s+rent|previous\s+rent|old\s+rent', re.IGNORECASE)
GRACE_DAYS_RE = re.compile(r'grace\s+period[:\s]*(\d+)\s*day', re.IGNORECASE)
GRACE_NONE_RE = re.compile(r'grace\s+period[:\s]*none', re.IGNORECASE)
NOTICE_DAYS_RE = re.compile(r'(\d+)[\s-]*day\s+notice', re.IGNORECASE)
NOTICE_NONE_RE = re.compile(r'notice[:\s]*none|no\s+prior\s+notice|without\s+notice', re.IGNORECASE)
PROVIDER_PATTERN = re.compile(r'property|management|realty|housing|apartment|landlord', re.IGNORECASE)


@dataclass(frozen=True)
class ExtractedRentCharge:
    """A questionable fee found on the statement."""
    key: str
    amount: float
    raw_line: str


@dataclass(frozen=True)
class RentIncrease:
    previous: float
    current: float

    @property
    def amount(self) -> float:
        return self.current - self.previous


@dataclass
class RentStatement:
    """Everything the rent rules need from one statement."""
    base_rent: float = 0.0
    late_fee: float = 0.0
    charges: List[ExtractedRentCharge] = field(default_factory=list)
    grace_period: Optional[int] = None
    notice_days: Optional[int] = None
    rent_increase: Optional[RentIncrease] = None


class RentAnalyzer:
    """Applies tenant-rights rules to rental statements."""

    def __init__(self, questionable_fees: Optional[Mapping[str, QuestionableFee]] = None):
        self.logger = structlog.get_logger(__name__, component="rent_analyzer")
        self.questionable_fees = QUESTIONABLE_FEES if questionable_fees is None else questionable_fees

    def _extract_rent_increase(self, line: str) -> Optional[RentIncrease]:
        amounts = dollar_tokens(line)
        if len(amounts) < 2:
            return None
        previous = parse_amount(amounts[0])
        current = parse_amount(amounts[1])
        if previous is None or current is None or current <= previous:
            return None
        return RentIncrease(previous=previous, current=current)

    def extract_rent_charges(self, bill_text: str) -> RentStatement:
        """Extract base rent, late fee, questionable fees and notice terms."""
        lines = bill_text.split("\n")
        statement = RentStatement()

        for line in lines:
            value = first_dollar_amount(line)
            if value is None:
                continue

            if BASE_RENT_RE.search(line) and not NOT_BASE_RENT_RE.search(line):
                statement.base_rent = value
                continue

            if LATE_FEE_RE.search(line):
                statement.late_fee = value
                continue

            if RENT_INCREASE_RE.search(line):
                increase = self._extract_rent_increase(line)
                if increase is not None:
                    statement.rent_increase = increase

            for pattern, key in FEE_PATTERNS:
                if pattern.search(line):
                    statement.charges.append(ExtractedRentCharge(key=key, amount=value, raw_line=line.strip()))
                    break

        for line in lines:
            grace_match = GRACE_DAYS_RE.search(line)
            if grace_match:
                statement.grace_period = int(grace_match.group(1))
            if GRACE_NONE_RE.search(line):
                statement.grace_period = 0

        for line in lines:
            notice_match = NOTICE_DAYS_RE.search(line)
            if notice_match:
                statement.notice_days = int(notice_match.group(1))
            if NOTICE_NONE_RE.search(line):
                statement.notice_days = 0

        return statement

    def extract_provider_name(self, bill_text: str) -> Optional[str]:
        lines = [line.strip() for line in bill_text.split("\n") if line.strip()]
        for line in lines:
            if PROVIDER_PATTERN.search(line):
                return line
        return lines[0] if lines else None

    def _notice_violation(self, statement: RentStatement) -> Optional[FlaggedItem]:
        notice_days = statement.notice_days
        if notice_days is None or notice_days >= MIN_NOTICE_DAYS:
            return None

        if statement.rent_increase is not None:
            increase = statement.rent_increase.amount
            return FlaggedItem(
                code=NOTICE_VIOLATION,
                description=(
                    f"Rent increase of ${increase:.2f}/mo with only {notice_days}-day notice. "
                    f"Most states require a minimum {MIN_NOTICE_DAYS}-day written notice before any rent "
                    f"increase can take effect. This increase may be void until proper notice is given."
                ),
                billed_amount=increase,
                fair_price=0,
                savings=round_cents(increase),
                confidence=NOTICE_VIOLATION_CONFIDENCE,
            )

        if statement.base_rent > 0:
            # Increase amount unknown; the item documents the violation only
            return FlaggedItem(
                code=NOTICE_VIOLATION,
                description=(
                    f"Notice period of {notice_days} day(s) is below the {MIN_NOTICE_DAYS}-day legal "
                    f"minimum. Any rent increase applied without proper notice is unenforceable and "
                    f"must be rescinded."
                ),
                billed_amount=0,
                fair_price=0,
                savings=0,
                confidence=NOTICE_INFORMATIONAL_CONFIDENCE,
            )

        return None

    def analyze(self, bill_text: str) -> UnifiedAnalysisResult:
        """Apply every rent rule; rules are independent and additive."""
        statement = self.extract_rent_charges(bill_text)

        flagged_items = []
        # Base rent itself is never disputed
        total_billed = statement.base_rent
        total_fair = statement.base_rent

        for charge in statement.charges:
            ref = self.questionable_fees.get(charge.key)
            if ref is None:
                continue

            total_billed += charge.amount
            total_fair += ref.max_reasonable

            if charge.amount > ref.max_reasonable:
                label = re.split(r'\s{2,}', charge.raw_line)[0]
                flagged_items.append(FlaggedItem(
                    code=charge.key.upper(),
                    description=f"{label} - {ref.legal_note}",
                    billed_amount=charge.amount,
                    fair_price=ref.max_reasonable,
                    savings=round_cents(charge.amount - ref.max_reasonable),
                    confidence=PROHIBITED_FEE_CONFIDENCE if ref.is_prohibited else CAPPED_FEE_CONFIDENCE,
                ))

        notice_item = self._notice_violation(statement)
        if notice_item is not None:
            flagged_items.append(notice_item)
            total_billed += notice_item.billed_amount

        late_fee = statement.late_fee
        if late_fee > 0 and statement.base_rent > 0:
            total_billed += late_fee
            max_late = round_cents(statement.base_rent * MAX_LATE_FEE_PERCENT)

            if late_fee > max_late:
                flagged_items.append(FlaggedItem(
                    code=LATE_FEE,
                    description=(
                        f"Late fee of ${late_fee:.2f} exceeds 5% of rent (${max_late:.2f}). "
                        f"Most states cap late fees at 4-5% of monthly rent."
                    ),
                    billed_amount=late_fee,
                    fair_price=max_late,
                    savings=round_cents(late_fee - max_late),
                    confidence=LATE_FEE_CONFIDENCE,
                ))
                total_fair += max_late
            else:
                total_fair += late_fee

            if statement.grace_period is not None and statement.grace_period < MIN_GRACE_PERIOD_DAYS:
                flagged_items.append(FlaggedItem(
                    code=NO_GRACE,
                    description=(
                        f"No grace period stated. Most states require a {MIN_GRACE_PERIOD_DAYS}-5 day "
                        f"grace period before late fees can be charged."
                    ),
                    billed_amount=late_fee,
                    fair_price=0,
                    savings=round_cents(late_fee),
                    confidence=NO_GRACE_CONFIDENCE,
                ))

        potential_savings = sum(item.savings for item in flagged_items)

        self.logger.info(
            "Rent analysis complete",
            fees=len(statement.charges),
            flagged=len(flagged_items),
            notice_days=statement.notice_days,
            grace_period=statement.grace_period
        )

        return UnifiedAnalysisResult(
            category=BillCategory.RENT,
            dispute_type=DISPUTE_TYPE,
            line_items=flagged_items,
            total_billed=round_cents(total_billed),
            total_fair_price=round_cents(total_fair),
            potential_savings=round_cents(potential_savings),
            provider_name=self.extract_provider_name(bill_text),
            analysis_notes=_build_notes(flagged_items),
        )


def _build_notes(flagged_items: List[FlaggedItem]) -> str:
    if not flagged_items:
        return "No hidden fees, CAM overcharges, or notice violations detected."

    codes = [item.code for item in flagged_items]
    issue_types = []
    if any(code.startswith("CAM") for code in codes):
        issue_types.append("CAM overcharges")
    if NOTICE_VIOLATION in codes:
        issue_types.append("notice period violations")
    if LATE_FEE in codes or NO_GRACE in codes:
        issue_types.append("illegal late fees")
    if any(
        not code.startswith("CAM") and code not in (NOTICE_VIOLATION, LATE_FEE, NO_GRACE)
        for code in codes
    ):
        issue_types.append("hidden fees")

    return (
        f"Found {len(flagged_items)} disputable charge(s) including {', '.join(issue_types)}. "
        f"These may violate tenant rights in your state."
    )


_default_analyzer = RentAnalyzer()


def analyze_rent_bill(bill_text: str) -> UnifiedAnalysisResult:
    """Analyze a rental statement."""
    return _default_analyzer.analyze(bill_text)
