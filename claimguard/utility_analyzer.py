"""
Utility Analyzer for ClaimGuard

Checks gas, heating and electric statements for back-billing beyond the
regulatory window, over-estimated meter readings and unexplained unit-rate
increases. There is no reference table for utilities: fairness is judged
against the statement's own billing history.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

import structlog

from .money import first_dollar_amount, parse_amount, round_cents, round_whole
from .schemas import AmountUnit, BillCategory, FlaggedItem, UnifiedAnalysisResult

DISPUTE_TYPE = "Back-Billing & Meter Errors"

# Most jurisdictions limit back-billing to 12 months
MAX_BACK_BILL_MONTHS = 12
# Share of a back-bill treated as contestable inside the window
CONTESTABLE_BACK_BILL_SHARE = 0.5
# Estimated readings are only judged with more than this many periods
MIN_ESTIMATED_PERIODS = 3
# Flag estimates running more than 15% above actual usage
ESTIMATE_TOLERANCE = 1.15
# Flag unit-rate increases above 10%
RATE_HIKE_THRESHOLD = 1.1

BACK_BILL_LIMIT_CONFIDENCE = 92
BACK_BILL_CONTESTABLE_CONFIDENCE = 65
ESTIMATED_OVERCHARGE_CONFIDENCE = 78
RATE_HIKE_CONFIDENCE = 60

BACK_BILL = "BACK_BILL"
EST_OVER = "EST_OVER"
RATE_HIKE = "RATE_HIKE"

BACK_BILL_RE = re.compile(r'back.?bill|adjustment|correction', re.IGNORECASE)
SERVICE_FEE_RE = re.compile(r'service\s+fee', re.IGNORECASE)
PERIOD_RE = re.compile(r'(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\w*\s+\d{4}', re.IGNORECASE)
NUMBER_RE = re.compile(r'[\d,]+\.?\d*')
# "Dec 28, 2023" or "12/28/2023"
CALENDAR_DATE_RE = re.compile(
    r'(?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\w*\.?\s+\d{1,2},?\s+\d{4}'
    r'|\b\d{1,2}/\d{1,2}/\d{2,4}\b',
    re.IGNORECASE
)
ESTIMATED_RE = re.compile(r'estimated|est\b', re.IGNORECASE)
ACTUAL_RE = re.compile(r'actual', re.IGNORECASE)
PROVIDER_PATTERN = re.compile(r'gas|heating|electric|utility|power|energy|metro', re.IGNORECASE)


@dataclass(frozen=True)
class BillingPeriod:
    """One metered billing period row."""
    period: str
    usage: float
    rate: float
    amount: float
    is_estimated: bool
    raw_line: str


@dataclass
class UtilityStatement:
    periods: List[BillingPeriod] = field(default_factory=list)
    back_bill_amount: float = 0.0
    service_fee: float = 0.0

    @property
    def estimated_periods(self) -> List[BillingPeriod]:
        return [p for p in self.periods if p.is_estimated]

    @property
    def actual_periods(self) -> List[BillingPeriod]:
        return [p for p in self.periods if not p.is_estimated]


def _reading_numbers(line: str) -> List[float]:
    """Numbers on a row once every date and period label is taken out.

    Narrative lines such as "Jan 2023 - Dec 2023" in a footnote have none left.
    """
    remainder = PERIOD_RE.sub(" ", CALENDAR_DATE_RE.sub(" ", line))
    numbers = [parse_amount(token) for token in NUMBER_RE.findall(remainder)]
    return [n for n in numbers if n is not None]


class UtilityAnalyzer:
    """Detects back-billing and meter errors in utility statements."""

    def __init__(self):
        self.logger = structlog.get_logger(__name__, component="utility_analyzer")

    def _parse_period(self, line: str) -> Optional[BillingPeriod]:
        period_match = PERIOD_RE.search(line)
        if not period_match:
            return None

        numbers = _reading_numbers(line)
        if len(numbers) < 2:
            return None

        usage, rate = numbers[0], numbers[1]
        amount = numbers[2] if len(numbers) >= 3 else usage * rate

        return BillingPeriod(
            period=period_match.group(0),
            usage=usage,
            rate=rate,
            amount=amount,
            is_estimated=bool(ESTIMATED_RE.search(line)) and not ACTUAL_RE.search(line),
            raw_line=line.strip(),
        )

    def extract_billing_periods(self, bill_text: str) -> UtilityStatement:
        """Extract billing periods, the back-bill adjustment and the service fee."""
        statement = UtilityStatement()

        for line in bill_text.split("\n"):
            if BACK_BILL_RE.search(line):
                amount = first_dollar_amount(line)
                if amount is not None:
                    statement.back_bill_amount = amount
                continue

            if SERVICE_FEE_RE.search(line):
                amount = first_dollar_amount(line)
                if amount is not None:
                    statement.service_fee = amount
                continue

            period = self._parse_period(line)
            if period is not None:
                statement.periods.append(period)

        return statement

    def extract_provider_name(self, bill_text: str) -> Optional[str]:
        lines = [line.strip() for line in bill_text.split("\n") if line.strip()]
        for line in lines:
            if PROVIDER_PATTERN.search(line):
                return line
        return lines[0] if lines else None

    def _check_back_billing(self, statement: UtilityStatement) -> Optional[FlaggedItem]:
        back_bill = statement.back_bill_amount
        if back_bill <= 0:
            return None

        estimated_count = len(statement.estimated_periods)
        if estimated_count > MAX_BACK_BILL_MONTHS:
            return FlaggedItem(
                code=BACK_BILL,
                description=(
                    f"Back-billing for {estimated_count} months (${back_bill:.2f}). Most jurisdictions "
                    f"limit retroactive billing to {MAX_BACK_BILL_MONTHS} months."
                ),
                billed_amount=back_bill,
                fair_price=0,
                savings=round_cents(back_bill),
                confidence=BACK_BILL_LIMIT_CONFIDENCE,
            )

        fair_price = round_cents(back_bill * CONTESTABLE_BACK_BILL_SHARE)
        return FlaggedItem(
            code=BACK_BILL,
            description=(
                f"Back-bill adjustment of ${back_bill:.2f} applied. "
                f"Verify the corrected readings are accurate."
            ),
            billed_amount=back_bill,
            fair_price=fair_price,
            savings=round_cents(back_bill - fair_price),
            confidence=BACK_BILL_CONTESTABLE_CONFIDENCE,
        )

    def _check_estimated_readings(self, statement: UtilityStatement) -> Optional[FlaggedItem]:
        estimated = statement.estimated_periods
        if len(estimated) <= MIN_ESTIMATED_PERIODS:
            return None

        est_total = sum(p.amount for p in estimated)
        avg_est_usage = sum(p.usage for p in estimated) / len(estimated)
        actual = statement.actual_periods
        avg_actual_usage = (
            sum(p.usage for p in actual) / len(actual) if actual else avg_est_usage
        )

        if avg_est_usage <= avg_actual_usage * ESTIMATE_TOLERANCE:
            return None

        if avg_actual_usage > 0:
            over_estimate = round_whole((avg_est_usage - avg_actual_usage) / avg_actual_usage * 100)
            gap = f"{over_estimate}% higher than"
        else:
            gap = "above"

        fair_price = round_cents(est_total * (avg_actual_usage / avg_est_usage))
        return FlaggedItem(
            code=EST_OVER,
            description=(
                f"{len(estimated)} months of estimated readings are {gap} actual meter data. "
                f"You may be owed a refund."
            ),
            billed_amount=round_cents(est_total),
            fair_price=fair_price,
            savings=round_cents(est_total - fair_price),
            confidence=ESTIMATED_OVERCHARGE_CONFIDENCE,
        )

    def _check_rate_hike(self, statement: UtilityStatement) -> Optional[FlaggedItem]:
        rates = {p.rate for p in statement.periods if p.rate > 0}
        if len(rates) < 2:
            return None

        min_rate = min(rates)
        max_rate = max(rates)
        if max_rate <= min_rate * RATE_HIKE_THRESHOLD:
            return None

        hike = round_whole((max_rate - min_rate) / min_rate * 100)
        return FlaggedItem(
            code=RATE_HIKE,
            description=(
                f"Rate increased {hike}% from ${min_rate:.2f}/unit to ${max_rate:.2f}/unit. "
                f"Request documentation for this rate change."
            ),
            billed_amount=max_rate,
            fair_price=min_rate,
            savings=round_cents(max_rate - min_rate),
            confidence=RATE_HIKE_CONFIDENCE,
            unit=AmountUnit.UNIT_RATE,
        )

    def analyze(self, bill_text: str) -> UnifiedAnalysisResult:
        """Run the back-billing, estimated-reading and rate-hike checks."""
        statement = self.extract_billing_periods(bill_text)

        flagged_items = [
            item for item in (
                self._check_back_billing(statement),
                self._check_estimated_readings(statement),
                self._check_rate_hike(statement),
            )
            if item is not None
        ]

        total_billed = (
            sum(p.amount for p in statement.periods)
            + statement.back_bill_amount
            + statement.service_fee
        )
        potential_savings = sum(item.savings for item in flagged_items)
        # Utility fair total is derived, not accumulated per line
        total_fair = total_billed - potential_savings

        self.logger.info(
            "Utility analysis complete",
            periods=len(statement.periods),
            estimated=len(statement.estimated_periods),
            back_bill=statement.back_bill_amount,
            flagged=len(flagged_items)
        )

        return UnifiedAnalysisResult(
            category=BillCategory.UTILITY,
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
        return "No billing errors detected."

    labels = {
        BACK_BILL: "potential back-billing violations",
        EST_OVER: "estimated meter overcharges",
        RATE_HIKE: "an unexplained rate increase",
    }
    issues = [labels[item.code] for item in flagged_items]
    return f"Found {len(flagged_items)} issue(s) including {', '.join(issues)}."


_default_analyzer = UtilityAnalyzer()


def analyze_utility_bill(bill_text: str) -> UnifiedAnalysisResult:
    """Analyze a gas, heating or electric statement."""
    return _default_analyzer.analyze(bill_text)
