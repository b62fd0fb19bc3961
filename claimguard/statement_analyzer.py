"""
Recurring Charge Analyzer for ClaimGuard

Parses bank and credit card CSV exports, groups transactions by normalized
merchant name, and flags recurring charges whose latest amount rose more than
10% over the previous one.
"""

import csv
import re
from datetime import datetime
from typing import Dict, List, Optional

import structlog

from .money import parse_amount, round_cents, round_tenths
from .schemas import ChargeOccurrence, RecurringCharge, StatementAnalysis, StatementRow

logger = structlog.get_logger(__name__)

# Flag month-over-month increases above 10%
PRICE_INCREASE_THRESHOLD_PCT = 10
MIN_OCCURRENCES = 2

DATE_COLUMN_RE = re.compile(r'date', re.IGNORECASE)
DESCRIPTION_COLUMN_RE = re.compile(r'desc|merchant|name|memo|payee', re.IGNORECASE)
AMOUNT_COLUMN_RE = re.compile(r'amount|debit|charge|total', re.IGNORECASE)
CATEGORY_COLUMN_RE = re.compile(r'category|type', re.IGNORECASE)

DATE_FORMATS = (
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%m-%d-%Y",
    "%d %b %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
)


def _find_column(columns: List[str], pattern: re.Pattern) -> int:
    for index, column in enumerate(columns):
        if pattern.search(column):
            return index
    return -1


def _clean(value: str) -> str:
    return value.replace('"', '').strip()


def _split_line(line: str) -> List[str]:
    # One reader per line so an unbalanced quote cannot swallow later rows
    return next(csv.reader([line]), [])


def parse_csv(raw: str) -> List[StatementRow]:
    """Parse a statement export with heuristic column detection.

    Returns an empty list when the header has no date or amount column.
    Rows with a missing, unparseable or zero amount are skipped.
    """
    lines = raw.strip().splitlines()
    if len(lines) < 2:
        return []

    columns = [_clean(c).lower() for c in _split_line(lines[0])]

    date_idx = _find_column(columns, DATE_COLUMN_RE)
    desc_idx = _find_column(columns, DESCRIPTION_COLUMN_RE)
    amount_idx = _find_column(columns, AMOUNT_COLUMN_RE)
    category_idx = _find_column(columns, CATEGORY_COLUMN_RE)

    if date_idx == -1 or amount_idx == -1:
        logger.debug("Statement header missing date or amount column", columns=columns)
        return []

    rows = []
    for line in lines[1:]:
        parts = _split_line(line)
        if len(parts) <= max(date_idx, amount_idx):
            continue

        amount = parse_amount(parts[amount_idx])
        if amount is None or amount == 0:
            continue

        # Without a description column the second field is usually the payee
        desc_field = desc_idx if desc_idx >= 0 else 1
        description = _clean(parts[desc_field]) if desc_field < len(parts) else ""

        category = None
        if 0 <= category_idx < len(parts):
            category = _clean(parts[category_idx])

        rows.append(StatementRow(
            date=_clean(parts[date_idx]),
            description=description or "Unknown",
            amount=abs(amount),
            category=category,
        ))

    return rows


def normalize_name(description: str) -> str:
    """Reduce a merchant description to a grouping key.

    Strips trailing reference numbers, payment-processor words and legal
    entity suffixes.
    """
    name = description.lower()
    name = re.sub(r'[#*\d]+$', '', name)
    name = re.sub(r'\b(pos|ach|debit|credit|payment|autopay|recurring)\b', ' ', name)
    name = re.sub(r'\b(llc|inc|corp|ltd)\b\.?', ' ', name)
    name = re.sub(r'\s+', ' ', name)
    return name.strip()


def parse_date(value: str) -> Optional[datetime]:
    """Parse a statement date in any of the common export formats."""
    value = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def _date_sort_key(row: StatementRow) -> datetime:
    # Unparseable dates sort first; sorted() keeps their original order
    return parse_date(row.date) or datetime.min


def detect_recurring(rows: List[StatementRow]) -> List[RecurringCharge]:
    """Group rows by merchant and evaluate month-over-month changes."""
    groups: Dict[str, List[StatementRow]] = {}
    for row in rows:
        key = normalize_name(row.description)
        if not key:
            continue
        groups.setdefault(key, []).append(row)

    recurring = []
    for key, entries in groups.items():
        if len(entries) < MIN_OCCURRENCES:
            continue

        entries = sorted(entries, key=_date_sort_key)
        amounts = [e.amount for e in entries]
        average = sum(amounts) / len(amounts)
        latest = amounts[-1]
        previous = amounts[-2]

        change = (latest - previous) * 100 / previous if previous > 0 else None
        flagged = change is not None and change > PRICE_INCREASE_THRESHOLD_PCT

        recurring.append(RecurringCharge(
            description=entries[-1].description,
            normalized_name=key,
            occurrences=[ChargeOccurrence(date=e.date, amount=e.amount) for e in entries],
            avg_amount=round_cents(average),
            latest_amount=latest,
            month_over_month_change=round_tenths(change) if change is not None else None,
            flagged=flagged,
        ))

    recurring.sort(key=lambda r: (not r.flagged, -r.latest_amount))
    return recurring


def analyze_statement(csv_text: str) -> StatementAnalysis:
    """Find recurring charges and price increases in a CSV statement.

    Args:
        csv_text: Raw CSV export

    Returns:
        StatementAnalysis; potential overcharges are the excess of each flagged
        charge's latest amount over its average
    """
    rows = parse_csv(csv_text)
    recurring = detect_recurring(rows)
    flagged = [r for r in recurring if r.flagged]

    potential_overcharges = sum(max(0.0, r.latest_amount - r.avg_amount) for r in flagged)

    logger.info(
        "Statement analysis complete",
        transactions=len(rows),
        recurring=len(recurring),
        flagged=len(flagged)
    )

    return StatementAnalysis(
        total_transactions=len(rows),
        total_spent=round_cents(sum(r.amount for r in rows)),
        recurring=recurring,
        flagged_count=len(flagged),
        potential_overcharges=round_cents(potential_overcharges),
    )
