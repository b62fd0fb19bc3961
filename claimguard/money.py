"""
Money parsing and rounding helpers shared by the analyzers.
"""

import math
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

# "$1,234.56", "$85", "$1.45/th" -> the dollar token only
DOLLAR_AMOUNT_RE = re.compile(r'\$[\d,]+\.?\d*')

# Leading numeric prefix, mirroring how statement exports are usually read
_LEADING_NUMBER_RE = re.compile(r'[+-]?(?:\d+(?:\.\d*)?|\.\d+)')


def round_cents(value: float) -> float:
    """Round half-up to two decimal places."""
    return float(Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def round_whole(value: float) -> int:
    """Round half-up to the nearest integer."""
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def round_tenths(value: float) -> float:
    """Round half-up to one decimal place."""
    return float(Decimal(str(value)).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP))


def parse_amount(token: Optional[str]) -> Optional[float]:
    """Parse a money token such as ``$1,234.50``.

    Currency symbols, quotes and thousands separators are dropped and the
    leading number is read. Returns None when nothing numeric remains or the
    value is not finite, so callers can skip the line instead of poisoning a
    running total.
    """
    if not token:
        return None

    cleaned = re.sub(r'[$",]', '', token).strip()
    match = _LEADING_NUMBER_RE.match(cleaned)
    if not match:
        return None

    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def dollar_tokens(line: str) -> List[str]:
    """All ``$``-prefixed amount tokens on a line, in order."""
    return DOLLAR_AMOUNT_RE.findall(line)


def first_dollar_amount(line: str) -> Optional[float]:
    """Value of the first ``$`` amount on a line, or None."""
    match = DOLLAR_AMOUNT_RE.search(line)
    if not match:
        return None
    return parse_amount(match.group(0))
