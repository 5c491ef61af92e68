"""Month-span arithmetic over "YYYY-MM" strings.

Nothing in here raises on bad input: malformed dates parse to ``None`` and
contribute zero months downstream.
"""

import math
import re
from datetime import date
from typing import Any, NamedTuple

YEAR_MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
ISO_DATE_RE = re.compile(r"^(\d{4})-(\d{2})(?:-(\d{2}))?$")

WEEKS_PER_MONTH = 4.345


class YearMonth(NamedTuple):
    year: int
    month: int

    def to_date(self) -> date:
        return date(self.year, self.month, 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def parse_year_month(value: Any) -> YearMonth | None:
    """Parse a strict ``YYYY-MM`` string; anything else is ``None``."""
    if not isinstance(value, str) or not YEAR_MONTH_RE.match(value):
        return None
    year, month = int(value[:4]), int(value[5:])
    if year == 0 or not 1 <= month <= 12:
        return None
    return YearMonth(year, month)


def parse_month_date(value: Any) -> date | None:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM`` to the first day of that month."""
    if not isinstance(value, str):
        return None
    match = ISO_DATE_RE.match(value.strip())
    if not match:
        return None
    ym = parse_year_month(f"{match.group(1)}-{match.group(2)}")
    return ym.to_date() if ym else None


def year_month_of(d: date) -> YearMonth:
    return YearMonth(d.year, d.month)


def shift_months(d: date, months: int) -> date:
    """First day of the month ``months`` away from ``d`` (negative goes back)."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def month_diff(start: date, end: date) -> int:
    return (end.year - start.year) * 12 + (end.month - start.month)


def months_between(
    start_ym: Any,
    end_ym: Any = None,
    is_current: bool = False,
    now: date | None = None,
) -> int:
    """Whole months from ``start_ym`` to ``end_ym`` (or to ``now``).

    An open range (``is_current`` or no parseable end) runs to the current
    month. A missing or malformed start yields 0; the result is never negative.
    """
    start = parse_year_month(start_ym)
    if start is None:
        return 0
    end = None if is_current else parse_year_month(end_ym)
    end_date = end.to_date() if end else (now or date.today())
    return max(0, month_diff(start.to_date(), end_date))


def number_from_unknown(value: Any) -> float | None:
    """Coerce a number or numeric string; ``None`` for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None
