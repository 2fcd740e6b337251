"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Period calculator. Maps calendar dates to reporting periods
             (April-start Financial Year quarters or Project Quarters
             counted from a project's start date) and back to labels
             and calendar windows.
-------------------------------------------------------------------------
"""
import math
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterator, Optional, Tuple, Union

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.exceptions import ValidationException


MONTH_ABBR = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)
QUARTERS_PER_YEAR = 4
MONTHS_PER_QUARTER = 3
# A window may run into the following calendar year.
MAX_YEAR_INDEX = date.max.year - 1

Duration = Union[int, Decimal, None]


class PeriodType(models.TextChoices):
    """
    Reporting period types.
    """
    FY = 'FY', _('Financial Year Quarter')
    PQ = 'PQ', _('Project Quarter')


@dataclass(frozen=True, order=True)
class Period:
    """
    A reporting period identifier.

    Field order defines the canonical column order of period-wise
    reports: year index, then period type, then period number.
    """
    year_index: int
    period_type: str
    period_number: int

    def as_dict(self) -> dict:
        return {
            'year_index': self.year_index,
            'period_type': self.period_type,
            'period_number': self.period_number,
        }


def fy_start_month() -> int:
    """Calendar month (1-12) in which the financial year starts."""
    return getattr(settings, 'FINANCIAL_YEAR_START_MONTH', 4)


def months_between(start: date, current: date) -> int:
    """Whole calendar months from start's month to current's month."""
    return (current.year - start.year) * 12 + (current.month - start.month)


def add_months(value: date, months: int) -> date:
    """First day of the month `months` after value's month."""
    year_offset, month_index = divmod(value.month - 1 + months, 12)
    return date(value.year + year_offset, month_index + 1, 1)


def end_of_month(value: date) -> date:
    return value.replace(day=monthrange(value.year, value.month)[1])


def max_project_quarters(duration_years: Duration) -> Optional[int]:
    """Number of project quarters in a project of the given duration."""
    if duration_years is None:
        return None
    return math.ceil(Decimal(str(duration_years)) * 12 / MONTHS_PER_QUARTER)


def pq_year_index(start_date: date, period_number: int) -> int:
    """Calendar year index implied by a project quarter number."""
    return start_date.year + ((period_number - 1) * MONTHS_PER_QUARTER) // 12


def fiscal_year_label(year_index: int) -> str:
    """Short financial year label, e.g. 2024 -> '2024-25'."""
    return f"{year_index}-{str(year_index + 1)[-2:]}"


def derive_current_period(
    period_type: str,
    start_date: date,
    today: date,
    duration_years: Duration = None
) -> Period:
    """
    Derive the reporting period containing `today`.

    Dates before the project start are clamped to the start date, so the
    result is never a period before the project existed.

    Args:
        period_type: 'FY' or 'PQ'.
        start_date: Project start date.
        today: The date to locate (injected, never read from the clock here).
        duration_years: Project duration; bounds the project quarter number.

    Returns:
        Period with a year index and a period number >= 1.

    Raises:
        ValidationException: If the period type is unknown.
    """
    if today < start_date:
        today = start_date

    if period_type == PeriodType.FY:
        start_month = fy_start_month()
        year_index = today.year if today.month >= start_month else today.year - 1
        quarter = ((today.month - start_month) % 12) // MONTHS_PER_QUARTER + 1
        return Period(year_index, PeriodType.FY.value, quarter)

    if period_type == PeriodType.PQ:
        elapsed = months_between(start_date, today)
        number = elapsed // MONTHS_PER_QUARTER + 1
        bound = max_project_quarters(duration_years)
        if bound is not None:
            number = min(number, bound)
        return Period(pq_year_index(start_date, number), PeriodType.PQ.value, number)

    raise ValidationException(
        f"Unknown period type '{period_type}'.",
        details={'period_type': period_type}
    )


def _window_months(
    period_type: str,
    year_index: int,
    period_number: int,
    start_date: date
) -> Tuple[date, date]:
    """First day of the window's first month and last day of its last month."""
    if period_type == PeriodType.FY:
        year_start = date(year_index, fy_start_month(), 1)
        first = add_months(year_start, MONTHS_PER_QUARTER * (period_number - 1))
    elif period_type == PeriodType.PQ:
        first = add_months(start_date.replace(day=1), MONTHS_PER_QUARTER * (period_number - 1))
    else:
        raise ValidationException(
            f"Unknown period type '{period_type}'.",
            details={'period_type': period_type}
        )
    last = end_of_month(add_months(first, MONTHS_PER_QUARTER - 1))
    return first, last


def period_date_range(
    period_type: str,
    year_index: int,
    period_number: int,
    start_date: date
) -> Tuple[date, date]:
    """
    Inclusive calendar window of a period, clipped to the project start.

    Args:
        period_type: 'FY' or 'PQ'.
        year_index: Financial year start (FY) or calendar year index (PQ).
        period_number: Quarter number (1-based).
        start_date: Project start date.

    Returns:
        Tuple of (first_day, last_day).
    """
    first, last = _window_months(period_type, year_index, period_number, start_date)
    return max(first, start_date), last


def format_period_label(
    period_type: str,
    year_index: int,
    period_number: int,
    start_date: date
) -> str:
    """
    Human readable period label.

    FY: "FY 2024-25 Q2 (Jul-Sep)"
    PQ: "PQ 6 (Jul 2024–Sep 2024)"
    """
    first, last = _window_months(period_type, year_index, period_number, start_date)
    first_month = MONTH_ABBR[first.month - 1]
    last_month = MONTH_ABBR[last.month - 1]
    if period_type == PeriodType.FY:
        return (
            f"FY {fiscal_year_label(year_index)} Q{period_number} "
            f"({first_month}-{last_month})"
        )
    return f"PQ {period_number} ({first_month} {first.year}–{last_month} {last.year})"


def validate_period(
    period_type: str,
    year_index: int,
    period_number: int,
    start_date: date,
    duration_years: Duration = None
) -> Period:
    """
    Check that a (year index, period type, period number) triple exists
    for a project.

    Raises:
        ValidationException: On unknown type, a year index outside
            1..MAX_YEAR_INDEX, non-positive or out of range period numbers,
            inconsistent PQ year index, or an FY quarter that ends before
            the project starts.
    """
    if period_type not in PeriodType.values:
        raise ValidationException(
            f"Unknown period type '{period_type}'.",
            details={'period_type': period_type}
        )
    if year_index is None or not 1 <= year_index <= MAX_YEAR_INDEX:
        raise ValidationException(
            f"Year index must be between 1 and {MAX_YEAR_INDEX}.",
            details={'year_index': year_index}
        )
    if period_number is None or period_number < 1:
        raise ValidationException(
            "Period number must be 1 or greater.",
            details={'period_number': period_number}
        )

    if period_type == PeriodType.FY:
        if period_number > QUARTERS_PER_YEAR:
            raise ValidationException(
                "Financial year quarter must be between 1 and 4.",
                details={'period_number': period_number}
            )
        _, last = _window_months(period_type, year_index, period_number, start_date)
        if last < start_date:
            raise ValidationException(
                "Period ends before the project start date.",
                details={
                    'year_index': year_index,
                    'period_number': period_number,
                    'start_date': start_date.isoformat(),
                }
            )
    else:
        bound = max_project_quarters(duration_years)
        if bound is not None and period_number > bound:
            raise ValidationException(
                f"Project quarter must be between 1 and {bound}.",
                details={'period_number': period_number, 'max_period_number': bound}
            )
        expected_year = pq_year_index(start_date, period_number)
        if year_index != expected_year:
            raise ValidationException(
                f"Project quarter {period_number} belongs to year {expected_year}.",
                details={'year_index': year_index, 'expected_year_index': expected_year}
            )

    return Period(year_index, str(period_type), period_number)


def date_in_period(
    value: date,
    period_type: str,
    year_index: int,
    period_number: int,
    start_date: date
) -> bool:
    first, last = period_date_range(period_type, year_index, period_number, start_date)
    return first <= value <= last


def project_year_for_date(start_date: date, value: date) -> int:
    """1-based project year containing value (whole-month arithmetic)."""
    if value < start_date:
        return 1
    return months_between(start_date, value) // 12 + 1


def iter_periods(
    period_type: str,
    start_date: date,
    until: date,
    duration_years: Duration = None
) -> Iterator[Period]:
    """
    Yield every period from the project start through the period
    containing `until`, in canonical order.
    """
    cursor = start_date
    previous = None
    while cursor <= until:
        period = derive_current_period(period_type, start_date, cursor, duration_years)
        if period == previous:
            break
        yield period
        previous = period
        _, last = period_date_range(
            period.period_type, period.year_index, period.period_number, start_date
        )
        cursor = last + timedelta(days=1)
