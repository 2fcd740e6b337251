"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Shared validation helpers used by the budget, grant and
             expenditure ledgers.
-------------------------------------------------------------------------
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

from apps.core.exceptions import ValidationException

ZERO = Decimal('0.00')
CENT = Decimal('0.01')
MAX_AMOUNT = Decimal('9999999999999.99')


def to_amount(value: Any, label: str = 'amount') -> Decimal:
    """
    Coerce a submitted value into a non-negative 2-place Decimal.

    Args:
        value: Decimal, int, or numeric string. Floats are converted
            through their string form.
        label: Name used in the error details.

    Raises:
        ValidationException: If the value is missing, not numeric,
            negative, or too large.
    """
    if value is None or value == '':
        raise ValidationException(f"{label} is required.", details={label: value})
    if isinstance(value, bool):
        raise ValidationException(f"{label} must be a number.", details={label: value})
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationException(f"{label} must be a number.", details={label: str(value)})
    if not amount.is_finite():
        raise ValidationException(f"{label} must be a number.", details={label: str(value)})
    if amount < 0:
        raise ValidationException(
            f"{label} cannot be negative.",
            details={label: str(value)}
        )
    if amount > MAX_AMOUNT:
        raise ValidationException(
            f"{label} exceeds the maximum allowed value.",
            details={label: str(value)}
        )
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def optional_amount(value: Any, label: str = 'amount') -> Optional[Decimal]:
    """
    Like to_amount, but blank and zero values come back as None.

    Bulk submissions use this to drop empty rows instead of storing zeros.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    amount = to_amount(value, label)
    return amount if amount > ZERO else None
