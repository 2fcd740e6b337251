"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic for the grant ledger. A receipt event may
             be split across several budget fields; entries are only
             ever appended.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal
from itertools import groupby
from typing import Any, Dict, Iterable, List

from django.db import transaction
from django.db.models import Sum

from apps.core.exceptions import ValidationException
from apps.core.logging import LedgerLogger
from apps.core.services import ZERO, optional_amount
from apps.grants.models import GrantEntry
from apps.projects.models import BudgetField, Project
from apps.projects.services import get_field, require_mapped


@transaction.atomic
def record_receipt(
    project: Project,
    received_date: date,
    allocations: Iterable[Dict[str, Any]],
    remarks: str = '',
    user=None
) -> List[GrantEntry]:
    """
    Record one grant receipt split over budget fields.

    Zero or blank allocations are skipped. A negative allocation, or a
    receipt that allocates nothing, is rejected before anything is saved.

    Args:
        project: Receiving project.
        received_date: Date the instalment arrived.
        allocations: Rows of {'field_id', 'amount', optional 'remarks'}.
        remarks: Remarks applied to rows without their own.
        user: Acting user.

    Returns:
        The created entries, in submission order.

    Raises:
        ValidationException: Missing date, negative amount, or nothing allocated.
        ConstraintViolationException: An allocated field is not mapped.
    """
    if received_date is None:
        raise ValidationException("Received date is required.", details={'received_date': None})

    rows = []
    for index, allocation in enumerate(allocations):
        try:
            amount = optional_amount(allocation.get('amount'))
        except ValidationException as e:
            e.details['row'] = index
            raise
        if amount is None:
            continue
        field = get_field(allocation.get('field_id'))
        require_mapped(project, field)
        rows.append((field, amount, allocation.get('remarks') or remarks or ''))

    if not rows:
        raise ValidationException(
            "A grant receipt must allocate a non-zero amount to at least one field.",
            details={'received_date': received_date.isoformat()}
        )

    entries = []
    for field, amount, row_remarks in rows:
        entry = GrantEntry(
            project=project,
            field=field,
            received_date=received_date,
            amount=amount,
            remarks=row_remarks,
        )
        entry.save_with_user(user)
        entries.append(entry)

    LedgerLogger.log_receipt_recorded(project, received_date, entries, user)
    return entries


def get_entries(project: Project) -> List[GrantEntry]:
    """Grant rows, newest receipt first."""
    return list(
        GrantEntry.objects
        .filter(project=project)
        .select_related('field')
        .order_by('-received_date', 'field__name', 'id')
    )


def receipts(project: Project) -> List[Dict[str, Any]]:
    """
    Receipt history: entries grouped into receipt events by received date.

    Returns:
        [{'received_date', 'total', 'entries': [...]}, ...] newest first.
    """
    history = []
    for received_date, group in groupby(get_entries(project), key=lambda e: e.received_date):
        entries = list(group)
        history.append({
            'received_date': received_date,
            'total': sum((e.amount for e in entries), ZERO),
            'entries': entries,
        })
    return history


def total_received_for_field(project: Project, field: BudgetField) -> Decimal:
    total = GrantEntry.objects.filter(project=project, field=field).aggregate(
        total=Sum('amount')
    )['total']
    return total or ZERO


def total_received(project: Project) -> Decimal:
    total = GrantEntry.objects.filter(project=project).aggregate(total=Sum('amount'))['total']
    return total or ZERO
