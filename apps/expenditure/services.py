"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic for the expenditure ledger: single and bulk
             recording with period/date validation, corrections, and
             grouping by period or year.
-------------------------------------------------------------------------
"""
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from django.db import transaction
from django.db.models import Sum

from apps.core.exceptions import (
    NotFoundException,
    PeriodMismatchException,
    ValidationException,
)
from apps.core.logging import LedgerLogger
from apps.core.periods import (
    Period, date_in_period, format_period_label, period_date_range, validate_period,
)
from apps.core.services import ZERO, optional_amount, to_amount
from apps.expenditure.models import ExpenditureEntry
from apps.projects.models import BudgetField, Project
from apps.projects.services import get_field, require_mapped

PeriodKey = Tuple[int, str, int]


def check_period_and_date(
    project: Project,
    year_index: int,
    period_type: str,
    period_number: int,
    expenditure_date: Optional[date]
) -> Period:
    """
    Validate a claimed period and that the date lies inside its window.

    Raises:
        ValidationException: Missing date or a period that does not exist
            for the project.
        PeriodMismatchException: Date outside the period's calendar window.
    """
    if expenditure_date is None:
        raise ValidationException(
            "Expenditure date is required.",
            details={'expenditure_date': None}
        )
    period = validate_period(
        period_type, year_index, period_number,
        project.start_date, project.duration_years
    )
    if not date_in_period(expenditure_date, period_type, year_index, period_number, project.start_date):
        first, last = period_date_range(period_type, year_index, period_number, project.start_date)
        error = PeriodMismatchException(
            f"Expenditure date {expenditure_date.isoformat()} is outside "
            f"{format_period_label(period_type, year_index, period_number, project.start_date)}.",
            details={
                'expenditure_date': expenditure_date.isoformat(),
                'period_start': first.isoformat(),
                'period_end': last.isoformat(),
                **period.as_dict(),
            }
        )
        LedgerLogger.log_rejected('record_expenditure', error, {'project_id': project.pk})
        raise error
    return period


def _positive_amount(value: Any) -> Decimal:
    amount = to_amount(value)
    if amount <= ZERO:
        raise ValidationException(
            "Expenditure amount must be greater than zero.",
            details={'amount': str(value)}
        )
    return amount


@transaction.atomic
def record_expenditure(
    project: Project,
    field: BudgetField,
    year_index: int,
    period_type: str,
    period_number: int,
    amount: Any,
    expenditure_date: date,
    remarks: str = '',
    user=None
) -> ExpenditureEntry:
    """
    Record one expenditure row.

    Entries for the same field and period accumulate; nothing is replaced.

    Raises:
        ValidationException: Bad amount, missing date or invalid period.
        ConstraintViolationException: Field not mapped to the project.
        PeriodMismatchException: Date outside the claimed period.
    """
    amount = _positive_amount(amount)
    check_period_and_date(project, year_index, period_type, period_number, expenditure_date)
    require_mapped(project, field)

    entry = ExpenditureEntry(
        project=project,
        field=field,
        year_index=year_index,
        period_type=period_type,
        period_number=period_number,
        amount=amount,
        expenditure_date=expenditure_date,
        remarks=remarks or '',
    )
    entry.save_with_user(user)

    LedgerLogger.log_expenditure_recorded(project, [entry], user)
    return entry


@transaction.atomic
def submit_bulk(
    project: Project,
    year_index: int,
    period_type: str,
    period_number: int,
    expenditure_date: date,
    rows: Iterable[Dict[str, Any]],
    user=None
) -> List[ExpenditureEntry]:
    """
    Record one period's expenditure across several fields at once.

    Rows are {'field_id', 'amount', optional 'remarks'}; blank and zero
    amounts are skipped. Mapping is checked against the current mapping
    set at submission time. All rows are saved or none are.

    Raises:
        ValidationException: No row carries an amount, or a row is invalid.
        ConstraintViolationException: A field with an amount is not mapped.
        PeriodMismatchException: Date outside the claimed period.
    """
    check_period_and_date(project, year_index, period_type, period_number, expenditure_date)

    pending = []
    for index, row in enumerate(rows):
        try:
            amount = optional_amount(row.get('amount'))
        except ValidationException as e:
            e.details['row'] = index
            raise
        if amount is None:
            continue
        field = get_field(row.get('field_id'))
        require_mapped(project, field)
        pending.append(ExpenditureEntry(
            project=project,
            field=field,
            year_index=year_index,
            period_type=period_type,
            period_number=period_number,
            amount=amount,
            expenditure_date=expenditure_date,
            remarks=row.get('remarks') or '',
        ))

    if not pending:
        raise ValidationException(
            "Enter an amount for at least one budget field.",
            details={'rows': 0}
        )

    for entry in pending:
        entry.save_with_user(user)

    LedgerLogger.log_expenditure_recorded(project, pending, user)
    return pending


def get_entry(project: Project, entry_id: int) -> ExpenditureEntry:
    try:
        return ExpenditureEntry.objects.select_related('field', 'project').get(
            project=project, pk=entry_id
        )
    except ExpenditureEntry.DoesNotExist:
        raise NotFoundException(
            f"Expenditure entry {entry_id} does not exist for this project.",
            details={'project_id': project.pk, 'entry_id': entry_id}
        )


@transaction.atomic
def update_expenditure(entry: ExpenditureEntry, changes: Dict[str, Any], user=None) -> ExpenditureEntry:
    """
    Correct an expenditure row, re-running the same checks as recording.

    Args:
        entry: The row to change.
        changes: Any of field, year_index, period_type, period_number,
            amount, expenditure_date, remarks.
    """
    project = entry.project
    field = changes.get('field', entry.field)
    year_index = changes.get('year_index', entry.year_index)
    period_type = changes.get('period_type', entry.period_type)
    period_number = changes.get('period_number', entry.period_number)
    expenditure_date = changes.get('expenditure_date', entry.expenditure_date)
    amount = _positive_amount(changes.get('amount', entry.amount))

    check_period_and_date(project, year_index, period_type, period_number, expenditure_date)
    require_mapped(project, field)

    entry.field = field
    entry.year_index = year_index
    entry.period_type = period_type
    entry.period_number = period_number
    entry.amount = amount
    entry.expenditure_date = expenditure_date
    if 'remarks' in changes:
        entry.remarks = changes['remarks'] or ''
    entry.save_with_user(user)

    LedgerLogger.log_expenditure_recorded(project, [entry], user)
    return entry


@transaction.atomic
def delete_expenditure(project: Project, entry_id: int, user=None) -> None:
    """
    Delete an expenditure row.

    Raises:
        NotFoundException: If the id does not belong to the project.
    """
    entry = get_entry(project, entry_id)
    LedgerLogger.log_expenditure_deleted(entry, user)
    entry.delete()


def get_entries(project: Project) -> List[ExpenditureEntry]:
    return list(
        ExpenditureEntry.objects
        .filter(project=project)
        .select_related('field', 'project')
        .order_by('year_index', 'period_type', 'period_number', 'field__name', 'id')
    )


def total_for_field(project: Project, field: BudgetField) -> Decimal:
    total = ExpenditureEntry.objects.filter(project=project, field=field).aggregate(
        total=Sum('amount')
    )['total']
    return total or ZERO


def group_by_period(entries: Iterable[ExpenditureEntry]) -> List[Dict[str, Any]]:
    """
    Group entries by (year_index, period_type, period_number).

    Groups are ordered by year index, then period type, then period
    number; this is the canonical column order of period-wise reports.
    """
    groups: Dict[PeriodKey, List[ExpenditureEntry]] = defaultdict(list)
    for entry in entries:
        groups[(entry.year_index, entry.period_type, entry.period_number)].append(entry)

    return [
        {
            'year_index': key[0],
            'period_type': key[1],
            'period_number': key[2],
            'entries': groups[key],
        }
        for key in sorted(groups)
    ]


def group_by_year(entries: Iterable[ExpenditureEntry]) -> List[Dict[str, Any]]:
    """Group entries by year index, ascending."""
    groups: Dict[int, List[ExpenditureEntry]] = defaultdict(list)
    for entry in entries:
        groups[entry.year_index].append(entry)
    return [{'year_index': year, 'entries': groups[year]} for year in sorted(groups)]
