"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic services for the budget ledger.
             Budget rows are upserted per (project, field, year) and a
             project's whole year table can be replaced atomically.
-------------------------------------------------------------------------
"""
from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction
from django.db.models import Sum

from apps.budgeting.models import BudgetEntry
from apps.core.exceptions import ValidationException
from apps.core.logging import LedgerLogger
from apps.core.services import ZERO, to_amount
from apps.projects.models import BudgetField, Project
from apps.projects.services import get_field, mapped_field_ids, require_mapped


def validate_year_number(project: Project, year_number: Any) -> int:
    """
    Check that a project year lies in [1, ceil(duration_years)].

    Raises:
        ValidationException: If the year is not an integer in range.
    """
    if isinstance(year_number, bool) or not isinstance(year_number, int):
        raise ValidationException(
            "Year number must be an integer.",
            details={'year_number': year_number}
        )
    if not 1 <= year_number <= project.max_year_number:
        raise ValidationException(
            f"Year number must be between 1 and {project.max_year_number}.",
            details={'year_number': year_number, 'max_year_number': project.max_year_number}
        )
    return year_number


@transaction.atomic
def set_budget(
    project: Project,
    field: BudgetField,
    year_number: int,
    amount: Any,
    user=None
) -> BudgetEntry:
    """
    Upsert the budget for (project, field, year_number).

    Saving again replaces the stored amount, so repeating the call is safe.

    Raises:
        ValidationException: Negative amount or year out of range.
        ConstraintViolationException: Field not mapped to the project.
    """
    amount = to_amount(amount)
    validate_year_number(project, year_number)
    require_mapped(project, field)

    entry = BudgetEntry.objects.select_for_update().filter(
        project=project, field=field, year_number=year_number
    ).first()
    if entry is None:
        entry = BudgetEntry(project=project, field=field, year_number=year_number)
    entry.amount = amount
    entry.save_with_user(user)

    LedgerLogger.log_budget_set(entry, user)
    return entry


def _clean_bulk_entries(project: Project, entries: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Validate every submitted row before anything is written."""
    mapped = set(mapped_field_ids(project))
    seen = set()
    cleaned = []

    for index, raw in enumerate(entries):
        field_id = raw.get('field_id')
        year_number = raw.get('year_number')
        try:
            amount = to_amount(raw.get('amount'))
            validate_year_number(project, year_number)
        except ValidationException as e:
            e.details['row'] = index
            raise
        if field_id not in mapped:
            field = get_field(field_id)
            require_mapped(project, field)

        key = (field_id, year_number)
        if key in seen:
            raise ValidationException(
                "Duplicate budget entry for the same field and year.",
                details={'row': index, 'field_id': field_id, 'year_number': year_number}
            )
        seen.add(key)
        cleaned.append({'field_id': field_id, 'year_number': year_number, 'amount': amount})

    return cleaned


@transaction.atomic
def bulk_replace(project: Project, entries: Iterable[Dict[str, Any]], user=None) -> List[BudgetEntry]:
    """
    Replace the project's whole budget table with the given entries.

    Every row is validated first; the delete and inserts then run in one
    transaction, so a failure leaves the previous table intact.

    Args:
        project: Target project.
        entries: Rows of {'field_id', 'year_number', 'amount'}.
        user: Acting user.

    Returns:
        The newly created entries.
    """
    cleaned = _clean_bulk_entries(project, entries)

    removed = 0
    for existing in BudgetEntry.objects.select_for_update().filter(project=project):
        existing.delete()
        removed += 1

    created = []
    for row in cleaned:
        entry = BudgetEntry(project=project, **row)
        entry.save_with_user(user)
        created.append(entry)

    LedgerLogger.log_budget_replaced(project, removed, len(created), user)
    return created


def get_entries(project: Project) -> List[BudgetEntry]:
    """Budget rows ordered by year then field name."""
    return list(
        BudgetEntry.objects
        .filter(project=project)
        .select_related('field')
        .order_by('year_number', 'field__name')
    )


def total_for_field(project: Project, field: BudgetField) -> Decimal:
    total = BudgetEntry.objects.filter(project=project, field=field).aggregate(
        total=Sum('amount')
    )['total']
    return total or ZERO


def total_for_year(project: Project, year_number: int) -> Decimal:
    total = BudgetEntry.objects.filter(project=project, year_number=year_number).aggregate(
        total=Sum('amount')
    )['total']
    return total or ZERO


def year_table(project: Project, entries: Optional[Iterable[BudgetEntry]] = None) -> Dict[int, Dict[int, Decimal]]:
    """
    Budget grid for the "all years at once" screen.

    Returns:
        {field_id: {year_number: amount}}
    """
    if entries is None:
        entries = BudgetEntry.objects.filter(project=project)
    table: Dict[int, Dict[int, Decimal]] = defaultdict(dict)
    for entry in entries:
        table[entry.field_id][entry.year_number] = entry.amount
    return dict(table)
