"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Business logic for the project lifecycle and the Field
             Registry (budget fields and their per-project mappings).
-------------------------------------------------------------------------
"""
import logging
import math
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.db import IntegrityError, transaction

from apps.core.exceptions import (
    ConstraintViolationException,
    NotFoundException,
    ValidationException,
)
from apps.core.logging import LedgerLogger
from apps.projects.models import BudgetField, Project, ProjectFieldMapping

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def get_project(project_id: int) -> Project:
    try:
        return Project.objects.get(pk=project_id)
    except Project.DoesNotExist:
        raise NotFoundException(
            f"Project {project_id} does not exist.",
            details={'project_id': project_id}
        )


def get_field(field_id: int) -> BudgetField:
    try:
        return BudgetField.objects.get(pk=field_id)
    except (BudgetField.DoesNotExist, ValueError, TypeError):
        raise NotFoundException(
            f"Budget field {field_id} does not exist.",
            details={'field_id': field_id}
        )


def has_ledger_history(project: Optional[Project], field: BudgetField) -> bool:
    """
    Check whether any budget, grant or expenditure row references the field.

    Args:
        project: Restrict the check to one project, or None for all projects.
        field: The budget field.
    """
    lookups = {'field': field}
    if project is not None:
        lookups['project'] = project
    return (
        field.budget_entries.filter(**lookups).exists()
        or field.grant_entries.filter(**lookups).exists()
        or field.expenditure_entries.filter(**lookups).exists()
    )


# ---------------------------------------------------------------------------
# Project lifecycle
# ---------------------------------------------------------------------------

@transaction.atomic
def create_project(data: Dict[str, Any], user=None) -> Project:
    """
    Create a project and map every default budget field to it.

    Args:
        data: Cleaned project attributes.
        user: The finance user creating the project.

    Returns:
        The saved Project.
    """
    project = Project(**data)
    project.save_with_user(user)

    defaults = list(BudgetField.objects.filter(is_default=True))
    for field in defaults:
        ProjectFieldMapping.objects.create(project=project, field=field, is_custom=False)

    LedgerLogger.log_mapping_changed(project, [f.pk for f in defaults], [], user)
    logger.info(f"Project created: {project.name} (#{project.pk})")
    return project


@transaction.atomic
def update_project(project: Project, data: Dict[str, Any], user=None) -> Project:
    """
    Update a project's attributes.

    Raises:
        ValidationException: If the start date would change.
        ConstraintViolationException: If the new duration drops a year
            that already has budget entries.
    """
    new_start = data.get('start_date', project.start_date)
    if new_start != project.start_date:
        raise ValidationException(
            "The project start date cannot be changed once the project exists.",
            details={
                'start_date': project.start_date.isoformat(),
                'requested_start_date': new_start.isoformat(),
            }
        )

    new_duration = data.get('duration_years', project.duration_years)
    if new_duration != project.duration_years:
        max_year = math.ceil(Decimal(str(new_duration)))
        stranded = (
            project.budget_entries
            .filter(year_number__gt=max_year)
            .values_list('year_number', flat=True)
            .distinct()
        )
        if stranded:
            raise ConstraintViolationException(
                "Budget entries exist beyond the new project duration.",
                details={'max_year_number': max_year, 'years': sorted(set(stranded))}
            )

    for attr, value in data.items():
        setattr(project, attr, value)
    project.save_with_user(user)
    return project


@transaction.atomic
def delete_project(project: Project, user=None) -> Dict[str, int]:
    """
    Delete a project with its mappings and ledger rows.

    Returns:
        Rows removed per model label.
    """
    name = project.name
    _, counts = project.delete()
    LedgerLogger.log_project_deleted(name, counts, user)
    return counts


# ---------------------------------------------------------------------------
# Field Registry
# ---------------------------------------------------------------------------

def is_mapped(project: Project, field: BudgetField) -> bool:
    return ProjectFieldMapping.objects.filter(project=project, field=field).exists()


def require_mapped(project: Project, field: BudgetField) -> None:
    """
    Guard used by every ledger write.

    Raises:
        ConstraintViolationException: If the field is not mapped to the project.
    """
    if not is_mapped(project, field):
        raise ConstraintViolationException(
            f"Budget field '{field.name}' is not mapped to project '{project.name}'.",
            details={'project_id': project.pk, 'field_id': field.pk}
        )


def list_project_fields(project: Project) -> List[ProjectFieldMapping]:
    """Mapped fields, default fields first then by name."""
    return list(
        ProjectFieldMapping.objects
        .filter(project=project)
        .select_related('field')
        .order_by('-field__is_default', 'field__name')
    )


def mapped_field_ids(project: Project) -> List[int]:
    return list(
        ProjectFieldMapping.objects
        .filter(project=project)
        .values_list('field_id', flat=True)
    )


@transaction.atomic
def map_field(
    project: Project,
    field: BudgetField,
    is_custom: Optional[bool] = None,
    user=None
) -> ProjectFieldMapping:
    """
    Map a field to a project. Re-mapping an existing pair is a no-op.

    Args:
        project: Target project.
        field: Field to map.
        is_custom: Defaults to True for non-default fields.
        user: Acting user, for the log line.
    """
    if is_custom is None:
        is_custom = not field.is_default

    mapping, created = ProjectFieldMapping.objects.get_or_create(
        project=project,
        field=field,
        defaults={'is_custom': is_custom}
    )
    if created:
        LedgerLogger.log_mapping_changed(project, [field.pk], [], user)
    return mapping


@transaction.atomic
def unmap_field(project: Project, field: BudgetField, user=None) -> None:
    """
    Remove a field mapping.

    Raises:
        NotFoundException: If the field is not mapped.
        ConstraintViolationException: If ledger rows reference the pair.
    """
    mapping = ProjectFieldMapping.objects.filter(project=project, field=field).first()
    if mapping is None:
        raise NotFoundException(
            f"Budget field '{field.name}' is not mapped to project '{project.name}'.",
            details={'project_id': project.pk, 'field_id': field.pk}
        )
    if has_ledger_history(project, field):
        error = ConstraintViolationException(
            f"Budget field '{field.name}' has ledger entries on this project "
            f"and cannot be unmapped.",
            details={'project_id': project.pk, 'field_id': field.pk}
        )
        LedgerLogger.log_rejected('unmap_field', error, error.details)
        raise error

    mapping.delete()
    LedgerLogger.log_mapping_changed(project, [], [field.pk], user)


@transaction.atomic
def replace_all_mappings(project: Project, field_ids: Iterable[int], user=None) -> Dict[str, List[int]]:
    """
    Make the project's mapping set equal to field_ids.

    Computes additions and removals against the current set; mappings for
    fields that stay are left untouched. Any removal blocked by ledger
    history aborts the whole change.

    Returns:
        {'added': [...], 'removed': [...]}
    """
    wanted = set(field_ids)
    fields = {f.pk: f for f in BudgetField.objects.filter(pk__in=wanted)}
    missing = wanted - set(fields)
    if missing:
        raise NotFoundException(
            "One or more budget fields do not exist.",
            details={'field_ids': sorted(missing)}
        )

    current = {
        m.field_id: m
        for m in ProjectFieldMapping.objects.filter(project=project).select_related('field')
    }
    to_add = sorted(wanted - set(current))
    to_remove = sorted(set(current) - wanted)

    blocked = [fid for fid in to_remove if has_ledger_history(project, current[fid].field)]
    if blocked:
        raise ConstraintViolationException(
            "Some fields have ledger entries and cannot be unmapped.",
            details={'project_id': project.pk, 'field_ids': blocked}
        )

    for fid in to_remove:
        current[fid].delete()
    for fid in to_add:
        field = fields[fid]
        ProjectFieldMapping.objects.create(
            project=project, field=field, is_custom=not field.is_default
        )

    LedgerLogger.log_mapping_changed(project, to_add, to_remove, user)
    return {'added': to_add, 'removed': to_remove}


@transaction.atomic
def create_field(name: str, is_default: bool = False) -> BudgetField:
    """
    Create a budget field.

    Raises:
        ValidationException: If the name is blank or already taken.
    """
    name = (name or '').strip()
    if not name:
        raise ValidationException("Field name is required.", details={'name': name})
    if BudgetField.objects.filter(name__iexact=name).exists():
        raise ValidationException(
            f"A budget field named '{name}' already exists.",
            details={'name': name}
        )
    try:
        with transaction.atomic():
            return BudgetField.objects.create(name=name, is_default=is_default)
    except IntegrityError:
        raise ValidationException(
            f"A budget field named '{name}' already exists.",
            details={'name': name}
        )


@transaction.atomic
def create_custom_field(project: Project, name: str, user=None) -> ProjectFieldMapping:
    """Create a non-default field and map it to the project as custom."""
    field = create_field(name, is_default=False)
    return map_field(project, field, is_custom=True, user=user)


@transaction.atomic
def update_field(field: BudgetField, name: Optional[str] = None, is_default: Optional[bool] = None) -> BudgetField:
    """
    Rename a field or change its default flag.

    A default field keeps is_default=True; only its name may change.
    """
    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationException("Field name is required.", details={'name': name})
        clash = BudgetField.objects.filter(name__iexact=name).exclude(pk=field.pk)
        if clash.exists():
            raise ValidationException(
                f"A budget field named '{name}' already exists.",
                details={'name': name}
            )
        field.name = name
    if is_default is not None and not field.is_default:
        field.is_default = is_default
    field.save()
    return field


@transaction.atomic
def delete_field(field: BudgetField) -> None:
    """
    Delete a budget field and its mappings.

    Raises:
        ConstraintViolationException: For default fields and fields with
            ledger history on any project.
    """
    if field.is_default:
        raise ConstraintViolationException(
            f"'{field.name}' is a default field and cannot be deleted.",
            details={'field_id': field.pk}
        )
    if has_ledger_history(None, field):
        raise ConstraintViolationException(
            f"'{field.name}' has ledger entries and cannot be deleted.",
            details={'field_id': field.pk}
        )
    field.delete()
