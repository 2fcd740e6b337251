"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Signal handlers for report cache invalidation on ledger,
             field and field mapping changes.
-------------------------------------------------------------------------
"""
import logging

from django.db.models import F
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from apps.budgeting.models import BudgetEntry
from apps.expenditure.models import ExpenditureEntry
from apps.grants.models import GrantEntry
from apps.projects.models import BudgetField, Project, ProjectFieldMapping

logger = logging.getLogger(__name__)


def bump_ledger_revision(project_id: int) -> None:
    """
    Move the project to a new ledger revision.

    Cached snapshots are keyed by revision, so older ones are never read
    again and simply expire.
    """
    Project.objects.filter(pk=project_id).update(ledger_revision=F('ledger_revision') + 1)
    logger.debug(f"Ledger revision bumped for project {project_id}")


@receiver([post_save, post_delete], sender=BudgetEntry)
@receiver([post_save, post_delete], sender=GrantEntry)
@receiver([post_save, post_delete], sender=ExpenditureEntry)
@receiver([post_save, post_delete], sender=ProjectFieldMapping)
def invalidate_report_cache(sender, instance, **kwargs) -> None:
    """
    Invalidate report snapshots when a ledger row or mapping changes.

    Args:
        sender: The model class.
        instance: The row that was saved or deleted.
        **kwargs: Additional signal arguments.
    """
    bump_ledger_revision(instance.project_id)


@receiver(post_save, sender=Project)
def invalidate_on_project_change(sender, instance: Project, created: bool, **kwargs) -> None:
    """Project edits change labels and year bounds in every report."""
    if not created:
        bump_ledger_revision(instance.pk)


@receiver(post_save, sender=BudgetField)
def invalidate_on_field_change(sender, instance: BudgetField, created: bool, **kwargs) -> None:
    """Field names and default flags appear in every mapped project's reports."""
    if created:
        return
    project_ids = instance.project_mappings.values_list('project_id', flat=True)
    Project.objects.filter(pk__in=list(project_ids)).update(ledger_revision=F('ledger_revision') + 1)
    logger.debug(f"Ledger revision bumped for projects mapped to field {instance.pk}")
