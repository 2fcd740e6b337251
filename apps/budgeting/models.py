"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Database models for the budgeting module.
-------------------------------------------------------------------------
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin


class BudgetEntry(AuditLogMixin):
    """
    Budgeted amount for one field in one project year.

    At most one row exists per (project, field, year_number); saving
    again replaces the amount.

    Attributes:
        project: Owning project
        field: Budget field (must be mapped to the project)
        year_number: Project year, 1 .. ceil(duration_years)
        amount: Budgeted amount
    """

    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.CASCADE,
        related_name='budget_entries',
        verbose_name=_('Project')
    )
    field = models.ForeignKey(
        'projects.BudgetField',
        on_delete=models.PROTECT,
        related_name='budget_entries',
        verbose_name=_('Budget Field')
    )
    year_number = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Project Year')
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Amount')
    )

    class Meta:
        verbose_name = _('Budget Entry')
        verbose_name_plural = _('Budget Entries')
        ordering = ['year_number', 'field__name']
        constraints = [
            models.UniqueConstraint(
                fields=['project', 'field', 'year_number'],
                name='unique_budget_entry_per_year'
            ),
        ]

    def __str__(self) -> str:
        return f"{self.project} | {self.field} | Year {self.year_number}: {self.amount}"

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'field_id': self.field_id,
            'field_name': self.field.name,
            'year_number': self.year_number,
            'amount': self.amount,
        }
