"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Grant ledger models. Each row is one field's share of a
             grant instalment received on a given date.
-------------------------------------------------------------------------
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin


class GrantEntry(AuditLogMixin):
    """
    Grant amount received for one budget field.

    Rows are append-only: several entries may exist for the same field
    and they accumulate. Corrections are recorded as further dated
    entries rather than edits.

    Attributes:
        project: Owning project
        field: Budget field the receipt is allocated to
        received_date: Date the instalment was received
        amount: Allocated amount (> 0)
        remarks: Free text, e.g. sanction letter reference
    """

    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.CASCADE,
        related_name='grant_entries',
        verbose_name=_('Project')
    )
    field = models.ForeignKey(
        'projects.BudgetField',
        on_delete=models.PROTECT,
        related_name='grant_entries',
        verbose_name=_('Budget Field')
    )
    received_date = models.DateField(
        verbose_name=_('Received Date')
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    remarks = models.TextField(
        blank=True,
        verbose_name=_('Remarks')
    )

    class Meta:
        verbose_name = _('Grant Entry')
        verbose_name_plural = _('Grant Entries')
        ordering = ['-received_date', '-id']
        indexes = [
            models.Index(fields=['project', 'field'], name='grant_project_field_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.project} | {self.field} | {self.received_date}: {self.amount}"

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'field_id': self.field_id,
            'field_name': self.field.name,
            'received_date': self.received_date,
            'amount': self.amount,
            'remarks': self.remarks,
        }
