"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Expenditure ledger models. Each row is an amount spent on
             one budget field within one reporting period.
-------------------------------------------------------------------------
"""
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin
from apps.core.periods import Period, PeriodType, format_period_label


class ExpenditureEntry(AuditLogMixin):
    """
    Amount spent on a budget field in a reporting period.

    The expenditure date must fall inside the calendar window of
    (year_index, period_type, period_number) for the project's start
    date; the expenditure services enforce this on every write.

    Attributes:
        project: Owning project
        field: Budget field charged
        year_index: FY start year (FY) or calendar year of the quarter (PQ)
        period_type: FY or PQ
        period_number: Quarter number within the period type
        amount: Amount spent
        expenditure_date: Date the expense was incurred
        remarks: Free text
    """

    project = models.ForeignKey(
        'projects.Project',
        on_delete=models.CASCADE,
        related_name='expenditure_entries',
        verbose_name=_('Project')
    )
    field = models.ForeignKey(
        'projects.BudgetField',
        on_delete=models.PROTECT,
        related_name='expenditure_entries',
        verbose_name=_('Budget Field')
    )
    year_index = models.PositiveSmallIntegerField(
        verbose_name=_('Year Index')
    )
    period_type = models.CharField(
        max_length=2,
        choices=PeriodType.choices,
        verbose_name=_('Period Type')
    )
    period_number = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1)],
        verbose_name=_('Period Number')
    )
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
        verbose_name=_('Amount')
    )
    expenditure_date = models.DateField(
        verbose_name=_('Expenditure Date')
    )
    remarks = models.TextField(
        blank=True,
        verbose_name=_('Remarks')
    )

    class Meta:
        verbose_name = _('Expenditure Entry')
        verbose_name_plural = _('Expenditure Entries')
        ordering = ['year_index', 'period_type', 'period_number', 'field__name', 'id']
        indexes = [
            models.Index(
                fields=['project', 'year_index', 'period_type', 'period_number'],
                name='expenditure_period_idx'
            ),
        ]

    def __str__(self) -> str:
        return f"{self.project} | {self.field} | {self.period_type}{self.period_number}/{self.year_index}: {self.amount}"

    @property
    def period(self) -> Period:
        return Period(self.year_index, self.period_type, self.period_number)

    @property
    def period_label(self) -> str:
        return format_period_label(
            self.period_type, self.year_index, self.period_number, self.project.start_date
        )

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'field_id': self.field_id,
            'field_name': self.field.name,
            'year_index': self.year_index,
            'period_type': self.period_type,
            'period_number': self.period_number,
            'period_label': self.period_label,
            'amount': self.amount,
            'expenditure_date': self.expenditure_date,
            'remarks': self.remarks,
        }
