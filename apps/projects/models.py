"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Database models for the projects module including
             Project, BudgetField and ProjectFieldMapping.
-------------------------------------------------------------------------
"""
import math
from datetime import date
from decimal import Decimal
from typing import Optional

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.core.mixins import AuditLogMixin, TimeStampedMixin
from apps.core.periods import (
    Period, PeriodType, derive_current_period, max_project_quarters,
)


class Project(AuditLogMixin):
    """
    A funded, multi-year project whose finances are tracked.

    The start date anchors every derived period number (project quarters,
    project years) and is therefore immutable once the project exists.

    Attributes:
        name: Project title
        start_date: First day of the project
        duration_years: Contracted duration; bounds budget years and
            project quarters
        total_value: Total contracted value
        funding_agency: Sponsor of the project
        reporting_type: Period type the project reports expenditure in
        ledger_revision: Bumped on every ledger or mapping change; only
            used to key cached report snapshots
    """

    name = models.CharField(
        max_length=255,
        verbose_name=_('Project Name')
    )
    start_date = models.DateField(
        verbose_name=_('Start Date')
    )
    end_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('End Date')
    )
    extension_end_date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_('Extended End Date'),
        help_text=_('End date after any approved no-cost extension.')
    )
    duration_years = models.DecimalField(
        max_digits=4,
        decimal_places=1,
        validators=[MinValueValidator(Decimal('0.1'))],
        verbose_name=_('Duration (Years)')
    )
    total_value = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Total Contracted Value')
    )
    funding_agency = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_('Funding Agency')
    )
    reporting_type = models.CharField(
        max_length=2,
        choices=PeriodType.choices,
        default=PeriodType.FY,
        verbose_name=_('Reporting Period Type')
    )
    ledger_revision = models.PositiveIntegerField(
        default=0,
        editable=False,
        verbose_name=_('Ledger Revision')
    )

    class Meta:
        verbose_name = _('Project')
        verbose_name_plural = _('Projects')
        ordering = ['-created_at']

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs) -> None:
        # ledger_revision is only moved by F() updates from apps.reporting.signals
        if not self._state.adding and not kwargs.get('update_fields') and not kwargs.get('force_insert'):
            kwargs['update_fields'] = [
                f.name for f in self._meta.concrete_fields
                if not f.primary_key and f.name != 'ledger_revision'
            ]
        super().save(*args, **kwargs)

    def clean(self) -> None:
        """Validate that end dates do not precede the start date."""
        from django.core.exceptions import ValidationError
        errors = {}
        if self.start_date and self.end_date and self.end_date < self.start_date:
            errors['end_date'] = _('End date cannot be before the start date.')
        if (self.start_date and self.extension_end_date
                and self.extension_end_date < self.start_date):
            errors['extension_end_date'] = _('Extended end date cannot be before the start date.')
        if errors:
            raise ValidationError(errors)

    @property
    def max_year_number(self) -> int:
        """Last valid budget year index (1-based)."""
        return math.ceil(self.duration_years)

    @property
    def max_period_number(self) -> Optional[int]:
        """Last valid project quarter."""
        return max_project_quarters(self.duration_years)

    def current_period(self, today: date, period_type: Optional[str] = None) -> Period:
        """Reporting period containing `today` for this project."""
        return derive_current_period(
            period_type or self.reporting_type,
            self.start_date,
            today,
            self.duration_years,
        )

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'public_id': str(self.public_id),
            'name': self.name,
            'start_date': self.start_date,
            'end_date': self.end_date,
            'extension_end_date': self.extension_end_date,
            'duration_years': self.duration_years,
            'total_value': self.total_value,
            'funding_agency': self.funding_agency,
            'reporting_type': self.reporting_type,
        }


class BudgetField(TimeStampedMixin):
    """
    A named expenditure category (e.g. Equipment, Travel).

    Default fields are seeded once and mapped to every new project.
    Custom fields are created ad hoc and reach a project only through
    a ProjectFieldMapping flagged is_custom.
    """

    name = models.CharField(
        max_length=150,
        unique=True,
        verbose_name=_('Field Name')
    )
    is_default = models.BooleanField(
        default=False,
        verbose_name=_('System Default'),
        help_text=_('Default fields are mapped to every new project.')
    )

    class Meta:
        verbose_name = _('Budget Field')
        verbose_name_plural = _('Budget Fields')
        ordering = ['-is_default', 'name']

    def __str__(self) -> str:
        return self.name

    def as_dict(self) -> dict:
        return {
            'id': self.pk,
            'name': self.name,
            'is_default': self.is_default,
        }


class ProjectFieldMapping(TimeStampedMixin):
    """
    Registry row stating that a budget field is in use on a project.

    A (project, field) pair must be mapped before any budget, grant or
    expenditure entry may reference it.
    """

    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name='field_mappings',
        verbose_name=_('Project')
    )
    field = models.ForeignKey(
        BudgetField,
        on_delete=models.CASCADE,
        related_name='project_mappings',
        verbose_name=_('Budget Field')
    )
    is_custom = models.BooleanField(
        default=False,
        verbose_name=_('Custom Field')
    )

    class Meta:
        verbose_name = _('Project Field Mapping')
        verbose_name_plural = _('Project Field Mappings')
        ordering = ['-field__is_default', 'field__name']
        constraints = [
            models.UniqueConstraint(
                fields=['project', 'field'],
                name='unique_project_field_mapping'
            ),
        ]

    def __str__(self) -> str:
        return f"{self.project} - {self.field}"

    def as_dict(self) -> dict:
        return {
            'id': self.field_id,
            'name': self.field.name,
            'is_default': self.field.is_default,
            'is_custom': self.is_custom,
        }
