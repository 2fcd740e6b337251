"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django forms validating budget ledger payloads.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict, List

from django import forms
from django.utils.translation import gettext_lazy as _

from apps.core.exceptions import ValidationException
from apps.core.views import validated_data


class BudgetEntryForm(forms.Form):
    """One budget cell: field, project year and amount."""

    field_id = forms.IntegerField(min_value=1)
    year_number = forms.IntegerField(min_value=1)
    amount = forms.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal('0.00'))


class BudgetTableForm(forms.Form):
    """Full replacement set for a project's budget table."""

    entries = forms.JSONField(required=False)

    def clean_entries(self) -> List[Dict[str, Any]]:
        if 'entries' not in self.data:
            raise forms.ValidationError(_('This field is required.'))
        value = self.cleaned_data['entries']
        if value is None:
            value = []
        if not isinstance(value, list) or not all(isinstance(row, dict) for row in value):
            raise forms.ValidationError(_('entries must be a list of objects.'))
        return value

    def cleaned_rows(self) -> List[Dict[str, Any]]:
        """Validate each row, reporting the failing row index."""
        rows = []
        for index, row in enumerate(self.cleaned_data['entries']):
            try:
                rows.append(validated_data(BudgetEntryForm(data=row)))
            except ValidationException as e:
                e.details['row'] = index
                raise
        return rows
