"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django forms validating expenditure payloads.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict, List

from django import forms
from django.utils.translation import gettext_lazy as _

from apps.core.periods import MAX_YEAR_INDEX, PeriodType
from apps.projects.models import BudgetField


class PeriodForm(forms.Form):
    """Period and date shared by single and bulk submissions."""

    year_index = forms.IntegerField(min_value=1, max_value=MAX_YEAR_INDEX)
    period_type = forms.ChoiceField(choices=PeriodType.choices)
    period_number = forms.IntegerField(min_value=1)
    expenditure_date = forms.DateField()


class ExpenditureForm(PeriodForm):
    """A single expenditure row."""

    field_id = forms.ModelChoiceField(queryset=BudgetField.objects.all())
    amount = forms.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal('0.01'))
    remarks = forms.CharField(required=False)


class BulkExpenditureForm(PeriodForm):
    """
    One period's expenditure across several fields.

    Row amounts are checked by the expenditure service so that blank
    rows can be skipped.
    """

    rows = forms.JSONField()

    def clean_rows(self) -> List[Dict[str, Any]]:
        value = self.cleaned_data['rows']
        if not isinstance(value, list) or not all(isinstance(row, dict) for row in value):
            raise forms.ValidationError(_('rows must be a list of objects.'))
        return value


class ExpenditureUpdateForm(forms.Form):
    """Partial correction of an expenditure row."""

    field_id = forms.ModelChoiceField(queryset=BudgetField.objects.all(), required=False)
    year_index = forms.IntegerField(min_value=1, max_value=MAX_YEAR_INDEX, required=False)
    period_type = forms.ChoiceField(choices=PeriodType.choices, required=False)
    period_number = forms.IntegerField(min_value=1, required=False)
    amount = forms.DecimalField(max_digits=15, decimal_places=2, min_value=Decimal('0.01'), required=False)
    expenditure_date = forms.DateField(required=False)
    remarks = forms.CharField(required=False)

    def changes(self) -> Dict[str, Any]:
        """Cleaned values for the keys actually submitted."""
        changes = {}
        for name, value in self.cleaned_data.items():
            if name not in self.data:
                continue
            if name == 'field_id':
                if value is not None:
                    changes['field'] = value
            elif name == 'remarks' or value not in (None, ''):
                changes[name] = value
        return changes
