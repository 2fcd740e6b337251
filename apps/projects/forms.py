"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django forms validating JSON payloads for projects and
             the Field Registry.
-------------------------------------------------------------------------
"""
from decimal import Decimal
from typing import Any, Dict, Optional

from django import forms
from django.forms.models import model_to_dict
from django.utils.translation import gettext_lazy as _

from apps.core.periods import PeriodType
from apps.projects.models import BudgetField, Project


PROJECT_FIELDS = [
    'name', 'start_date', 'end_date', 'extension_end_date',
    'duration_years', 'total_value', 'funding_agency', 'reporting_type',
]


class ProjectForm(forms.ModelForm):
    """
    Form for creating/updating projects.

    For updates, pass the stored values merged with the payload via
    `for_update` so that omitted keys keep their current values.
    """

    class Meta:
        model = Project
        fields = PROJECT_FIELDS

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['total_value'].required = False
        self.fields['reporting_type'].required = False

    def clean_total_value(self) -> Decimal:
        value = self.cleaned_data.get('total_value')
        return Decimal('0.00') if value is None else value

    def clean_reporting_type(self) -> str:
        return self.cleaned_data.get('reporting_type') or PeriodType.FY.value

    @classmethod
    def for_update(cls, instance: Project, payload: Dict[str, Any]) -> 'ProjectForm':
        data = model_to_dict(instance, fields=PROJECT_FIELDS)
        data.update({k: v for k, v in payload.items() if k in PROJECT_FIELDS})
        return cls(data=data, instance=instance)

    def changed_values(self) -> Dict[str, Any]:
        return {name: self.cleaned_data[name] for name in PROJECT_FIELDS if name in self.cleaned_data}


class BudgetFieldForm(forms.Form):
    """Create or rename a budget field."""

    name = forms.CharField(max_length=150, required=False)
    is_default = forms.BooleanField(required=False)

    def __init__(self, *args, require_name: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['name'].required = require_name


class FieldMappingForm(forms.Form):
    """
    Map an existing field to a project, or create and map a custom one.

    Exactly one of field_id / name must be given.
    """

    field_id = forms.ModelChoiceField(queryset=BudgetField.objects.all(), required=False)
    name = forms.CharField(max_length=150, required=False)
    is_custom = forms.NullBooleanField(required=False)

    def clean(self) -> Dict[str, Any]:
        cleaned_data = super().clean()
        field: Optional[BudgetField] = cleaned_data.get('field_id')
        name = (cleaned_data.get('name') or '').strip()
        if not self.errors and bool(field) == bool(name):
            raise forms.ValidationError(
                _('Provide either an existing field_id or a name for a new custom field.')
            )
        cleaned_data['name'] = name
        return cleaned_data


class FieldIdsForm(forms.Form):
    """Full replacement set of mapped fields."""

    field_ids = forms.JSONField(required=False)

    def clean_field_ids(self):
        if 'field_ids' not in self.data:
            raise forms.ValidationError(_('This field is required.'))
        value = self.cleaned_data['field_ids']
        if value is None:
            value = []
        if not isinstance(value, list) or not all(
            isinstance(v, int) and not isinstance(v, bool) for v in value
        ):
            raise forms.ValidationError(_('field_ids must be a list of integers.'))
        return value
