"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django forms validating grant receipt payloads.
-------------------------------------------------------------------------
"""
from typing import Any, Dict, List

from django import forms
from django.utils.translation import gettext_lazy as _


class GrantReceiptForm(forms.Form):
    """
    A receipt event: date, shared remarks and per-field allocations.

    Allocation amounts are checked by the grant service so that blank
    and zero rows can be skipped rather than rejected.
    """

    received_date = forms.DateField()
    remarks = forms.CharField(required=False)
    allocations = forms.JSONField()

    def clean_allocations(self) -> List[Dict[str, Any]]:
        value = self.cleaned_data['allocations']
        if not isinstance(value, list) or not all(isinstance(row, dict) for row in value):
            raise forms.ValidationError(_('allocations must be a list of objects.'))
        for row in value:
            if 'field_id' not in row:
                raise forms.ValidationError(_('Every allocation needs a field_id.'))
        return value
