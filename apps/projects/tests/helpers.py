"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Shared fixtures for PFMS test cases.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal

from apps.projects.models import BudgetField, Project
from apps.projects.services import create_project


def make_default_fields(*names: str):
    """Create default budget fields (Equipment and Travel unless named)."""
    names = names or ('Equipment', 'Travel')
    return [BudgetField.objects.create(name=name, is_default=True) for name in names]


def make_project(**overrides) -> Project:
    """Create a project through the service so default fields are mapped."""
    data = {
        'name': 'Watershed Survey',
        'start_date': date(2023, 4, 1),
        'duration_years': Decimal('3.0'),
        'total_value': Decimal('5000000.00'),
        'funding_agency': 'DST',
        'reporting_type': 'FY',
    }
    data.update(overrides)
    return create_project(data)
