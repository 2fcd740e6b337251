"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the expenditure module.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.expenditure.models import ExpenditureEntry


@admin.register(ExpenditureEntry)
class ExpenditureEntryAdmin(admin.ModelAdmin):
    """
    Admin configuration for ExpenditureEntry model.

    Rows are recorded and corrected through the expenditure services,
    which check the period window and field mapping.
    """

    list_display = [
        'project', 'field', 'period_type', 'year_index',
        'period_number', 'amount', 'expenditure_date'
    ]
    list_filter = ['period_type', 'year_index', 'field']
    search_fields = ['project__name', 'field__name', 'remarks']
    date_hierarchy = 'expenditure_date'
    readonly_fields = [
        'project', 'field', 'year_index', 'period_type', 'period_number',
        'amount', 'expenditure_date', 'remarks',
        'created_at', 'updated_at', 'created_by', 'updated_by'
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
