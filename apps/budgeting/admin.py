"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the budgeting module.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.budgeting.models import BudgetEntry


@admin.register(BudgetEntry)
class BudgetEntryAdmin(admin.ModelAdmin):
    """
    Admin configuration for BudgetEntry model.

    Entries are maintained through the budget services; the admin is
    read-only so mapping checks cannot be bypassed.
    """

    list_display = ['project', 'field', 'year_number', 'amount', 'updated_at']
    list_filter = ['year_number', 'field']
    search_fields = ['project__name', 'field__name']
    readonly_fields = [
        'project', 'field', 'year_number', 'amount',
        'created_at', 'updated_at', 'created_by', 'updated_by'
    ]
    ordering = ['project', 'year_number', 'field__name']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
