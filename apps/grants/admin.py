"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the grants module.
-------------------------------------------------------------------------
"""
from django.contrib import admin

from apps.grants.models import GrantEntry


@admin.register(GrantEntry)
class GrantEntryAdmin(admin.ModelAdmin):
    """
    Admin configuration for GrantEntry model.

    Receipts are append-only; corrections are recorded as new entries.
    """

    list_display = ['project', 'field', 'received_date', 'amount', 'remarks']
    list_filter = ['received_date', 'field']
    search_fields = ['project__name', 'field__name', 'remarks']
    date_hierarchy = 'received_date'
    readonly_fields = [
        'project', 'field', 'received_date', 'amount', 'remarks',
        'created_at', 'updated_at', 'created_by', 'updated_by'
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
