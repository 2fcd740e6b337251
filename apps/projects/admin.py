"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Django admin configuration for the projects module.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from apps.projects.models import BudgetField, Project, ProjectFieldMapping


class ProjectFieldMappingInline(admin.TabularInline):
    """Read-only view of a project's mapped fields."""
    model = ProjectFieldMapping
    extra = 0
    fields = ['field', 'is_custom']
    readonly_fields = ['field', 'is_custom']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    """
    Admin configuration for Project model.
    """

    list_display = [
        'name', 'funding_agency', 'start_date', 'duration_years',
        'total_value', 'reporting_type'
    ]
    list_filter = ['reporting_type', 'funding_agency']
    search_fields = ['name', 'funding_agency']
    readonly_fields = [
        'public_id', 'ledger_revision', 'created_at',
        'updated_at', 'created_by', 'updated_by'
    ]
    ordering = ['-start_date']
    inlines = [ProjectFieldMappingInline]

    fieldsets = (
        (None, {
            'fields': ('name', 'funding_agency', 'total_value')
        }),
        (_('Timeline'), {
            'fields': ('start_date', 'end_date', 'extension_end_date', 'duration_years', 'reporting_type')
        }),
        (_('Audit'), {
            'fields': ('public_id', 'ledger_revision', 'created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',)
        }),
    )

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return self.readonly_fields + ['start_date']
        return self.readonly_fields


@admin.register(BudgetField)
class BudgetFieldAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_default', 'created_at']
    list_filter = ['is_default']
    search_fields = ['name']
