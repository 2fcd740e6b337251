"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the projects module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.projects.views import (
    ProjectListView, ProjectDetailView, CurrentPeriodView,
    BudgetFieldListView, BudgetFieldDetailView,
    ProjectFieldListView, ProjectFieldDetailView,
)

app_name = 'projects'

urlpatterns = [
    # Projects
    path('projects/', ProjectListView.as_view(), name='project_list'),
    path('projects/<int:project_id>/', ProjectDetailView.as_view(), name='project_detail'),
    path('projects/<int:project_id>/current-period/', CurrentPeriodView.as_view(), name='current_period'),

    # Budget fields
    path('budget-fields/', BudgetFieldListView.as_view(), name='field_list'),
    path('budget-fields/<int:field_id>/', BudgetFieldDetailView.as_view(), name='field_detail'),

    # Field mappings
    path('projects/<int:project_id>/budget-fields/', ProjectFieldListView.as_view(), name='project_fields'),
    path(
        'projects/<int:project_id>/budget-fields/<int:field_id>/',
        ProjectFieldDetailView.as_view(),
        name='project_field_detail'
    ),
]
