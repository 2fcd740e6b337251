"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the budgeting module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.budgeting.views import BudgetEntryListView

app_name = 'budgeting'

urlpatterns = [
    path('projects/<int:project_id>/budget-entries/', BudgetEntryListView.as_view(), name='entry_list'),
]
