"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the expenditure module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.expenditure.views import ExpenditureDetailView, ExpenditureListView

app_name = 'expenditure'

urlpatterns = [
    path('projects/<int:project_id>/expenditures/', ExpenditureListView.as_view(), name='entry_list'),
    path(
        'projects/<int:project_id>/expenditures/<int:entry_id>/',
        ExpenditureDetailView.as_view(),
        name='entry_detail'
    ),
]
