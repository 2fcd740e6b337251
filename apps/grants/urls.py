"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the grants module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.grants.views import GrantEntryListView

app_name = 'grants'

urlpatterns = [
    path('projects/<int:project_id>/grant-entries/', GrantEntryListView.as_view(), name='entry_list'),
]
