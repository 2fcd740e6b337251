"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Root URL configuration. All JSON endpoints live under
             /api/finance/.
-------------------------------------------------------------------------
"""
from django.contrib import admin
from django.urls import path, include

api_patterns = [
    path('', include('apps.projects.urls')),
    path('', include('apps.budgeting.urls')),
    path('', include('apps.grants.urls')),
    path('', include('apps.expenditure.urls')),
    path('', include('apps.reporting.urls')),
]

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/finance/', include(api_patterns)),
]
