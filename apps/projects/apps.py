"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the projects module.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class ProjectsConfig(AppConfig):
    """
    Configuration class for the projects application.

    This app manages:
    - Project master records and their lifecycle
    - Budget fields (system defaults and project custom fields)
    - The project to budget field mapping registry
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.projects'
    verbose_name = 'Projects & Budget Fields'
