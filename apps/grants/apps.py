"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the grants module.
             Records grant instalments received from funding agencies.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class GrantsConfig(AppConfig):
    """
    Configuration class for the grants application.

    This app manages:
    - Grant receipts fanned out over budget fields
    - Receipt history grouped by received date
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.grants'
    verbose_name = 'Grant Ledger'
