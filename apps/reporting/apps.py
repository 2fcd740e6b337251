"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: App configuration for the reporting module.
-------------------------------------------------------------------------
"""
from django.apps import AppConfig


class ReportingConfig(AppConfig):
    """
    Configuration class for the reporting application.

    This app manages:
    - Reconciliation and rollup of the three ledgers
    - Cached report snapshots and Excel export
    """

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.reporting'
    verbose_name = 'Reports'

    def ready(self) -> None:
        """Import signal handlers when app is ready."""
        import apps.reporting.signals  # noqa: F401
