"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Tests for ledger revision bumps and report snapshot caching.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal
from unittest import mock

from django.test import TestCase

from apps.budgeting.services import set_budget
from apps.expenditure.services import delete_expenditure, record_expenditure
from apps.grants.services import record_receipt
from apps.projects.models import BudgetField, Project
from apps.projects.services import map_field, update_field, update_project
from apps.projects.tests.helpers import make_default_fields, make_project
from apps.reporting.cache import cached_report, snapshot_key
from apps.reporting.services import ReconciliationEngine


class LedgerRevisionTests(TestCase):
    """Every ledger or mapping write moves the project to a new revision."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project()

    def revision(self) -> int:
        return Project.objects.get(pk=self.project.pk).ledger_revision

    def assertBumps(self, action) -> None:
        before = self.revision()
        action()
        self.assertGreater(self.revision(), before)

    def test_budget_write_bumps(self) -> None:
        self.assertBumps(lambda: set_budget(self.project, self.equipment, 1, Decimal('5')))

    def test_grant_write_bumps(self) -> None:
        self.assertBumps(lambda: record_receipt(
            self.project, date(2023, 5, 1), [{'field_id': self.travel.pk, 'amount': '5'}]
        ))

    def test_expenditure_write_and_delete_bump(self) -> None:
        entry = record_expenditure(
            self.project, self.travel, 2023, 'FY', 1, Decimal('5'), date(2023, 5, 1)
        )
        self.assertBumps(lambda: delete_expenditure(self.project, entry.pk))

    def test_mapping_change_bumps(self) -> None:
        custom = BudgetField.objects.create(name='Boat Hire')
        self.assertBumps(lambda: map_field(self.project, custom))

    def test_project_edit_bumps(self) -> None:
        self.assertBumps(lambda: update_project(self.project, {'name': 'Renamed'}))

    def test_field_rename_bumps_mapped_projects(self) -> None:
        self.assertBumps(lambda: update_field(self.equipment, name='Capital Equipment'))

    def test_field_change_leaves_unmapped_projects(self) -> None:
        custom = BudgetField.objects.create(name='Boat Hire')
        before = self.revision()

        update_field(custom, name='Boat Charter')

        self.assertEqual(self.revision(), before)

    def test_stale_instance_does_not_reset_revision(self) -> None:
        """Test that saving an old in-memory copy keeps the bumped revision."""
        stale = Project.objects.get(pk=self.project.pk)
        set_budget(self.project, self.equipment, 1, Decimal('5'))
        bumped = self.revision()

        stale.funding_agency = 'ICAR'
        stale.save()

        self.assertGreaterEqual(self.revision(), bumped)


class CachedReportTests(TestCase):

    def setUp(self):
        self.equipment, = make_default_fields('Equipment')
        self.project = make_project()

    def test_snapshot_reused_until_revision_changes(self) -> None:
        builder = mock.Mock(side_effect=[{'v': 1}, {'v': 2}])

        first = cached_report(self.project, 'totals', builder)
        again = cached_report(Project.objects.get(pk=self.project.pk), 'totals', builder)
        self.assertEqual(first, again)
        self.assertEqual(builder.call_count, 1)

        set_budget(self.project, self.equipment, 1, Decimal('5'))
        fresh = cached_report(Project.objects.get(pk=self.project.pk), 'totals', builder)

        self.assertEqual(fresh, {'v': 2})
        self.assertEqual(builder.call_count, 2)

    def test_field_rename_is_not_served_stale(self) -> None:
        def build():
            project = Project.objects.get(pk=self.project.pk)
            return ReconciliationEngine(project).budget_fields_with_grant_totals()

        before = cached_report(self.project, 'fields_with_grants', build)
        update_field(self.equipment, name='Capital Equipment')
        after = cached_report(Project.objects.get(pk=self.project.pk), 'fields_with_grants', build)

        self.assertEqual(before[0]['field_name'], 'Equipment')
        self.assertEqual(after[0]['field_name'], 'Capital Equipment')

    def test_key_includes_params(self) -> None:
        self.assertNotEqual(
            snapshot_key(self.project, 'budget_vs_expenditure', 1, 25),
            snapshot_key(self.project, 'budget_vs_expenditure', 2, 25),
        )
