"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the project lifecycle and Field Registry.
-------------------------------------------------------------------------
"""
from datetime import date
from io import StringIO
from decimal import Decimal

from django.core.management import call_command
from django.test import TestCase

from apps.budgeting.services import set_budget
from apps.core.exceptions import (
    ConstraintViolationException,
    NotFoundException,
    ValidationException,
)
from apps.expenditure.services import record_expenditure
from apps.grants.services import record_receipt
from apps.projects import services
from apps.projects.models import BudgetField, Project, ProjectFieldMapping
from apps.projects.tests.helpers import make_default_fields, make_project


class ProjectLifecycleTests(TestCase):
    """Tests for project create/update/delete."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project()

    def test_create_maps_every_default_field(self) -> None:
        """Test that a new project gets all default fields, none custom."""
        mappings = services.list_project_fields(self.project)

        self.assertEqual({m.field_id for m in mappings}, {self.equipment.pk, self.travel.pk})
        self.assertTrue(all(not m.is_custom for m in mappings))

    def test_start_date_is_immutable(self) -> None:
        """Test that changing the start date is rejected."""
        with self.assertRaises(ValidationException):
            services.update_project(self.project, {'start_date': date(2023, 5, 1)})

        self.project.refresh_from_db()
        self.assertEqual(self.project.start_date, date(2023, 4, 1))

    def test_update_keeps_same_start_date(self) -> None:
        """Test that other attributes can change when the start date is resent."""
        services.update_project(self.project, {
            'start_date': date(2023, 4, 1),
            'name': 'Watershed Survey Phase II',
        })

        self.project.refresh_from_db()
        self.assertEqual(self.project.name, 'Watershed Survey Phase II')

    def test_shrinking_duration_below_budget_years_is_rejected(self) -> None:
        """Test that budget years beyond a new duration block the change."""
        set_budget(self.project, self.equipment, 3, Decimal('1000.00'))

        with self.assertRaises(ConstraintViolationException) as ctx:
            services.update_project(self.project, {'duration_years': Decimal('2.0')})

        self.assertEqual(ctx.exception.details['years'], [3])

    def test_shrinking_duration_without_stranded_years(self) -> None:
        """Test that the duration can shrink when no budget is stranded."""
        set_budget(self.project, self.equipment, 1, Decimal('1000.00'))

        services.update_project(self.project, {'duration_years': Decimal('1.5')})

        self.project.refresh_from_db()
        self.assertEqual(self.project.max_year_number, 2)

    def test_delete_cascades_and_reports_counts(self) -> None:
        """Test that deleting a project removes its mappings and ledger rows."""
        set_budget(self.project, self.equipment, 1, Decimal('1000.00'))
        record_expenditure(
            self.project, self.equipment, 2023, 'FY', 1,
            Decimal('250.00'), date(2023, 5, 10)
        )

        counts = services.delete_project(self.project)

        self.assertEqual(counts['projects.Project'], 1)
        self.assertEqual(counts['projects.ProjectFieldMapping'], 2)
        self.assertEqual(counts['budgeting.BudgetEntry'], 1)
        self.assertEqual(counts['expenditure.ExpenditureEntry'], 1)
        self.assertFalse(Project.objects.filter(pk=self.project.pk).exists())
        self.assertTrue(BudgetField.objects.filter(pk=self.equipment.pk).exists())

    def test_get_project_missing(self) -> None:
        """Test that an unknown id raises NotFoundException."""
        with self.assertRaises(NotFoundException):
            services.get_project(999999)


class FieldRegistryTests(TestCase):
    """Tests for mapping and unmapping budget fields."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project()
        self.custom = BudgetField.objects.create(name='Field Vehicles')

    def test_map_field_is_idempotent(self) -> None:
        """Test that re-mapping a mapped field is a no-op success."""
        first = services.map_field(self.project, self.custom)
        second = services.map_field(self.project, self.custom)

        self.assertEqual(first.pk, second.pk)
        self.assertTrue(first.is_custom)
        self.assertEqual(
            ProjectFieldMapping.objects.filter(project=self.project, field=self.custom).count(), 1
        )

    def test_unmap_with_expenditure_is_rejected(self) -> None:
        """Test that unmapping a field with expenditure history fails."""
        record_expenditure(
            self.project, self.travel, 2023, 'FY', 1,
            Decimal('100.00'), date(2023, 6, 1)
        )

        with self.assertRaises(ConstraintViolationException):
            services.unmap_field(self.project, self.travel)

        self.assertTrue(services.is_mapped(self.project, self.travel))

    def test_unmap_with_grant_history_is_rejected(self) -> None:
        """Test that grant rows also protect the mapping."""
        record_receipt(
            self.project, date(2023, 6, 1),
            [{'field_id': self.travel.pk, 'amount': '500'}]
        )

        with self.assertRaises(ConstraintViolationException):
            services.unmap_field(self.project, self.travel)

    def test_unmap_without_history(self) -> None:
        """Test that a field without ledger rows can be unmapped."""
        services.unmap_field(self.project, self.travel)

        self.assertFalse(services.is_mapped(self.project, self.travel))

    def test_unmap_unmapped_field(self) -> None:
        """Test that unmapping a field that is not mapped raises NotFound."""
        with self.assertRaises(NotFoundException):
            services.unmap_field(self.project, self.custom)

    def test_replace_all_mappings_applies_diff(self) -> None:
        """Test that additions and removals are both applied."""
        set_budget(self.project, self.equipment, 1, Decimal('700.00'))

        diff = services.replace_all_mappings(self.project, [self.equipment.pk, self.custom.pk])

        self.assertEqual(diff, {'added': [self.custom.pk], 'removed': [self.travel.pk]})
        self.assertEqual(
            set(services.mapped_field_ids(self.project)),
            {self.equipment.pk, self.custom.pk}
        )
        # Entries for fields that stay mapped are preserved
        self.assertEqual(self.project.budget_entries.count(), 1)

    def test_replace_all_mappings_blocked_by_history(self) -> None:
        """Test that a blocked removal leaves the mapping set unchanged."""
        set_budget(self.project, self.travel, 1, Decimal('700.00'))

        with self.assertRaises(ConstraintViolationException):
            services.replace_all_mappings(self.project, [self.equipment.pk, self.custom.pk])

        self.assertEqual(
            set(services.mapped_field_ids(self.project)),
            {self.equipment.pk, self.travel.pk}
        )

    def test_replace_all_mappings_unknown_field(self) -> None:
        """Test that unknown field ids are reported."""
        with self.assertRaises(NotFoundException):
            services.replace_all_mappings(self.project, [self.equipment.pk, 999999])

    def test_require_mapped(self) -> None:
        """Test that ledger writes to an unmapped field are rejected."""
        with self.assertRaises(ConstraintViolationException):
            services.require_mapped(self.project, self.custom)

    def test_list_project_fields_orders_defaults_first(self) -> None:
        """Test that default fields come before custom ones."""
        services.create_custom_field(self.project, 'Animal Feed')

        names = [m.field.name for m in services.list_project_fields(self.project)]

        self.assertEqual(names, ['Equipment', 'Travel', 'Animal Feed'])


class BudgetFieldTests(TestCase):
    """Tests for creating, renaming and deleting budget fields."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project()

    def test_create_custom_field_maps_as_custom(self) -> None:
        """Test that a custom field is created and mapped in one step."""
        mapping = services.create_custom_field(self.project, 'Boat Hire')

        self.assertFalse(mapping.field.is_default)
        self.assertTrue(mapping.is_custom)
        self.assertTrue(services.is_mapped(self.project, mapping.field))

    def test_duplicate_field_name_rejected(self) -> None:
        """Test that field names are unique regardless of case."""
        with self.assertRaises(ValidationException):
            services.create_field('equipment')

    def test_blank_field_name_rejected(self) -> None:
        with self.assertRaises(ValidationException):
            services.create_field('   ')

    def test_update_default_field_keeps_flag(self) -> None:
        """Test that a default field can be renamed but stays default."""
        field = services.update_field(self.equipment, name='Equipment & Tools', is_default=False)

        self.assertEqual(field.name, 'Equipment & Tools')
        self.assertTrue(field.is_default)

    def test_delete_default_field_rejected(self) -> None:
        """Test that default fields cannot be deleted."""
        with self.assertRaises(ConstraintViolationException):
            services.delete_field(self.equipment)

    def test_delete_field_with_history_rejected(self) -> None:
        """Test that fields referenced by ledger rows cannot be deleted."""
        mapping = services.create_custom_field(self.project, 'Boat Hire')
        set_budget(self.project, mapping.field, 1, Decimal('10.00'))

        with self.assertRaises(ConstraintViolationException):
            services.delete_field(mapping.field)

    def test_delete_unused_custom_field(self) -> None:
        """Test that an unused custom field and its mappings are removed."""
        mapping = services.create_custom_field(self.project, 'Boat Hire')

        services.delete_field(mapping.field)

        self.assertFalse(BudgetField.objects.filter(name='Boat Hire').exists())
        self.assertFalse(ProjectFieldMapping.objects.filter(pk=mapping.pk).exists())


class SeedBudgetFieldsCommandTests(TestCase):
    """Tests for the seed_budget_fields management command."""

    def test_seeds_defaults_once(self) -> None:
        """Test that running the command twice creates each field once."""
        call_command('seed_budget_fields', stdout=StringIO())
        call_command('seed_budget_fields', stdout=StringIO())

        self.assertEqual(BudgetField.objects.filter(is_default=True).count(), 6)
        self.assertTrue(BudgetField.objects.filter(name='Contingency', is_default=True).exists())
