"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the expenditure ledger services.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase

from apps.core.exceptions import (
    ConstraintViolationException,
    NotFoundException,
    PeriodMismatchException,
    ValidationException,
)
from apps.expenditure import services
from apps.expenditure.models import ExpenditureEntry
from apps.projects.models import BudgetField
from apps.projects.tests.helpers import make_default_fields, make_project


class RecordExpenditureTests(TestCase):
    """Tests for recording single expenditure rows."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project(start_date=date(2023, 4, 1))

    def test_record_in_financial_quarter(self) -> None:
        entry = services.record_expenditure(
            self.project, self.equipment, 2024, 'FY', 2,
            Decimal('1500'), date(2024, 8, 20), remarks='Survey kit'
        )

        self.assertEqual(entry.period_label, 'FY 2024-25 Q2 (Jul-Sep)')
        self.assertEqual(services.total_for_field(self.project, self.equipment), Decimal('1500.00'))

    def test_date_outside_period_is_rejected(self) -> None:
        """Test that a date outside the claimed window leaves the ledger unchanged."""
        with self.assertRaises(PeriodMismatchException) as ctx:
            services.record_expenditure(
                self.project, self.equipment, 2024, 'FY', 2,
                Decimal('1500'), date(2024, 10, 1)
            )

        self.assertEqual(ctx.exception.details['period_end'], '2024-09-30')
        self.assertFalse(ExpenditureEntry.objects.exists())

    def test_project_quarter_window(self) -> None:
        services.record_expenditure(
            self.project, self.travel, 2024, 'PQ', 6,
            Decimal('10'), date(2024, 9, 30)
        )

        with self.assertRaises(PeriodMismatchException):
            services.record_expenditure(
                self.project, self.travel, 2024, 'PQ', 6,
                Decimal('10'), date(2024, 6, 30)
            )

    def test_entries_for_same_period_accumulate(self) -> None:
        for amount in ('100', '250'):
            services.record_expenditure(
                self.project, self.travel, 2023, 'FY', 1, Decimal(amount), date(2023, 5, 1)
            )

        self.assertEqual(ExpenditureEntry.objects.count(), 2)
        self.assertEqual(services.total_for_field(self.project, self.travel), Decimal('350.00'))

    def test_zero_amount_rejected(self) -> None:
        with self.assertRaises(ValidationException):
            services.record_expenditure(
                self.project, self.travel, 2023, 'FY', 1, 0, date(2023, 5, 1)
            )

    def test_invalid_period_rejected(self) -> None:
        with self.assertRaises(ValidationException):
            services.record_expenditure(
                self.project, self.travel, 2023, 'FY', 5, Decimal('1'), date(2023, 5, 1)
            )

    def test_year_index_beyond_calendar_rejected(self) -> None:
        with self.assertRaises(ValidationException):
            services.record_expenditure(
                self.project, self.equipment, 10000, 'FY', 1, Decimal('5'), date(2024, 5, 1)
            )

        self.assertFalse(ExpenditureEntry.objects.exists())

    def test_unmapped_field_rejected(self) -> None:
        custom = BudgetField.objects.create(name='Boat Hire')

        with self.assertRaises(ConstraintViolationException):
            services.record_expenditure(
                self.project, custom, 2023, 'FY', 1, Decimal('1'), date(2023, 5, 1)
            )


class BulkSubmissionTests(TestCase):
    """Tests for one-period bulk submissions."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project(start_date=date(2023, 4, 1))

    def test_blank_rows_skipped(self) -> None:
        entries = services.submit_bulk(self.project, 2023, 'FY', 3, date(2023, 11, 5), [
            {'field_id': self.equipment.pk, 'amount': '1200', 'remarks': 'Laptop'},
            {'field_id': self.travel.pk, 'amount': ''},
        ])

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].remarks, 'Laptop')
        self.assertEqual(entries[0].period_number, 3)

    def test_all_blank_rejected(self) -> None:
        with self.assertRaises(ValidationException):
            services.submit_bulk(self.project, 2023, 'FY', 3, date(2023, 11, 5), [
                {'field_id': self.equipment.pk, 'amount': 0},
                {'field_id': self.travel.pk, 'amount': None},
            ])

    def test_mapping_checked_at_submission(self) -> None:
        """Test that a field unmapped after the form was shown is rejected."""
        from apps.projects.services import unmap_field
        unmap_field(self.project, self.travel)

        with self.assertRaises(ConstraintViolationException):
            services.submit_bulk(self.project, 2023, 'FY', 3, date(2023, 11, 5), [
                {'field_id': self.equipment.pk, 'amount': '5'},
                {'field_id': self.travel.pk, 'amount': '5'},
            ])

        self.assertFalse(ExpenditureEntry.objects.exists())

    def test_period_mismatch_rejects_all_rows(self) -> None:
        with self.assertRaises(PeriodMismatchException):
            services.submit_bulk(self.project, 2023, 'FY', 3, date(2024, 1, 5), [
                {'field_id': self.equipment.pk, 'amount': '5'},
            ])


class CorrectionTests(TestCase):
    """Tests for updating and deleting expenditure rows."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project(start_date=date(2023, 4, 1))
        self.entry = services.record_expenditure(
            self.project, self.equipment, 2023, 'FY', 1, Decimal('100'), date(2023, 5, 1)
        )

    def test_update_moves_entry_to_new_period(self) -> None:
        services.update_expenditure(self.entry, {
            'period_number': 2,
            'expenditure_date': date(2023, 8, 1),
            'amount': Decimal('120'),
        })

        self.entry.refresh_from_db()
        self.assertEqual(self.entry.period_number, 2)
        self.assertEqual(self.entry.amount, Decimal('120.00'))

    def test_update_revalidates_date(self) -> None:
        with self.assertRaises(PeriodMismatchException):
            services.update_expenditure(self.entry, {'period_number': 2})

        self.entry.refresh_from_db()
        self.assertEqual(self.entry.period_number, 1)

    def test_delete(self) -> None:
        services.delete_expenditure(self.project, self.entry.pk)
        self.assertFalse(ExpenditureEntry.objects.exists())

    def test_delete_other_projects_entry(self) -> None:
        other = make_project(name='Other')

        with self.assertRaises(NotFoundException):
            services.delete_expenditure(other, self.entry.pk)

        self.assertTrue(ExpenditureEntry.objects.filter(pk=self.entry.pk).exists())


class GroupingTests(TestCase):

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project(start_date=date(2023, 4, 1))

    def test_group_by_period_order(self) -> None:
        """Test that groups are ordered by year, period type and number."""
        record = services.record_expenditure
        record(self.project, self.travel, 2024, 'FY', 1, Decimal('1'), date(2024, 4, 2))
        record(self.project, self.travel, 2023, 'PQ', 2, Decimal('2'), date(2023, 7, 2))
        record(self.project, self.equipment, 2023, 'FY', 4, Decimal('3'), date(2024, 2, 2))
        record(self.project, self.travel, 2023, 'FY', 4, Decimal('4'), date(2024, 3, 2))

        groups = services.group_by_period(services.get_entries(self.project))

        self.assertEqual(
            [(g['year_index'], g['period_type'], g['period_number']) for g in groups],
            [(2023, 'FY', 4), (2023, 'PQ', 2), (2024, 'FY', 1)]
        )
        self.assertEqual(len(groups[0]['entries']), 2)

    def test_group_by_year(self) -> None:
        record = services.record_expenditure
        record(self.project, self.travel, 2024, 'FY', 1, Decimal('1'), date(2024, 4, 2))
        record(self.project, self.travel, 2023, 'FY', 1, Decimal('2'), date(2023, 4, 2))

        groups = services.group_by_year(services.get_entries(self.project))

        self.assertEqual([g['year_index'] for g in groups], [2023, 2024])
