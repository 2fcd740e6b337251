"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Unit tests for the Reconciliation & Rollup Engine.
-------------------------------------------------------------------------
"""
from datetime import date
from decimal import Decimal

from django.test import TestCase
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.extra.django import TestCase as HypothesisTestCase

from apps.budgeting.services import set_budget
from apps.core.periods import Period
from apps.expenditure.services import delete_expenditure, record_expenditure
from apps.grants.services import record_receipt
from apps.projects.models import BudgetField
from apps.projects.services import create_custom_field
from apps.projects.tests.helpers import make_default_fields, make_project
from apps.reporting.services import ReconciliationEngine, portfolio_summary


class ReconciliationEngineTests(TestCase):
    """Rollups over a small but complete set of ledger rows."""

    def setUp(self):
        self.equipment, self.travel = make_default_fields()
        self.project = make_project(start_date=date(2023, 4, 1), duration_years=Decimal('3'))

        set_budget(self.project, self.equipment, 1, Decimal('100000'))
        set_budget(self.project, self.equipment, 2, Decimal('50000'))
        set_budget(self.project, self.travel, 1, Decimal('20000'))

        record_receipt(self.project, date(2023, 6, 1), [
            {'field_id': self.equipment.pk, 'amount': '60000'},
            {'field_id': self.travel.pk, 'amount': '10000'},
        ])
        record_receipt(self.project, date(2024, 5, 1), [
            {'field_id': self.equipment.pk, 'amount': '30000'},
        ])

        record_expenditure(self.project, self.equipment, 2023, 'FY', 1, Decimal('40000'), date(2023, 5, 10))
        record_expenditure(self.project, self.equipment, 2024, 'FY', 1, Decimal('30000'), date(2024, 4, 20))
        record_expenditure(self.project, self.travel, 2023, 'FY', 1, Decimal('25000'), date(2023, 6, 15))

        self.engine = ReconciliationEngine(self.project)

    def test_field_totals(self) -> None:
        self.assertEqual(self.engine.field_total_budget(self.equipment.pk), Decimal('150000.00'))
        self.assertEqual(self.engine.field_total_grant(self.equipment.pk), Decimal('90000.00'))
        self.assertEqual(self.engine.field_total_expenditure(self.equipment.pk), Decimal('70000.00'))
        self.assertEqual(self.engine.field_balance(self.equipment.pk), Decimal('80000.00'))
        self.assertEqual(self.engine.total_for_year(1), Decimal('120000.00'))

    def test_over_spent_field_has_negative_balance(self) -> None:
        """Test that expenditure beyond budget is reported, not blocked."""
        self.assertEqual(self.engine.field_balance(self.travel.pk), Decimal('-5000.00'))

    def test_field_rows_cover_every_mapped_field(self) -> None:
        """Test that a mapped field with no rows still appears with zeros."""
        mapping = create_custom_field(self.project, 'Boat Hire')
        rows = ReconciliationEngine(self.project).field_rows()

        self.assertEqual([r.name for r in rows], ['Equipment', 'Travel', 'Boat Hire'])
        empty = rows[-1]
        self.assertEqual(empty.field_id, mapping.field_id)
        self.assertEqual((empty.budget, empty.grant, empty.expenditure), (Decimal('0'),) * 3)

    def test_period_expenditure(self) -> None:
        self.assertEqual(
            self.engine.period_expenditure(self.equipment.pk, Period(2023, 'FY', 1)),
            Decimal('40000.00')
        )

    def test_period_matrix(self) -> None:
        matrix = self.engine.period_matrix()

        self.assertEqual(
            [c['label'] for c in matrix['columns']],
            ['FY 2023-24 Q1 (Apr-Jun)', 'FY 2024-25 Q1 (Apr-Jun)']
        )
        self.assertEqual(matrix['rows'][0]['cells'], [Decimal('40000.00'), Decimal('30000.00')])
        self.assertEqual(matrix['rows'][1]['cells'], [Decimal('25000.00'), Decimal('0.00')])
        self.assertEqual(matrix['column_totals'], [Decimal('65000.00'), Decimal('30000.00')])
        self.assertEqual(matrix['grand_total'], Decimal('95000.00'))

    def test_yearly_tracking(self) -> None:
        years = self.engine.yearly_tracking()

        self.assertEqual([y['year_number'] for y in years], [1, 2, 3])
        self.assertEqual(years[0]['budget_amount'], Decimal('120000.00'))
        self.assertEqual(years[0]['grant_received'], Decimal('70000.00'))
        self.assertEqual(years[0]['expenditure_amount'], Decimal('65000.00'))
        self.assertEqual(years[0]['balance'], Decimal('55000.00'))
        self.assertEqual(years[1]['grant_received'], Decimal('30000.00'))
        self.assertEqual(years[1]['expenditure_amount'], Decimal('30000.00'))
        self.assertEqual(years[2]['budget_amount'], Decimal('0.00'))

    def test_missing_financial_quarters(self) -> None:
        """Test that quarters without expenditure are listed up to today's quarter."""
        missing = self.engine.missing_periods(date(2024, 7, 15))

        self.assertEqual(
            [(m['year_index'], m['period_number']) for m in missing],
            [(2023, 2), (2023, 3), (2023, 4), (2024, 2)]
        )
        self.assertEqual(missing[-1]['label'], 'FY 2024-25 Q2 (Jul-Sep)')

    def test_missing_project_quarters(self) -> None:
        missing = self.engine.missing_periods(date(2024, 7, 15), 'PQ')

        self.assertEqual([m['period_number'] for m in missing], [1, 2, 3, 4, 5, 6])

    def test_budget_fields_with_grant_totals(self) -> None:
        rows = self.engine.budget_fields_with_grant_totals()

        self.assertEqual(rows[0]['budget_by_year'], {'1': Decimal('100000.00'), '2': Decimal('50000.00')})
        self.assertEqual(rows[0]['total_grant_received'], Decimal('90000.00'))
        self.assertEqual(rows[1]['total_budget'], Decimal('20000.00'))

    def test_budget_vs_expenditure_summary_covers_page_only(self) -> None:
        report = self.engine.budget_vs_expenditure(page=2, page_size=1)

        self.assertEqual(report['num_pages'], 2)
        self.assertEqual(report['total_fields'], 2)
        self.assertEqual([r['field_name'] for r in report['rows']], ['Travel'])
        self.assertEqual(report['summary']['field_count'], 1)
        self.assertEqual(report['summary']['total_budget'], Decimal('20000.00'))
        self.assertEqual(report['summary']['balance'], Decimal('-5000.00'))

    def test_budget_vs_expenditure_full_page(self) -> None:
        summary = self.engine.budget_vs_expenditure(page=1, page_size=25)['summary']

        self.assertEqual(summary['total_budget'], Decimal('170000.00'))
        self.assertEqual(summary['total_grant_received'], Decimal('100000.00'))
        self.assertEqual(summary['total_expenditure'], Decimal('95000.00'))
        self.assertEqual(summary['balance'], Decimal('75000.00'))


class PortfolioSummaryTests(TestCase):

    def test_grouped_by_agency(self) -> None:
        equipment, = make_default_fields('Equipment')
        dst = make_project(name='A', funding_agency='DST', total_value=Decimal('1000'))
        icar = make_project(name='B', funding_agency='ICAR', total_value=Decimal('500'))
        make_project(name='C', funding_agency='', total_value=Decimal('0'))
        set_budget(dst, equipment, 1, Decimal('800'))
        record_expenditure(dst, equipment, 2023, 'FY', 1, Decimal('300'), date(2023, 4, 10))
        record_receipt(icar, date(2023, 5, 1), [{'field_id': equipment.pk, 'amount': '200'}])

        summary = portfolio_summary([dst, icar])

        self.assertEqual([a['funding_agency'] for a in summary['agencies']], ['DST', 'ICAR'])
        self.assertEqual(summary['agencies'][0]['remaining'], Decimal('500.00'))
        self.assertEqual(summary['totals']['project_count'], 2)
        self.assertEqual(summary['totals']['total_value'], Decimal('1500.00'))
        self.assertEqual(summary['totals']['total_grant_received'], Decimal('200.00'))


amounts = st.decimals(min_value='0.01', max_value='1000000', places=2, allow_nan=False, allow_infinity=False)


class RollupPropertyTests(HypothesisTestCase):
    """Totals always agree with the rows they are derived from."""

    @settings(max_examples=25, deadline=None)
    @given(
        budgets=st.lists(amounts, min_size=3, max_size=3),
        spends=st.lists(st.tuples(st.integers(min_value=0, max_value=2), amounts, st.booleans()), max_size=6),
        page_size=st.integers(min_value=1, max_value=3),
        page=st.integers(min_value=1, max_value=3),
    )
    def test_balances_and_totals(self, budgets, spends, page_size, page) -> None:
        fields = [
            BudgetField.objects.create(name=name, is_default=True)
            for name in ('Equipment', 'Travel', 'Consumables')
        ]
        project = make_project(start_date=date(2023, 4, 1))
        for field, amount in zip(fields, budgets):
            set_budget(project, field, 1, amount)

        kept = Decimal('0')
        for index, amount, delete in spends:
            entry = record_expenditure(project, fields[index], 2023, 'FY', 2, amount, date(2023, 8, 1))
            if delete:
                delete_expenditure(project, entry.pk)
            else:
                kept += amount

        engine = ReconciliationEngine(project)
        rows = engine.field_rows()

        for row in rows:
            self.assertEqual(
                row.balance,
                engine.field_total_budget(row.field_id) - engine.field_total_expenditure(row.field_id)
            )
        self.assertEqual(sum(r.balance for r in rows), sum(budgets) - kept)
        self.assertEqual(engine.period_matrix()['grand_total'], kept)

        report = engine.budget_vs_expenditure(page=page, page_size=page_size)
        shown = report['rows']
        self.assertEqual(report['summary']['total_budget'], sum((r['total_budget'] for r in shown), Decimal('0')))
        self.assertEqual(
            report['summary']['total_expenditure'],
            sum((r['total_expenditure'] for r in shown), Decimal('0'))
        )
        self.assertEqual(report['summary']['field_count'], len(shown))
