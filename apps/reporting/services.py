"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Reconciliation & Rollup Engine. Every total is recomputed
             from the budget, grant and expenditure rows of a project;
             no aggregate is ever stored.
-------------------------------------------------------------------------
"""
from collections import defaultdict
from dataclasses import dataclass, field as dataclass_field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from django.conf import settings
from django.core.paginator import Paginator

from apps.budgeting.models import BudgetEntry
from apps.core.periods import (
    Period, format_period_label, iter_periods, period_date_range, project_year_for_date,
)
from apps.core.services import ZERO
from apps.expenditure.models import ExpenditureEntry
from apps.grants.models import GrantEntry
from apps.projects.models import Project
from apps.projects.services import list_project_fields


def _sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


@dataclass
class FieldSummary:
    """Rollup of one mapped budget field."""
    field_id: int
    name: str
    is_default: bool
    is_custom: bool
    budget: Decimal
    grant: Decimal
    expenditure: Decimal
    budget_by_year: Dict[int, Decimal] = dataclass_field(default_factory=dict)
    expenditure_by_period: Dict[Period, Decimal] = dataclass_field(default_factory=dict)

    @property
    def balance(self) -> Decimal:
        """Budget minus expenditure; negative means over-spent."""
        return self.budget - self.expenditure

    def as_dict(self) -> Dict[str, Any]:
        return {
            'field_id': self.field_id,
            'field_name': self.name,
            'is_default': self.is_default,
            'is_custom': self.is_custom,
            'total_budget': self.budget,
            'total_grant_received': self.grant,
            'total_expenditure': self.expenditure,
            'balance': self.balance,
        }


@dataclass
class SummaryRow:
    """Grand totals over a set of field rows."""
    budget: Decimal
    grant: Decimal
    expenditure: Decimal
    field_count: int

    @property
    def balance(self) -> Decimal:
        return self.budget - self.expenditure

    def as_dict(self) -> Dict[str, Any]:
        return {
            'field_count': self.field_count,
            'total_budget': self.budget,
            'total_grant_received': self.grant,
            'total_expenditure': self.expenditure,
            'balance': self.balance,
        }


class ReconciliationEngine:
    """
    Read-only rollups for one project.

    The three ledgers are loaded once on construction; every method
    derives its figures from those rows.

    Attributes:
        project: The project being reported on.
    """

    def __init__(self, project: Project) -> None:
        """
        Initialize the engine and load the project's ledger rows.

        Args:
            project: The project to report on.
        """
        self.project = project
        self.mappings = list_project_fields(project)
        self.budget_entries = list(BudgetEntry.objects.filter(project=project))
        self.grant_entries = list(GrantEntry.objects.filter(project=project))
        self.expenditure_entries = list(ExpenditureEntry.objects.filter(project=project))

    # ------------------------------------------------------------------
    # Per-field totals
    # ------------------------------------------------------------------

    def field_total_budget(self, field_id: int) -> Decimal:
        return _sum(e.amount for e in self.budget_entries if e.field_id == field_id)

    def field_total_grant(self, field_id: int) -> Decimal:
        return _sum(e.amount for e in self.grant_entries if e.field_id == field_id)

    def field_total_expenditure(self, field_id: int) -> Decimal:
        return _sum(e.amount for e in self.expenditure_entries if e.field_id == field_id)

    def field_balance(self, field_id: int) -> Decimal:
        return self.field_total_budget(field_id) - self.field_total_expenditure(field_id)

    def period_expenditure(self, field_id: int, period: Period) -> Decimal:
        return _sum(
            e.amount for e in self.expenditure_entries
            if e.field_id == field_id and e.period == period
        )

    def total_for_year(self, year_number: int) -> Decimal:
        """Budget across all fields for one project year."""
        return _sum(e.amount for e in self.budget_entries if e.year_number == year_number)

    # ------------------------------------------------------------------
    # Rows and summaries
    # ------------------------------------------------------------------

    def field_rows(self) -> List[FieldSummary]:
        """One FieldSummary per mapped field, default fields first."""
        budget = defaultdict(lambda: ZERO)
        budget_by_year: Dict[int, Dict[int, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
        for e in self.budget_entries:
            budget[e.field_id] += e.amount
            budget_by_year[e.field_id][e.year_number] += e.amount

        grant = defaultdict(lambda: ZERO)
        for e in self.grant_entries:
            grant[e.field_id] += e.amount

        spent = defaultdict(lambda: ZERO)
        spent_by_period: Dict[int, Dict[Period, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))
        for e in self.expenditure_entries:
            spent[e.field_id] += e.amount
            spent_by_period[e.field_id][e.period] += e.amount

        return [
            FieldSummary(
                field_id=m.field_id,
                name=m.field.name,
                is_default=m.field.is_default,
                is_custom=m.is_custom,
                budget=budget[m.field_id],
                grant=grant[m.field_id],
                expenditure=spent[m.field_id],
                budget_by_year=dict(budget_by_year[m.field_id]),
                expenditure_by_period=dict(spent_by_period[m.field_id]),
            )
            for m in self.mappings
        ]

    @staticmethod
    def summary_row(rows: Iterable[FieldSummary]) -> SummaryRow:
        """Grand totals over exactly the given rows (e.g. one page)."""
        rows = list(rows)
        return SummaryRow(
            budget=_sum(r.budget for r in rows),
            grant=_sum(r.grant for r in rows),
            expenditure=_sum(r.expenditure for r in rows),
            field_count=len(rows),
        )

    # ------------------------------------------------------------------
    # Period-wise report
    # ------------------------------------------------------------------

    def periods(self) -> List[Period]:
        """Periods that have expenditure, in canonical column order."""
        return sorted({e.period for e in self.expenditure_entries})

    def period_columns(self) -> List[Dict[str, Any]]:
        start = self.project.start_date
        columns = []
        for period in self.periods():
            first, last = period_date_range(
                period.period_type, period.year_index, period.period_number, start
            )
            columns.append({
                **period.as_dict(),
                'label': format_period_label(
                    period.period_type, period.year_index, period.period_number, start
                ),
                'start': first,
                'end': last,
            })
        return columns

    def period_matrix(self) -> Dict[str, Any]:
        """
        Fields x periods expenditure matrix.

        Returns:
            {'columns', 'rows', 'column_totals', 'grand_total'} where each
            row carries one cell per column plus its total.
        """
        periods = self.periods()
        rows = []
        for summary in self.field_rows():
            cells = [summary.expenditure_by_period.get(p, ZERO) for p in periods]
            rows.append({
                'field_id': summary.field_id,
                'field_name': summary.name,
                'cells': cells,
                'total': summary.expenditure,
            })
        column_totals = [_sum(row['cells'][i] for row in rows) for i in range(len(periods))]
        return {
            'columns': self.period_columns(),
            'rows': rows,
            'column_totals': column_totals,
            'grand_total': _sum(row['total'] for row in rows),
        }

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def yearly_tracking(self) -> List[Dict[str, Any]]:
        """
        Budget, grant received and expenditure per project year.

        Grants and expenditure are placed in the project year containing
        their date. Years past the duration appear only if they have rows.
        """
        start = self.project.start_date
        budget = defaultdict(lambda: ZERO)
        for e in self.budget_entries:
            budget[e.year_number] += e.amount
        grant = defaultdict(lambda: ZERO)
        for e in self.grant_entries:
            grant[project_year_for_date(start, e.received_date)] += e.amount
        spent = defaultdict(lambda: ZERO)
        for e in self.expenditure_entries:
            spent[project_year_for_date(start, e.expenditure_date)] += e.amount

        last_year = max([self.project.max_year_number, *budget, *grant, *spent])
        return [
            {
                'year_number': year,
                'budget_amount': budget[year],
                'grant_received': grant[year],
                'expenditure_amount': spent[year],
                'balance': budget[year] - spent[year],
            }
            for year in range(1, last_year + 1)
        ]

    def missing_periods(self, today: date, period_type: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Reporting periods from the project start through today's period
        that have no expenditure at all.
        """
        period_type = period_type or self.project.reporting_type
        start = self.project.start_date
        reported = {e.period for e in self.expenditure_entries}
        missing = []
        for period in iter_periods(period_type, start, today, self.project.duration_years):
            if period in reported:
                continue
            first, last = period_date_range(
                period.period_type, period.year_index, period.period_number, start
            )
            missing.append({
                **period.as_dict(),
                'label': format_period_label(
                    period.period_type, period.year_index, period.period_number, start
                ),
                'start': first,
                'end': last,
            })
        return missing

    def budget_fields_with_grant_totals(self) -> List[Dict[str, Any]]:
        """Per mapped field: total budget, yearly budget and total grant received."""
        return [
            {
                'field_id': row.field_id,
                'field_name': row.name,
                'is_custom': row.is_custom,
                'total_budget': row.budget,
                'budget_by_year': {str(y): a for y, a in sorted(row.budget_by_year.items())},
                'total_grant_received': row.grant,
            }
            for row in self.field_rows()
        ]

    def budget_vs_expenditure(self, page: int = 1, page_size: Optional[int] = None) -> Dict[str, Any]:
        """
        Paginated per-field budget/grant/expenditure/balance rows.

        The summary row totals only the rows on the returned page.
        """
        page_size = page_size or getattr(settings, 'REPORT_PAGE_SIZE', 25)
        paginator = Paginator(self.field_rows(), page_size)
        page_obj = paginator.get_page(page)
        rows = list(page_obj.object_list)
        return {
            'rows': [r.as_dict() for r in rows],
            'summary': self.summary_row(rows).as_dict(),
            'page': page_obj.number,
            'page_size': page_size,
            'num_pages': paginator.num_pages,
            'total_fields': paginator.count,
        }


def portfolio_summary(projects: Iterable[Project]) -> Dict[str, Any]:
    """
    Funding overview across projects, grouped by funding agency.

    Returns:
        {'agencies': [...], 'totals': {...}} with contracted value, budget,
        grant received, expenditure and remaining budget.
    """
    projects = list(projects)
    project_ids = [p.pk for p in projects]

    def totals_by_project(model) -> Dict[int, Decimal]:
        totals = defaultdict(lambda: ZERO)
        for project_id, amount in model.objects.filter(project_id__in=project_ids).values_list('project_id', 'amount'):
            totals[project_id] += amount
        return totals

    budget = totals_by_project(BudgetEntry)
    grant = totals_by_project(GrantEntry)
    spent = totals_by_project(ExpenditureEntry)

    def empty() -> Dict[str, Any]:
        return {
            'project_count': 0,
            'total_value': ZERO,
            'total_budget': ZERO,
            'total_grant_received': ZERO,
            'total_expenditure': ZERO,
        }

    agencies: Dict[str, Dict[str, Any]] = defaultdict(empty)
    overall = empty()
    for project in projects:
        for bucket in (agencies[project.funding_agency or 'Unspecified'], overall):
            bucket['project_count'] += 1
            bucket['total_value'] += project.total_value
            bucket['total_budget'] += budget[project.pk]
            bucket['total_grant_received'] += grant[project.pk]
            bucket['total_expenditure'] += spent[project.pk]

    for bucket in [*agencies.values(), overall]:
        bucket['remaining'] = bucket['total_budget'] - bucket['total_expenditure']

    return {
        'agencies': [
            {'funding_agency': name, **agencies[name]}
            for name in sorted(agencies)
        ],
        'totals': overall,
    }
