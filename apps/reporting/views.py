"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Read-only JSON views produced by the Reconciliation &
             Rollup Engine, plus the Excel period report.
-------------------------------------------------------------------------
"""
from django.conf import settings
from django.http import HttpRequest, HttpResponse

from apps.core.clock import Clock, default_clock
from apps.core.exceptions import ValidationException
from apps.core.periods import PeriodType
from apps.core.views import APIView, json_response
from apps.projects.models import Project
from apps.projects.services import get_project
from apps.reporting.cache import cached_portfolio, cached_report
from apps.reporting.exports import period_report_response
from apps.reporting.services import ReconciliationEngine, portfolio_summary

MAX_PAGE_SIZE = 200


def _positive_int(request: HttpRequest, name: str, default: int) -> int:
    raw = request.GET.get(name)
    if raw in (None, ''):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationException(f"{name} must be an integer.", details={name: raw})
    if value < 1:
        raise ValidationException(f"{name} must be 1 or greater.", details={name: raw})
    return value


class BudgetFieldsWithGrantsView(APIView):
    """Per-field budget and grant received totals."""

    def get(self, request: HttpRequest, project_id: int) -> HttpResponse:
        project = get_project(project_id)
        data = cached_report(
            project, 'fields_with_grants',
            lambda: ReconciliationEngine(project).budget_fields_with_grant_totals()
        )
        return json_response(data)


class BudgetVsExpenditureView(APIView):
    """Paginated budget vs expenditure rows with a summary over the page."""

    def get(self, request: HttpRequest, project_id: int) -> HttpResponse:
        project = get_project(project_id)
        page = _positive_int(request, 'page', 1)
        page_size = min(
            _positive_int(request, 'page_size', getattr(settings, 'REPORT_PAGE_SIZE', 25)),
            MAX_PAGE_SIZE
        )
        data = cached_report(
            project, 'budget_vs_expenditure',
            lambda: ReconciliationEngine(project).budget_vs_expenditure(page, page_size),
            page, page_size
        )
        return json_response(data)


class PeriodReportView(APIView):
    """Fields x periods expenditure matrix; ?format=xlsx downloads Excel."""

    def get(self, request: HttpRequest, project_id: int) -> HttpResponse:
        project = get_project(project_id)
        matrix = cached_report(
            project, 'period_matrix',
            lambda: ReconciliationEngine(project).period_matrix()
        )
        export_format = request.GET.get('format', 'json')
        if export_format == 'xlsx':
            return period_report_response(project, matrix)
        if export_format != 'json':
            raise ValidationException(
                "format must be 'json' or 'xlsx'.",
                details={'format': export_format}
            )
        return json_response(matrix)


class YearlyTrackingView(APIView):
    """Budget, grant received and expenditure per project year."""

    def get(self, request: HttpRequest, project_id: int) -> HttpResponse:
        project = get_project(project_id)
        data = cached_report(
            project, 'yearly_tracking',
            lambda: ReconciliationEngine(project).yearly_tracking()
        )
        return json_response(data)


class MissingPeriodsView(APIView):
    """Reporting periods up to today with no expenditure recorded."""

    clock: Clock = default_clock

    def get(self, request: HttpRequest, project_id: int) -> HttpResponse:
        project = get_project(project_id)
        period_type = request.GET.get('type', project.reporting_type)
        if period_type not in PeriodType.values:
            raise ValidationException(
                f"Unknown period type '{period_type}'.",
                details={'period_type': period_type}
            )
        today = self.clock.today()
        data = cached_report(
            project, 'missing_periods',
            lambda: ReconciliationEngine(project).missing_periods(today, period_type),
            period_type, today.isoformat()
        )
        return json_response(data)


class PortfolioSummaryView(APIView):
    """Totals across all projects grouped by funding agency."""

    def get(self, request: HttpRequest) -> HttpResponse:
        projects = list(Project.objects.order_by('pk'))
        data = cached_portfolio(projects, lambda: portfolio_summary(projects))
        return json_response(data)
