"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: URL configuration for the reporting module.
-------------------------------------------------------------------------
"""
from django.urls import path

from apps.reporting.views import (
    BudgetFieldsWithGrantsView, BudgetVsExpenditureView, PeriodReportView,
    YearlyTrackingView, MissingPeriodsView, PortfolioSummaryView,
)

app_name = 'reporting'

urlpatterns = [
    path(
        'projects/<int:project_id>/budget-fields-with-grants/',
        BudgetFieldsWithGrantsView.as_view(),
        name='fields_with_grants'
    ),
    path(
        'projects/<int:project_id>/budget-vs-expenditure/',
        BudgetVsExpenditureView.as_view(),
        name='budget_vs_expenditure'
    ),
    path('projects/<int:project_id>/period-report/', PeriodReportView.as_view(), name='period_report'),
    path('projects/<int:project_id>/yearly-tracking/', YearlyTrackingView.as_view(), name='yearly_tracking'),
    path('projects/<int:project_id>/missing-periods/', MissingPeriodsView.as_view(), name='missing_periods'),
    path('portfolio-summary/', PortfolioSummaryView.as_view(), name='portfolio_summary'),
]
