"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for the budget ledger.
-------------------------------------------------------------------------
"""
from django.http import HttpRequest, JsonResponse

from apps.budgeting import services
from apps.budgeting.forms import BudgetEntryForm, BudgetTableForm
from apps.core.views import APIView, json_response, parse_json_body, validated_data
from apps.projects.services import get_field, get_project


class BudgetEntryListView(APIView):
    """
    Budget entries of a project.

    GET returns the rows and the year table, POST sets one cell and PUT
    replaces the whole table.
    """

    def get(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = get_project(project_id)
        entries = services.get_entries(project)
        table = services.year_table(project, entries)
        return json_response({
            'max_year_number': project.max_year_number,
            'entries': [e.as_dict() for e in entries],
            'year_table': {
                str(field_id): {str(year): amount for year, amount in years.items()}
                for field_id, years in table.items()
            },
        })

    def post(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = get_project(project_id)
        data = validated_data(BudgetEntryForm(data=parse_json_body(request)))
        field = get_field(data['field_id'])
        entry = services.set_budget(
            project, field, data['year_number'], data['amount'], user=request.user
        )
        return json_response(entry.as_dict())

    def put(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = get_project(project_id)
        form = BudgetTableForm(data=parse_json_body(request))
        validated_data(form)
        created = services.bulk_replace(project, form.cleaned_rows(), user=request.user)
        return json_response({'entries': [e.as_dict() for e in created]})
