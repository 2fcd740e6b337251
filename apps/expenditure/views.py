"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for the expenditure ledger.
-------------------------------------------------------------------------
"""
from django.http import HttpRequest, JsonResponse

from apps.core.exceptions import ValidationException
from apps.core.services import ZERO
from apps.core.views import APIView, json_response, parse_json_body, validated_data
from apps.expenditure import services
from apps.expenditure.forms import BulkExpenditureForm, ExpenditureForm, ExpenditureUpdateForm
from apps.projects.services import get_project


class ExpenditureListView(APIView):
    """
    Expenditure rows of a project.

    GET supports ?group=period|year. POST records one row, or a bulk
    submission when the body carries a "rows" list.
    """

    def get(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = get_project(project_id)
        entries = services.get_entries(project)
        group = request.GET.get('group')

        if group == 'period':
            groups = services.group_by_period(entries)
        elif group == 'year':
            groups = services.group_by_year(entries)
        elif group:
            raise ValidationException(
                "group must be 'period' or 'year'.",
                details={'group': group}
            )
        else:
            return json_response({'entries': [e.as_dict() for e in entries]})

        for item in groups:
            rows = item['entries']
            item['entries'] = [e.as_dict() for e in rows]
            item['total'] = sum((e.amount for e in rows), ZERO)
        return json_response({'groups': groups})

    def post(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = get_project(project_id)
        payload = parse_json_body(request)

        if 'rows' in payload:
            data = validated_data(BulkExpenditureForm(data=payload))
            entries = services.submit_bulk(
                project,
                data['year_index'],
                data['period_type'],
                data['period_number'],
                data['expenditure_date'],
                data['rows'],
                user=request.user,
            )
        else:
            data = validated_data(ExpenditureForm(data=payload))
            entries = [services.record_expenditure(
                project,
                data['field_id'],
                data['year_index'],
                data['period_type'],
                data['period_number'],
                data['amount'],
                data['expenditure_date'],
                remarks=data['remarks'],
                user=request.user,
            )]
        return json_response({'entries': [e.as_dict() for e in entries]}, status=201)


class ExpenditureDetailView(APIView):
    """Correct or delete one expenditure row."""

    def put(self, request: HttpRequest, project_id: int, entry_id: int) -> JsonResponse:
        project = get_project(project_id)
        entry = services.get_entry(project, entry_id)
        form = ExpenditureUpdateForm(data=parse_json_body(request))
        validated_data(form)
        entry = services.update_expenditure(entry, form.changes(), user=request.user)
        return json_response(entry.as_dict())

    def delete(self, request: HttpRequest, project_id: int, entry_id: int) -> JsonResponse:
        project = get_project(project_id)
        services.delete_expenditure(project, entry_id, user=request.user)
        return json_response({'deleted': entry_id})
