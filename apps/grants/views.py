"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for the grant ledger.
-------------------------------------------------------------------------
"""
from django.http import HttpRequest, JsonResponse

from apps.core.views import APIView, json_response, parse_json_body, validated_data
from apps.grants import services
from apps.grants.forms import GrantReceiptForm
from apps.projects.services import get_project


class GrantEntryListView(APIView):
    """List grant receipts of a project or record a new one."""

    def get(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = get_project(project_id)
        history = [
            {
                'received_date': receipt['received_date'],
                'total': receipt['total'],
                'entries': [e.as_dict() for e in receipt['entries']],
            }
            for receipt in services.receipts(project)
        ]
        return json_response({
            'total_received': services.total_received(project),
            'receipts': history,
        })

    def post(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = get_project(project_id)
        data = validated_data(GrantReceiptForm(data=parse_json_body(request)))
        entries = services.record_receipt(
            project,
            data['received_date'],
            data['allocations'],
            remarks=data['remarks'],
            user=request.user,
        )
        return json_response({'entries': [e.as_dict() for e in entries]}, status=201)
