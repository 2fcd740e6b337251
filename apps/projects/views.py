"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: JSON API views for projects, budget fields and the
             per-project field mappings.
-------------------------------------------------------------------------
"""
from django.http import HttpRequest, JsonResponse

from apps.core.clock import Clock, default_clock
from apps.core.exceptions import ValidationException
from apps.core.periods import PeriodType, format_period_label, period_date_range
from apps.core.views import APIView, json_response, parse_json_body, validated_data
from apps.projects import services
from apps.projects.forms import BudgetFieldForm, FieldIdsForm, FieldMappingForm, ProjectForm
from apps.projects.models import BudgetField, Project


class ProjectListView(APIView):
    """List and create projects."""

    def get(self, request: HttpRequest) -> JsonResponse:
        projects = Project.objects.all()
        return json_response([p.as_dict() for p in projects])

    def post(self, request: HttpRequest) -> JsonResponse:
        form = ProjectForm(data=parse_json_body(request))
        data = validated_data(form)
        project = services.create_project(data, user=request.user)
        return json_response(project.as_dict(), status=201)


class ProjectDetailView(APIView):
    """Retrieve, update or delete one project."""

    def get(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        payload = project.as_dict()
        payload['fields'] = [m.as_dict() for m in services.list_project_fields(project)]
        return json_response(payload)

    def put(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        form = ProjectForm.for_update(project, parse_json_body(request))
        validated_data(form)
        # Form validation mutates the instance; reload so the service
        # compares against the stored start date and duration.
        project.refresh_from_db()
        project = services.update_project(project, form.changed_values(), user=request.user)
        return json_response(project.as_dict())

    def delete(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        counts = services.delete_project(project, user=request.user)
        return json_response({'deleted': counts})


class CurrentPeriodView(APIView):
    """Reporting period containing today for a project."""

    clock: Clock = default_clock

    def get(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        period_type = request.GET.get('type', project.reporting_type)
        if period_type not in PeriodType.values:
            raise ValidationException(
                f"Unknown period type '{period_type}'.",
                details={'period_type': period_type}
            )
        today = self.clock.today()
        period = project.current_period(today, period_type)
        first, last = period_date_range(
            period.period_type, period.year_index, period.period_number, project.start_date
        )
        payload = period.as_dict()
        payload.update({
            'label': format_period_label(
                period.period_type, period.year_index, period.period_number, project.start_date
            ),
            'start': first,
            'end': last,
            'today': today,
        })
        return json_response(payload)


class BudgetFieldListView(APIView):
    """List all budget fields and create new ones."""

    def get(self, request: HttpRequest) -> JsonResponse:
        return json_response([f.as_dict() for f in BudgetField.objects.all()])

    def post(self, request: HttpRequest) -> JsonResponse:
        data = validated_data(BudgetFieldForm(data=parse_json_body(request)))
        field = services.create_field(data['name'], data['is_default'])
        return json_response(field.as_dict(), status=201)


class BudgetFieldDetailView(APIView):
    """Rename or delete a budget field."""

    def put(self, request: HttpRequest, field_id: int) -> JsonResponse:
        field = services.get_field(field_id)
        payload = parse_json_body(request)
        data = validated_data(BudgetFieldForm(data=payload, require_name=False))
        field = services.update_field(
            field,
            name=data['name'] if 'name' in payload else None,
            is_default=data['is_default'] if 'is_default' in payload else None,
        )
        return json_response(field.as_dict())

    def delete(self, request: HttpRequest, field_id: int) -> JsonResponse:
        field = services.get_field(field_id)
        services.delete_field(field)
        return json_response({'deleted': field_id})


class ProjectFieldListView(APIView):
    """Mapped fields of a project: list, map one, or replace the whole set."""

    def get(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        return json_response([m.as_dict() for m in services.list_project_fields(project)])

    def post(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        data = validated_data(FieldMappingForm(data=parse_json_body(request)))
        if data['field_id']:
            mapping = services.map_field(
                project, data['field_id'], is_custom=data['is_custom'], user=request.user
            )
        else:
            mapping = services.create_custom_field(project, data['name'], user=request.user)
        return json_response(mapping.as_dict(), status=201)

    def put(self, request: HttpRequest, project_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        data = validated_data(FieldIdsForm(data=parse_json_body(request)))
        diff = services.replace_all_mappings(project, data['field_ids'], user=request.user)
        diff['fields'] = [m.as_dict() for m in services.list_project_fields(project)]
        return json_response(diff)


class ProjectFieldDetailView(APIView):
    """Unmap a field from a project."""

    def delete(self, request: HttpRequest, project_id: int, field_id: int) -> JsonResponse:
        project = services.get_project(project_id)
        field = services.get_field(field_id)
        services.unmap_field(project, field, user=request.user)
        return json_response({'unmapped': field_id})
