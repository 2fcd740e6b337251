"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Shared building blocks for the JSON API views: the base
             view class, request body parsing and serialisation helpers.
-------------------------------------------------------------------------
"""
import json
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Union

from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.serializers.json import DjangoJSONEncoder
from django.forms import Form
from django.http import HttpRequest, JsonResponse
from django.views import View

from apps.core.exceptions import ValidationException


class PFMSJSONEncoder(DjangoJSONEncoder):
    """JSON encoder that keeps Decimal amounts exact by emitting strings."""

    def default(self, o: Any) -> Any:
        if isinstance(o, Decimal):
            return f"{o:.2f}"
        return super().default(o)


def json_response(data: Union[Dict, List], status: int = 200) -> JsonResponse:
    return JsonResponse(data, status=status, safe=False, encoder=PFMSJSONEncoder)


def parse_json_body(request: HttpRequest) -> Dict[str, Any]:
    """
    Decode the JSON request body.

    Raises:
        ValidationException: If the body is not a JSON object.
    """
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationException(f"Invalid JSON: {e}")
    if not isinstance(payload, dict):
        raise ValidationException("Request body must be a JSON object.")
    return payload


def validated_data(form: Form) -> Dict[str, Any]:
    """
    Return a bound form's cleaned data or raise its errors.

    Raises:
        ValidationException: With the per-field messages in details.
    """
    if not form.is_valid():
        errors = {
            field: [error['message'] for error in field_errors]
            for field, field_errors in form.errors.get_json_data().items()
        }
        raise ValidationException(details={'errors': errors})
    return form.cleaned_data


def iso_date(value: date) -> str:
    return value.isoformat() if value else None


class APIView(LoginRequiredMixin, View):
    """
    Base class for PFMS JSON endpoints.

    Unauthenticated requests receive 403 instead of a login redirect.
    PFMS exceptions raised by handlers are rendered by
    APIExceptionMiddleware.
    """

    raise_exception = True
    http_method_names = ['get', 'post', 'put', 'delete']
