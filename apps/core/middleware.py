"""
-------------------------------------------------------------------------
System: PFMS (Project Finance Management System)
Client: Local Government Department, Khyber Pakhtunkhwa
Team Lead: Jamil Shah
Developers: Ali Asghar, Akhtar Munir and Zarif Khan
Description: Middleware that turns PFMS exceptions raised by API views
             into structured JSON error responses.
-------------------------------------------------------------------------
"""
import logging
from typing import Optional

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from apps.core.exceptions import PFMSException

logger = logging.getLogger(__name__)


class APIExceptionMiddleware(MiddlewareMixin):
    """
    Convert PFMSException subclasses into JSON error bodies.

    Usage:
        Add to MIDDLEWARE in settings.py after AuthenticationMiddleware:
        'apps.core.middleware.APIExceptionMiddleware',

    Any other exception is left for Django's standard handling.
    """

    def process_exception(
        self,
        request: HttpRequest,
        exception: Exception
    ) -> Optional[HttpResponse]:
        """
        Map a PFMS exception to its HTTP status and error payload.

        Args:
            request: The incoming HTTP request.
            exception: The exception raised by the view.

        Returns:
            JsonResponse for PFMS exceptions, None otherwise.
        """
        if not isinstance(exception, PFMSException):
            return None

        logger.warning(
            f"{exception.error_code} on {request.method} {request.path}: {exception.message}",
            extra={'error_code': exception.error_code, 'path': request.path}
        )
        return JsonResponse(exception.to_dict(), status=exception.status_code)
