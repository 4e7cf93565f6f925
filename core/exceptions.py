import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from activities.exceptions import EnrollmentError

logger = logging.getLogger('campus.api')


def custom_exception_handler(exc, context):
    """
    Turn anything a view lets escape into a JSON response.

    - EnrollmentError -> its own status and payload ({"error": ...})
    - DRF exceptions  -> wrapped as {"success": False, "status_code", "errors"}
    - anything else   -> logged, 500 {"error": ...}
    """
    if isinstance(exc, EnrollmentError):
        return Response(exc.as_payload(), status=exc.status_code)

    response = drf_exception_handler(exc, context)

    if response is not None:
        wrapped = Response(
            {
                "success": False,
                "status_code": response.status_code,
                "errors": response.data,
            },
            status=response.status_code,
        )
        for header in ("Retry-After", "WWW-Authenticate"):
            if header in response:
                wrapped[header] = response[header]
        return wrapped

    view = context.get("view")
    logger.exception(
        f"Unhandled API exception in {view.__class__.__name__ if view else 'unknown view'}",
        exc_info=exc,
    )

    return Response(
        {
            "success": False,
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "error": "Internal server error",
        },
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
