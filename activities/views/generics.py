from rest_framework.pagination import LimitOffsetPagination
from rest_framework.response import Response
from rest_framework import status


def api_error(message: str, status_code=status.HTTP_400_BAD_REQUEST, **extra):
    """
    Small helper to standardize error responses across the activities app.
    Always returns: {"error": "<message>", ...extra} with the given status code.
    """
    payload = {"error": message}
    payload.update(extra)
    return Response(payload, status=status_code)


def enrollment_error_response(exc):
    """Turn an EnrollmentError into its response."""
    return Response(exc.as_payload(), status=exc.status_code)


def parse_positive_int(value, default, maximum=None):
    try:
        parsed = int(value) if value is not None else default
    except (TypeError, ValueError):
        return None
    if parsed < 1:
        return None
    if maximum is not None:
        parsed = min(parsed, maximum)
    return parsed


class ParticipantPagination(LimitOffsetPagination):
    default_limit = 50
    max_limit = 500
