# activities/exceptions.py
"""
Rejections raised by the enrollment coordinator.

Each carries the HTTP status it maps to, so views can turn any of them into
a response without knowing which one fired.
"""
from rest_framework import status


class EnrollmentError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Enrollment request rejected"
    code = "enrollment_error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_payload(self) -> dict:
        return {"error": self.message}


class InvalidInput(EnrollmentError):
    default_message = "Invalid activity ID"
    code = "invalid_input"


class NotFound(EnrollmentError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Activity not found or not published"
    code = "not_found"


class ActivityClosed(EnrollmentError):
    default_message = "Cannot enroll in past activities"
    code = "activity_closed"


class ActivityFull(EnrollmentError):
    default_message = "Activity is full"
    code = "activity_full"


class AlreadyEnrolled(EnrollmentError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already enrolled in this activity"
    code = "already_enrolled"

    def __init__(self, message=None, status=None):
        super().__init__(message)
        # Status of the record that blocked us, when we know it
        self.status = status

    def as_payload(self) -> dict:
        payload = super().as_payload()
        if self.status:
            payload["status"] = self.status
        return payload
