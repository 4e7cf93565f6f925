import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from activities import enrollment
from activities.exceptions import EnrollmentError
from activities.models import Participation
from activities.permissions import IsStudent
from activities.serializers import MyEnrollmentSerializer, ParticipationSerializer
from activities.throttles import EnrollmentThrottle
from .generics import api_error, enrollment_error_response

logger = logging.getLogger('campus.activities')


class EnrollActivityView(APIView):
    """
    POST /api/activities/<activity_id>/enroll/
    """
    permission_classes = [IsAuthenticated, IsStudent]
    throttle_classes = [EnrollmentThrottle]

    def post(self, request, activity_id):
        try:
            result = enrollment.enroll(activity_id, request.user)
        except EnrollmentError as exc:
            return enrollment_error_response(exc)
        except DatabaseError:
            logger.exception(f"Enrollment error: user={request.user.id}, activity={activity_id}")
            return api_error("Failed to enroll in activity", status.HTTP_500_INTERNAL_SERVER_ERROR)

        participation = result.participation
        return Response(
            {
                "message": "Successfully enrolled in activity",
                "enrollmentId": str(participation.id),
                "participation": ParticipationSerializer(participation).data,
                "remainingSlots": result.seats_remaining,
            },
            status=status.HTTP_200_OK,
        )


class CancelEnrollmentView(APIView):
    """
    POST /api/activities/<activity_id>/cancel/
    """
    permission_classes = [IsAuthenticated, IsStudent]

    def post(self, request, activity_id):
        try:
            enrollment.cancel(activity_id, request.user)
        except EnrollmentError as exc:
            return enrollment_error_response(exc)
        except DatabaseError:
            logger.exception(f"Cancel enrollment error: user={request.user.id}, activity={activity_id}")
            return api_error("Failed to cancel enrollment", status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({"message": "Enrollment cancelled successfully"})


class MyEnrollmentsView(APIView):
    """
    GET /api/activities/my/enrollments/?status=enrolled
    """
    permission_classes = [IsAuthenticated, IsStudent]

    def get(self, request):
        qs = (
            Participation.objects
            .filter(user=request.user)
            .select_related("activity")
            .order_by("-enrolled_at")
        )

        status_param = request.query_params.get("status")
        if status_param:
            if status_param not in dict(Participation.STATUS_CHOICES):
                return api_error("Invalid status")
            qs = qs.filter(status=status_param)

        return Response({"enrollments": MyEnrollmentSerializer(qs, many=True).data})
