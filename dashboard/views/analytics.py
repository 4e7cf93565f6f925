# dashboard/views/analytics.py

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from activities.permissions import IsFacultyOrAdmin, user_can_manage_activity
from activities.views.activities import load_activity
from activities.views.generics import api_error
from dashboard.services.analytics import get_activity_analytics


class ActivityAnalyticsView(APIView):
    permission_classes = [IsAuthenticated, IsFacultyOrAdmin]

    def get(self, request, activity_id):
        activity, error = load_activity(activity_id)
        if error:
            return error

        if not user_can_manage_activity(request.user, activity):
            return api_error("Not authorized", status.HTTP_403_FORBIDDEN)

        return Response(get_activity_analytics(activity))
