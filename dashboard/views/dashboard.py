# dashboard/views/dashboard.py
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from activities.permissions import IsFacultyOrAdmin, IsPlatformAdmin, IsStudent
from activities.views.generics import api_error
from dashboard.services.dashboard import (
    get_admin_dashboard,
    get_faculty_dashboard,
    get_student_dashboard,
)

logger = logging.getLogger('campus.dashboard')


class FacultyDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsFacultyOrAdmin]

    def get(self, request):
        try:
            data = get_faculty_dashboard(request.user)
        except DatabaseError:
            logger.exception(f"Faculty dashboard error: user={request.user.id}")
            return api_error("Failed to load dashboard", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(data)


class StudentDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsStudent]

    def get(self, request):
        try:
            data = get_student_dashboard(request.user)
        except DatabaseError:
            logger.exception(f"Student dashboard error: user={request.user.id}")
            return api_error("Failed to load dashboard", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(data)


class AdminDashboardView(APIView):
    permission_classes = [IsAuthenticated, IsPlatformAdmin]

    def get(self, request):
        try:
            data = get_admin_dashboard()
        except DatabaseError:
            logger.exception("Admin dashboard error")
            return api_error("Failed to load dashboard", status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(data)
