from django.urls import path

from dashboard.views.dashboard import (
    AdminDashboardView,
    FacultyDashboardView,
    StudentDashboardView,
)
from dashboard.views.analytics import ActivityAnalyticsView

urlpatterns = [
    path("faculty/", FacultyDashboardView.as_view(), name="dashboard-faculty"),
    path("student/", StudentDashboardView.as_view(), name="dashboard-student"),
    path("admin/", AdminDashboardView.as_view(), name="dashboard-admin"),
    path(
        "analytics/<str:activity_id>/",
        ActivityAnalyticsView.as_view(),
        name="dashboard-activity-analytics",
    ),
]
