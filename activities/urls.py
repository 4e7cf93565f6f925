from django.urls import path

from .views import (
    ActivityListCreateView,
    ActivityDetailView,
    ActivityParticipantsView,
    ActivityParticipantsExportView,
    EnrollActivityView,
    CancelEnrollmentView,
    MyEnrollmentsView,
)

urlpatterns = [
    path("", ActivityListCreateView.as_view(), name="activity-list-create"),

    # Must come before the <activity_id> routes
    path("my/enrollments/", MyEnrollmentsView.as_view(), name="my-enrollments"),

    path("<str:activity_id>/", ActivityDetailView.as_view(), name="activity-detail"),
    path("<str:activity_id>/enroll/", EnrollActivityView.as_view(), name="activity-enroll"),
    path("<str:activity_id>/cancel/", CancelEnrollmentView.as_view(), name="activity-cancel"),
    path(
        "<str:activity_id>/participants/",
        ActivityParticipantsView.as_view(),
        name="activity-participants",
    ),
    path(
        "<str:activity_id>/participants/export/",
        ActivityParticipantsExportView.as_view(),
        name="activity-participants-export",
    ),
]
