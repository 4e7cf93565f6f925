from .activities import (
    ActivityListCreateView,
    ActivityDetailView,
    ActivityParticipantsView,
    ActivityParticipantsExportView,
)
from .enrollments import (
    EnrollActivityView,
    CancelEnrollmentView,
    MyEnrollmentsView,
)
