# dashboard/services/analytics.py

from django.db.models import Count
from django.db.models.functions import TruncDate

from activities.models import Participation


def get_activity_analytics(activity):
    """
    Enrollment breakdown for a single activity.
    """
    participations = Participation.objects.filter(activity=activity)

    by_status = dict(
        participations.order_by().values_list("status").annotate(total=Count("id"))
    )

    occupancy_rate = round((activity.enrolled_count / activity.capacity) * 100, 2)

    enrolled_qs = participations.filter(status=Participation.STATUS_ENROLLED)

    department_breakdown = (
        enrolled_qs
        .values("user__department")
        .annotate(count=Count("id"))
        .order_by("-count")
    )

    timeline = (
        enrolled_qs
        .annotate(day=TruncDate("enrolled_at"))
        .values("day")
        .annotate(count=Count("id"))
        .order_by("day")
    )

    return {
        "activity": {
            "id": str(activity.id),
            "title": activity.title,
            "startDate": activity.start_date,
            "status": activity.status,
        },
        "stats": {
            "totalCapacity": activity.capacity,
            "availableSlots": activity.available_seats,
            "enrolled": by_status.get(Participation.STATUS_ENROLLED, 0),
            "waitlisted": by_status.get(Participation.STATUS_WAITLISTED, 0),
            "cancelled": by_status.get(Participation.STATUS_CANCELLED, 0),
            "occupancyRate": occupancy_rate,
        },
        "departmentBreakdown": [
            {"department": row["user__department"], "count": row["count"]}
            for row in department_breakdown
        ],
        "enrollmentTimeline": [
            {"date": row["day"].isoformat() if row["day"] else None, "count": row["count"]}
            for row in timeline
        ],
    }
