# dashboard/services/dashboard.py

from django.contrib.auth import get_user_model
from django.db.models import Count, F, Sum

from activities.datetime_utils import now
from activities.models import Activity, Participation
from activities.serializers import (
    ActivitySerializer,
    ActivitySummarySerializer,
    MyEnrollmentSerializer,
    ParticipantSerializer,
)

User = get_user_model()


def get_faculty_dashboard(user):
    activities_qs = Activity.objects.filter(created_by=user).order_by("-created_at")

    status_counts = dict(
        activities_qs.order_by().values_list("status").annotate(total=Count("id"))
    )

    enrolled_qs = Participation.objects.enrolled().filter(activity__created_by=user)
    total_enrollments = enrolled_qs.count()
    total_participants = enrolled_qs.values("user_id").distinct().count()

    recent_enrollments = (
        enrolled_qs
        .select_related("user", "activity")
        .order_by("-enrolled_at")[:10]
    )

    upcoming_activities = (
        activities_qs
        .filter(status=Activity.STATUS_PUBLISHED, start_date__gte=now())
        .order_by("start_date")[:5]
    )

    published = status_counts.get(Activity.STATUS_PUBLISHED, 0)

    return {
        "totalActivities": activities_qs.count(),
        "publishedActivities": published,
        "totalEnrollments": total_enrollments,
        "totalParticipants": total_participants,
        "stats": {
            "published": published,
            "draft": status_counts.get(Activity.STATUS_DRAFT, 0),
            "completed": status_counts.get(Activity.STATUS_COMPLETED, 0),
            "totalEnrollments": total_enrollments,
        },
        "activities": ActivitySerializer(activities_qs, many=True).data,
        "recentEnrollments": [
            {
                **ParticipantSerializer(p).data,
                "activity": {"id": str(p.activity_id), "title": p.activity.title},
            }
            for p in recent_enrollments
        ],
        "upcomingActivities": ActivitySerializer(upcoming_activities, many=True).data,
    }


def get_student_dashboard(user):
    current = now()

    enrollments = list(
        Participation.objects
        .filter(user=user)
        .select_related("activity")
        .order_by("-enrolled_at")
    )

    def count(status):
        return sum(1 for e in enrollments if e.status == status)

    enrolled = [e for e in enrollments if e.status == Participation.STATUS_ENROLLED]
    completed_count = sum(1 for e in enrolled if e.activity.status == Activity.STATUS_COMPLETED)
    upcoming = [
        e for e in enrolled
        if e.activity.status == Activity.STATUS_PUBLISHED and e.activity.start_date >= current
    ]

    open_qs = Activity.objects.published().filter(start_date__gte=current, available_seats__gt=0)

    recommended_qs = open_qs
    if user.department:
        recommended_qs = recommended_qs.filter(department=user.department)
    recommended = recommended_qs.order_by("start_date")[:5]

    return {
        "enrolledActivities": len(enrolled),
        "upcomingActivities": len(upcoming),
        "completedActivities": completed_count,
        "availableActivities": open_qs.count(),
        "stats": {
            "enrolled": len(enrolled),
            "waitlisted": count(Participation.STATUS_WAITLISTED),
            "cancelled": count(Participation.STATUS_CANCELLED),
            "completed": completed_count,
        },
        "enrollments": MyEnrollmentSerializer(enrollments, many=True).data,
        "upcomingEnrollments": MyEnrollmentSerializer(upcoming, many=True).data,
        "recommendedActivities": ActivitySummarySerializer(recommended, many=True).data,
    }


def get_admin_dashboard():
    published_qs = Activity.objects.published()

    department_stats = (
        published_qs
        .values("department")
        .annotate(
            count=Count("id"),
            totalCapacity=Sum("capacity"),
            enrolledCount=Sum(F("capacity") - F("available_seats")),
        )
        .order_by("-count", "department")
    )

    category_stats = (
        published_qs
        .values("category")
        .annotate(count=Count("id"))
        .order_by("-count", "category")
    )

    recent_users = User.objects.order_by("-date_joined")[:10]
    recent_activities = Activity.objects.select_related("created_by").order_by("-created_at")[:10]

    return {
        "stats": {
            "totalUsers": User.objects.count(),
            "totalStudents": User.objects.filter(role=User.ROLE_STUDENT).count(),
            "totalFaculty": User.objects.filter(role=User.ROLE_FACULTY).count(),
            "totalActivities": Activity.objects.count(),
            "publishedActivities": published_qs.count(),
            "totalEnrollments": Participation.objects.enrolled().count(),
        },
        "departmentStats": list(department_stats),
        "categoryStats": list(category_stats),
        "recentUsers": [
            {
                "id": u.id,
                "username": u.username,
                "email": u.email,
                "role": u.role,
                "department": u.department,
                "date_joined": u.date_joined,
            }
            for u in recent_users
        ],
        "recentActivities": ActivitySerializer(recent_activities, many=True).data,
    }
