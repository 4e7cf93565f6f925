from datetime import timedelta

from django.contrib.auth import get_user_model
from django.utils import timezone

from activities.models import Activity

User = get_user_model()


def make_user(username, role="student", **extra):
    extra.setdefault("email", f"{username}@college.edu")
    return User.objects.create_user(
        username=username,
        password="testpass123",
        role=role,
        **extra,
    )


def make_activity(created_by, capacity=1, status=Activity.STATUS_PUBLISHED, starts_in=timedelta(days=1), **extra):
    start = timezone.now() + starts_in
    fields = {
        "title": "Robotics Workshop",
        "description": "Build a line follower in an afternoon.",
        "start_date": start,
        "end_date": start + timedelta(hours=3),
        "location": "Lab 3, Block A",
        "department": "Computer Science",
        "category": Activity.CATEGORY_WORKSHOP,
        "available_seats": capacity,
    }
    fields.update(extra)
    return Activity.objects.create(
        capacity=capacity,
        created_by=created_by,
        status=status,
        **fields,
    )
