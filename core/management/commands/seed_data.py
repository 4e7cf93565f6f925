from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from activities.models import Activity

User = get_user_model()


FACULTY = [
    ("dr.sharma@college.edu", "Rajesh", "Sharma", "Computer Science"),
    ("prof.patel@college.edu", "Priya", "Patel", "Electronics"),
    ("dr.kumar@college.edu", "Amit", "Kumar", "Mechanical"),
]

STUDENTS = [
    ("student1@college.edu", "Arjun", "Verma", "Computer Science", "CS2021001"),
    ("student2@college.edu", "Priya", "Singh", "Computer Science", "CS2021002"),
    ("student3@college.edu", "Rahul", "Mehta", "Electronics", "EC2021001"),
    ("student4@college.edu", "Sneha", "Desai", "Mechanical", "ME2021001"),
    ("student5@college.edu", "Vikram", "Rao", "Computer Science", "CS2021003"),
]

# (title, days from now, duration hours, location, capacity, department, category, faculty index)
ACTIVITIES = [
    ("AI & Machine Learning Workshop", 7, 4, "Computer Lab, Block A", 50, "Computer Science", Activity.CATEGORY_WORKSHOP, 0),
    ("Annual Tech Fest", 30, 48, "Main Auditorium", 500, "All Departments", Activity.CATEGORY_TECHNICAL, 0),
    ("IoT and Smart Systems Seminar", 14, 3, "Seminar Hall, Block B", 100, "Electronics", Activity.CATEGORY_SEMINAR, 1),
    ("Cultural Night", 21, 5, "Open Air Theatre", 300, "All Departments", Activity.CATEGORY_CULTURAL, 1),
    ("Robotics Build Challenge", 10, 6, "Workshop Bay, Block C", 2, "Mechanical", Activity.CATEGORY_COMPETITION, 2),
]


class Command(BaseCommand):
    help = "Seeds the database with sample faculty, students and activities"

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default="Campus@123",
            help="Password set on every seeded account",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]
        self.stdout.write("Seeding data...")

        admin, created = User.objects.get_or_create(
            username="admin",
            defaults={"email": "admin@college.edu", "role": User.ROLE_ADMIN, "is_staff": True},
        )
        if created:
            admin.set_password(password)
            admin.save()

        faculty = []
        for email, first, last, department in FACULTY:
            faculty.append(self._user(email, first, last, User.ROLE_FACULTY, department, password))

        for email, first, last, department, roll in STUDENTS:
            self._user(email, first, last, User.ROLE_STUDENT, department, password, roll_number=roll)

        now = timezone.now()
        for title, days, hours, location, capacity, department, category, owner in ACTIVITIES:
            start = now + timedelta(days=days)
            activity, created = Activity.objects.get_or_create(
                title=title,
                defaults={
                    "description": f"{title} at {location}. Open to registered students.",
                    "start_date": start,
                    "end_date": start + timedelta(hours=hours),
                    "location": location,
                    "capacity": capacity,
                    "available_seats": capacity,
                    "department": department,
                    "category": category,
                    "created_by": faculty[owner],
                    "status": Activity.STATUS_PUBLISHED,
                },
            )
            if created:
                self.stdout.write(f"Created activity: {activity.title}")

        self.stdout.write(self.style.SUCCESS("Seeding complete"))

    def _user(self, email, first, last, role, department, password, roll_number=None):
        user, created = User.objects.get_or_create(
            username=email.split("@")[0],
            defaults={
                "email": email,
                "first_name": first,
                "last_name": last,
                "role": role,
                "department": department,
                "roll_number": roll_number,
            },
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(f"Created {role}: {email}")
        return user
