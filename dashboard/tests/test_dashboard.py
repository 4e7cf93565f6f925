from datetime import timedelta

from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from activities.models import Activity, Participation
from activities.tests.utils import make_activity, make_user


def enroll(activity, user):
    Activity.objects.claim_seat(activity.pk)
    return Participation.objects.create(activity=activity, user=user)


class DashboardAPITestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()

        self.faculty = make_user("faculty", role="faculty", department="Physics")
        self.other_faculty = make_user("other", role="faculty")
        self.admin = make_user("admin", role="admin")
        self.alice = make_user("alice", department="Physics")
        self.bob = make_user("bob", department="Chemistry")

        self.lecture = make_activity(
            self.faculty,
            capacity=10,
            title="Quantum Lecture",
            department="Physics",
            category=Activity.CATEGORY_ACADEMIC,
        )
        self.lab = make_activity(
            self.faculty,
            capacity=4,
            title="Optics Lab",
            department="Physics",
            starts_in=timedelta(days=3),
        )
        self.draft = make_activity(self.faculty, capacity=5, title="Draft", status=Activity.STATUS_DRAFT)
        self.elsewhere = make_activity(
            self.other_faculty,
            capacity=20,
            title="Titration Basics",
            department="Chemistry",
        )

        enroll(self.lecture, self.alice)
        enroll(self.lecture, self.bob)
        enroll(self.lab, self.alice)
        Participation.objects.create(
            activity=self.elsewhere,
            user=self.alice,
            status=Participation.STATUS_CANCELLED,
        )

    def test_faculty_dashboard(self):
        self.client.force_authenticate(user=self.faculty)

        response = self.client.get(reverse("dashboard-faculty"))

        self.assertEqual(
            response.status_code,
            200,
            f"Status: {response.status_code}, Content: {getattr(response, 'data', response.content)}",
        )
        self.assertEqual(response.data["totalActivities"], 3)
        self.assertEqual(response.data["publishedActivities"], 2)
        self.assertEqual(response.data["totalEnrollments"], 3)
        self.assertEqual(response.data["totalParticipants"], 2)
        self.assertEqual(response.data["stats"]["draft"], 1)
        self.assertEqual(len(response.data["recentEnrollments"]), 3)
        self.assertEqual(
            [a["title"] for a in response.data["upcomingActivities"]],
            ["Quantum Lecture", "Optics Lab"],
        )

    def test_student_cannot_open_faculty_dashboard(self):
        self.client.force_authenticate(user=self.alice)
        response = self.client.get(reverse("dashboard-faculty"))
        self.assertEqual(response.status_code, 403)

    def test_student_dashboard(self):
        self.client.force_authenticate(user=self.alice)

        response = self.client.get(reverse("dashboard-student"))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["enrolledActivities"], 2)
        self.assertEqual(response.data["upcomingActivities"], 2)
        self.assertEqual(response.data["stats"]["cancelled"], 1)
        self.assertEqual(response.data["stats"]["waitlisted"], 0)
        self.assertEqual(len(response.data["enrollments"]), 3)
        # Published, upcoming and with seats left
        self.assertEqual(response.data["availableActivities"], 3)
        self.assertEqual(
            {a["title"] for a in response.data["recommendedActivities"]},
            {"Quantum Lecture", "Optics Lab"},
        )

    def test_admin_dashboard(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(reverse("dashboard-admin"))

        self.assertEqual(response.status_code, 200)
        stats = response.data["stats"]
        self.assertEqual(stats["totalUsers"], 5)
        self.assertEqual(stats["totalStudents"], 2)
        self.assertEqual(stats["totalFaculty"], 2)
        self.assertEqual(stats["totalActivities"], 4)
        self.assertEqual(stats["publishedActivities"], 3)
        self.assertEqual(stats["totalEnrollments"], 3)

        physics = next(d for d in response.data["departmentStats"] if d["department"] == "Physics")
        self.assertEqual(physics["count"], 2)
        self.assertEqual(physics["totalCapacity"], 14)
        self.assertEqual(physics["enrolledCount"], 3)

    def test_faculty_cannot_open_admin_dashboard(self):
        self.client.force_authenticate(user=self.faculty)
        response = self.client.get(reverse("dashboard-admin"))
        self.assertEqual(response.status_code, 403)

    def test_activity_analytics(self):
        self.client.force_authenticate(user=self.faculty)
        url = reverse("dashboard-activity-analytics", kwargs={"activity_id": str(self.lecture.pk)})

        response = self.client.get(url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["stats"]["enrolled"], 2)
        self.assertEqual(response.data["stats"]["availableSlots"], 8)
        self.assertEqual(response.data["stats"]["occupancyRate"], 20.0)
        self.assertEqual(
            sorted((d["department"], d["count"]) for d in response.data["departmentBreakdown"]),
            [("Chemistry", 1), ("Physics", 1)],
        )
        self.assertEqual(sum(day["count"] for day in response.data["enrollmentTimeline"]), 2)

    def test_analytics_limited_to_owner(self):
        self.client.force_authenticate(user=self.other_faculty)
        url = reverse("dashboard-activity-analytics", kwargs={"activity_id": str(self.lecture.pk)})

        response = self.client.get(url)

        self.assertEqual(response.status_code, 403)
