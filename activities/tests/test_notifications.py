import smtplib
import uuid
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings

from activities.emails import send_enrollment_confirmation
from activities.models import Participation
from activities.notifications import dispatch_enrollment_confirmation
from activities.tasks import send_enrollment_confirmation_task
from activities.tests.utils import make_activity, make_user


class DispatchTests(TestCase):
    def test_queues_task_with_string_id(self):
        pid = uuid.uuid4()
        with mock.patch.object(send_enrollment_confirmation_task, "delay") as delay:
            dispatch_enrollment_confirmation(pid)
        delay.assert_called_once_with(str(pid))

    def test_queue_failure_is_logged_not_raised(self):
        with mock.patch.object(
            send_enrollment_confirmation_task,
            "delay",
            side_effect=ConnectionError("broker unreachable"),
        ):
            with self.assertLogs("campus.notifications", level="ERROR") as logs:
                dispatch_enrollment_confirmation(uuid.uuid4())

        self.assertIn("Failed to queue enrollment confirmation", logs.output[0])


@override_settings(FRONTEND_URL="https://campus.example.edu/")
class ConfirmationEmailTests(TestCase):
    def setUp(self):
        faculty = make_user("faculty", role="faculty")
        self.student = make_user("alice", first_name="Alice", last_name="Rao")
        self.activity = make_activity(faculty, capacity=10, title="Drone Racing Meetup")
        self.participation = Participation.objects.create(activity=self.activity, user=self.student)

    def test_email_content(self):
        self.assertTrue(send_enrollment_confirmation(self.participation))

        self.assertEqual(len(mail.outbox), 1)
        message = mail.outbox[0]
        self.assertEqual(message.subject, "Enrollment Confirmed - Drone Racing Meetup")
        self.assertEqual(message.to, ["alice@college.edu"])
        self.assertIn("Hi Alice Rao", message.body)
        self.assertIn("https://campus.example.edu/my-activities", message.body)
        html, mimetype = message.alternatives[0]
        self.assertEqual(mimetype, "text/html")
        self.assertIn("Drone Racing Meetup", html)

    def test_title_is_escaped_in_html(self):
        self.activity.title = "<b>Jam</b>"
        self.activity.save()

        send_enrollment_confirmation(self.participation)

        html, _ = mail.outbox[0].alternatives[0]
        self.assertNotIn("<b>Jam</b>", html)
        self.assertIn("&lt;b&gt;Jam&lt;/b&gt;", html)

    def test_no_email_on_file(self):
        self.student.email = ""
        self.student.save()

        self.assertFalse(send_enrollment_confirmation(self.participation))
        self.assertEqual(len(mail.outbox), 0)


class ConfirmationTaskTests(TestCase):
    def setUp(self):
        faculty = make_user("faculty", role="faculty")
        self.student = make_user("alice")
        self.activity = make_activity(faculty, capacity=10)
        self.participation = Participation.objects.create(activity=self.activity, user=self.student)

    def run_task(self, participation_id):
        return send_enrollment_confirmation_task.apply(args=[str(participation_id)]).get()

    def test_sends_email(self):
        self.assertEqual(self.run_task(self.participation.pk), "sent")
        self.assertEqual(len(mail.outbox), 1)

    def test_missing_participation(self):
        self.assertEqual(self.run_task(uuid.uuid4()), "participation_not_found")
        self.assertEqual(len(mail.outbox), 0)

    def test_cancelled_before_delivery(self):
        Participation.objects.mark_cancelled(self.participation.pk)

        self.assertEqual(self.run_task(self.participation.pk), "not_enrolled")
        self.assertEqual(len(mail.outbox), 0)

    def test_student_without_email(self):
        self.student.email = ""
        self.student.save()

        self.assertEqual(self.run_task(self.participation.pk), "no_email")

    def test_retries_then_gives_up(self):
        with mock.patch(
            "activities.tasks.send_enrollment_confirmation",
            side_effect=smtplib.SMTPException("relay refused"),
        ) as sender:
            with self.assertLogs("campus.notifications", level="WARNING") as logs:
                outcome = self.run_task(self.participation.pk)

        self.assertEqual(outcome, "failed")
        self.assertEqual(sender.call_count, send_enrollment_confirmation_task.max_retries + 1)
        self.assertTrue(any("Giving up" in line for line in logs.output))

        # Delivery failure never touches the enrollment
        self.participation.refresh_from_db()
        self.assertEqual(self.participation.status, Participation.STATUS_ENROLLED)
