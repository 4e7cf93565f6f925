import uuid
from datetime import timedelta
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase

from activities import enrollment
from activities.exceptions import (
    ActivityClosed,
    ActivityFull,
    AlreadyEnrolled,
    InvalidInput,
    NotFound,
)
from activities.models import Activity, Participation
from activities.tests.utils import make_activity, make_user


def seats(activity):
    return Activity.objects.seats_left(activity.pk)


class EnrollTests(TestCase):
    def setUp(self):
        self.faculty = make_user("faculty", role="faculty")
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.activity = make_activity(self.faculty, capacity=2)

    def test_enroll_claims_seat_and_creates_participation(self):
        with mock.patch("activities.enrollment.dispatch_enrollment_confirmation") as dispatch:
            with self.captureOnCommitCallbacks(execute=True):
                result = enrollment.enroll(self.activity.pk, self.alice)

        self.assertEqual(result.seats_remaining, 1)
        self.assertEqual(result.participation.status, Participation.STATUS_ENROLLED)
        self.assertEqual(result.participation.user, self.alice)
        self.assertEqual(seats(self.activity), 1)
        dispatch.assert_called_once_with(result.participation.pk)

    def test_accepts_string_id(self):
        with mock.patch("activities.enrollment.dispatch_enrollment_confirmation"):
            result = enrollment.enroll(str(self.activity.pk), self.alice)
        self.assertEqual(result.seats_remaining, 1)

    def test_malformed_id(self):
        with self.assertRaises(InvalidInput):
            enrollment.enroll("not-a-uuid", self.alice)

    def test_unknown_activity(self):
        with self.assertRaises(NotFound):
            enrollment.enroll(uuid.uuid4(), self.alice)

    def test_draft_activity_is_not_found(self):
        draft = make_activity(self.faculty, capacity=5, status=Activity.STATUS_DRAFT)

        with self.assertRaises(NotFound):
            enrollment.enroll(draft.pk, self.alice)
        self.assertEqual(seats(draft), 5)

    def test_started_activity_is_closed(self):
        past = make_activity(self.faculty, capacity=5, starts_in=-timedelta(hours=1))

        with self.assertRaises(ActivityClosed):
            enrollment.enroll(past.pk, self.alice)
        self.assertEqual(seats(past), 5)

    def test_duplicate_enrollment(self):
        with mock.patch("activities.enrollment.dispatch_enrollment_confirmation"):
            enrollment.enroll(self.activity.pk, self.alice)

        with self.assertRaises(AlreadyEnrolled) as ctx:
            enrollment.enroll(self.activity.pk, self.alice)

        self.assertEqual(ctx.exception.status, Participation.STATUS_ENROLLED)
        self.assertEqual(seats(self.activity), 1)

    def test_full_activity(self):
        full = make_activity(self.faculty, capacity=1, available_seats=0)

        with self.assertRaises(ActivityFull):
            enrollment.enroll(full.pk, self.alice)
        self.assertFalse(Participation.objects.filter(activity=full).exists())

    def test_rejections_do_not_mutate_seats(self):
        full = make_activity(self.faculty, capacity=1)
        with mock.patch("activities.enrollment.dispatch_enrollment_confirmation"):
            enrollment.enroll(full.pk, self.alice)

        for _ in range(3):
            with self.assertRaises(ActivityFull):
                enrollment.enroll(full.pk, self.bob)
            with self.assertRaises(AlreadyEnrolled):
                enrollment.enroll(full.pk, self.alice)

        self.assertEqual(seats(full), 0)
        self.assertEqual(Participation.objects.filter(activity=full).count(), 1)

    def test_losing_the_last_seat_race(self):
        last_seat = make_activity(self.faculty, capacity=1)
        calls = []

        def other_request_takes_seat(activity_id, user_id):
            calls.append(activity_id)
            if len(calls) == 2:
                # Between the pre-check and the decrement
                Activity.objects.filter(pk=activity_id).update(available_seats=0)
            return None

        with mock.patch.object(Participation.objects, "active_for", side_effect=other_request_takes_seat):
            with self.captureOnCommitCallbacks() as callbacks:
                with self.assertRaises(ActivityFull) as ctx:
                    enrollment.enroll(last_seat.pk, self.alice)

        self.assertEqual(ctx.exception.message, "Activity is full (seats taken)")
        self.assertFalse(Participation.objects.filter(activity=last_seat).exists())
        self.assertEqual(callbacks, [])

    def test_own_parallel_request_takes_last_seat(self):
        last_seat = make_activity(self.faculty, capacity=1)
        real_active_for = Participation.objects.active_for
        calls = []

        def parallel_request_commits(activity_id, user_id):
            calls.append(activity_id)
            if len(calls) == 2:
                # Same user, other request: claims the seat and inserts the row
                Activity.objects.claim_seat(activity_id)
                Participation.objects.create(activity_id=activity_id, user_id=user_id)
                return None
            if len(calls) > 2:
                return real_active_for(activity_id, user_id)
            return None

        with mock.patch.object(Participation.objects, "active_for", side_effect=parallel_request_commits):
            with self.captureOnCommitCallbacks() as callbacks:
                with self.assertRaises(AlreadyEnrolled) as ctx:
                    enrollment.enroll(last_seat.pk, self.alice)

        self.assertEqual(ctx.exception.status, Participation.STATUS_ENROLLED)
        self.assertEqual(seats(last_seat), 0)
        self.assertEqual(Participation.objects.filter(activity=last_seat).count(), 1)
        self.assertEqual(callbacks, [])

    def test_losing_the_duplicate_insert_race(self):
        # The other request already committed its row; our checks missed it
        Activity.objects.claim_seat(self.activity.pk)
        Participation.objects.create(activity=self.activity, user=self.alice)

        with mock.patch.object(Participation.objects, "active_for", return_value=None):
            with self.captureOnCommitCallbacks() as callbacks:
                with self.assertRaises(AlreadyEnrolled) as ctx:
                    enrollment.enroll(self.activity.pk, self.alice)

        self.assertEqual(ctx.exception.status, Participation.STATUS_ENROLLED)
        # Our decrement was rolled back with the failed insert
        self.assertEqual(seats(self.activity), 1)
        self.assertEqual(Participation.objects.active().filter(activity=self.activity).count(), 1)
        self.assertEqual(callbacks, [])

    def test_database_failure_rolls_back_decrement(self):
        with mock.patch.object(Participation.objects, "create", side_effect=DatabaseError("disk full")):
            with self.captureOnCommitCallbacks() as callbacks:
                with self.assertRaises(DatabaseError):
                    enrollment.enroll(self.activity.pk, self.alice)

        self.assertEqual(seats(self.activity), 2)
        self.assertFalse(Participation.objects.exists())
        self.assertEqual(callbacks, [])

    def test_dispatch_failure_does_not_undo_enrollment(self):
        with mock.patch(
            "activities.notifications.send_enrollment_confirmation_task.delay",
            side_effect=ConnectionError("broker down"),
        ):
            with self.captureOnCommitCallbacks(execute=True):
                result = enrollment.enroll(self.activity.pk, self.alice)

        self.assertEqual(seats(self.activity), 1)
        self.assertTrue(Participation.objects.filter(pk=result.participation.pk).exists())


class CancelTests(TestCase):
    def setUp(self):
        self.faculty = make_user("faculty", role="faculty")
        self.alice = make_user("alice")
        self.bob = make_user("bob")
        self.activity = make_activity(self.faculty, capacity=1)

        patcher = mock.patch("activities.enrollment.dispatch_enrollment_confirmation")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_cancel_releases_seat(self):
        enrolled = enrollment.enroll(self.activity.pk, self.alice)

        result = enrollment.cancel(self.activity.pk, self.alice)

        self.assertEqual(result.participation_id, enrolled.participation.pk)
        self.assertEqual(result.seats_remaining, 1)
        enrolled.participation.refresh_from_db()
        self.assertEqual(enrolled.participation.status, Participation.STATUS_CANCELLED)

    def test_cancel_without_enrollment(self):
        with self.assertRaises(NotFound):
            enrollment.cancel(self.activity.pk, self.alice)
        self.assertEqual(seats(self.activity), 1)

    def test_cancel_twice(self):
        enrollment.enroll(self.activity.pk, self.alice)
        enrollment.cancel(self.activity.pk, self.alice)

        with self.assertRaises(NotFound):
            enrollment.cancel(self.activity.pk, self.alice)
        self.assertEqual(seats(self.activity), 1)

    def test_cancel_malformed_id(self):
        with self.assertRaises(InvalidInput):
            enrollment.cancel("12345", self.alice)

    def test_cancel_waitlisted_is_not_found(self):
        Participation.objects.create(
            activity=self.activity,
            user=self.alice,
            status=Participation.STATUS_WAITLISTED,
        )
        with self.assertRaises(NotFound):
            enrollment.cancel(self.activity.pk, self.alice)
        self.assertEqual(seats(self.activity), 1)

    def test_cancel_then_re_enroll(self):
        first = enrollment.enroll(self.activity.pk, self.alice)
        enrollment.cancel(self.activity.pk, self.alice)

        second = enrollment.enroll(self.activity.pk, self.alice)

        self.assertNotEqual(first.participation.pk, second.participation.pk)
        self.assertEqual(second.seats_remaining, 0)
        self.assertEqual(
            Participation.objects.filter(activity=self.activity, user=self.alice).count(),
            2,
        )

    def test_freed_seat_goes_to_someone_else(self):
        enrollment.enroll(self.activity.pk, self.alice)
        with self.assertRaises(ActivityFull):
            enrollment.enroll(self.activity.pk, self.bob)

        enrollment.cancel(self.activity.pk, self.alice)
        result = enrollment.enroll(self.activity.pk, self.bob)

        self.assertEqual(result.seats_remaining, 0)
