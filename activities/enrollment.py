# activities/enrollment.py
"""
Seat enrollment for capacity-limited activities.

Guarantees, under any number of concurrent callers and service instances:

- an activity never has more ``enrolled`` participations than its capacity;
- a user never holds two active participations for the same activity;
- ``available_seats == capacity - count(enrolled)`` after every commit.

All mutual exclusion is delegated to the database: the seat decrement is a
conditional UPDATE (``Activity.objects.claim_seat``) and duplicates are
stopped by the ``unique_active_participation`` constraint. No in-process
locks are taken.

Callers get an ``EnrollmentResult`` / ``CancelResult`` back or one of the
``EnrollmentError`` subclasses from ``activities.exceptions``.
"""
import logging
import uuid
from dataclasses import dataclass
from functools import partial

from django.db import IntegrityError, transaction

from .datetime_utils import is_activity_upcoming
from .exceptions import (
    ActivityClosed,
    ActivityFull,
    AlreadyEnrolled,
    EnrollmentError,
    InvalidInput,
    NotFound,
)
from .models import Activity, Participation
from .notifications import dispatch_enrollment_confirmation

logger = logging.getLogger('campus.activities')


@dataclass(frozen=True)
class EnrollmentResult:
    participation: Participation
    seats_remaining: int


@dataclass(frozen=True)
class CancelResult:
    participation_id: uuid.UUID
    seats_remaining: int


def parse_activity_id(raw) -> uuid.UUID:
    if isinstance(raw, uuid.UUID):
        return raw
    try:
        return uuid.UUID(str(raw))
    except (TypeError, ValueError, AttributeError):
        raise InvalidInput("Invalid activity ID")


def enroll(activity_id, user) -> EnrollmentResult:
    """
    Enroll ``user`` in the activity.

    The checks made before the transaction only exist to reject the common
    cases cheaply; the ones inside it are what actually hold.
    """
    activity_id = parse_activity_id(activity_id)

    try:
        activity = Activity.objects.published().get(pk=activity_id)
    except Activity.DoesNotExist:
        raise NotFound("Activity not found or not published")

    if not is_activity_upcoming(activity):
        raise ActivityClosed("Cannot enroll in past activities")

    existing = Participation.objects.active_for(activity_id, user.pk)
    if existing is not None:
        raise AlreadyEnrolled(status=existing.status)

    if activity.available_seats <= 0:
        raise ActivityFull("Activity is full")

    try:
        with transaction.atomic():
            # The pre-check above may already be stale
            existing = Participation.objects.active_for(activity_id, user.pk)
            if existing is not None:
                raise AlreadyEnrolled(status=existing.status)

            if not Activity.objects.claim_seat(activity_id):
                # The seat may have gone to this same user's parallel request,
                # which has committed by the time our UPDATE matched nothing
                existing = Participation.objects.active_for(activity_id, user.pk)
                if existing is not None:
                    raise AlreadyEnrolled(status=existing.status)
                raise ActivityFull("Activity is full (seats taken)")

            try:
                participation = Participation.objects.create(
                    activity_id=activity_id,
                    user=user,
                    status=Participation.STATUS_ENROLLED,
                )
            except IntegrityError:
                # Lost a duplicate race at the unique index
                raise AlreadyEnrolled()

            # Our UPDATE keeps the row locked until commit, so this is our own value
            seats_remaining = Activity.objects.seats_left(activity_id)

            transaction.on_commit(
                partial(dispatch_enrollment_confirmation, participation.pk)
            )
    except AlreadyEnrolled as exc:
        if exc.status is None:
            winner = Participation.objects.active_for(activity_id, user.pk)
            exc.status = winner.status if winner else Participation.STATUS_ENROLLED
        logger.info(f"Enrollment rejected (duplicate): user={user.pk}, activity={activity_id}")
        raise
    except EnrollmentError as exc:
        logger.info(f"Enrollment rejected ({exc.code}): user={user.pk}, activity={activity_id}")
        raise

    logger.info(
        f"Enrollment created: user={user.pk}, activity={activity_id}, "
        f"participation={participation.pk}, seats_remaining={seats_remaining}"
    )
    return EnrollmentResult(participation=participation, seats_remaining=seats_remaining)


def cancel(activity_id, user) -> CancelResult:
    """
    Cancel the caller's own ``enrolled`` participation and give the seat back.

    Only a participation that is still ``enrolled`` can be cancelled, so every
    seat released here matches one that ``enroll`` claimed.
    """
    activity_id = parse_activity_id(activity_id)

    with transaction.atomic():
        participation = Participation.objects.enrolled_for(activity_id, user.pk)
        if participation is None:
            raise NotFound("Enrollment not found")

        if not Participation.objects.mark_cancelled(participation.pk):
            # A concurrent cancel got there first
            raise NotFound("Enrollment not found")

        Activity.objects.release_seat(activity_id)
        seats_remaining = Activity.objects.seats_left(activity_id)

    logger.info(
        f"Enrollment cancelled: user={user.pk}, activity={activity_id}, "
        f"participation={participation.pk}, seats_remaining={seats_remaining}"
    )
    return CancelResult(participation_id=participation.pk, seats_remaining=seats_remaining)
