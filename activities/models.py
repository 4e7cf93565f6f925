# activities/models.py
import uuid

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone


class ActivityQuerySet(models.QuerySet):
    """
    Seat bookkeeping lives here so that every write to ``available_seats``
    is a single UPDATE statement evaluated by the database.
    """

    def published(self):
        return self.filter(status=Activity.STATUS_PUBLISHED)

    def claim_seat(self, activity_id) -> bool:
        """
        Take one seat iff the activity is published and has seats left.

        The predicate and the decrement run as one UPDATE, so two callers
        racing for the last seat can never both see a row modified.
        """
        updated = (
            self.filter(
                pk=activity_id,
                status=Activity.STATUS_PUBLISHED,
                available_seats__gt=0,
            )
            .update(
                available_seats=F("available_seats") - 1,
                updated_at=timezone.now(),
            )
        )
        return updated == 1

    def release_seat(self, activity_id) -> bool:
        """Give one seat back. Only ever called to reverse a claimed seat."""
        updated = self.filter(pk=activity_id).update(
            available_seats=F("available_seats") + 1,
            updated_at=timezone.now(),
        )
        return updated == 1

    def seats_left(self, activity_id) -> int:
        return self.filter(pk=activity_id).values_list("available_seats", flat=True).get()


class Activity(models.Model):
    STATUS_DRAFT = "draft"
    STATUS_PUBLISHED = "published"
    STATUS_CANCELLED = "cancelled"
    STATUS_COMPLETED = "completed"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_PUBLISHED, "Published"),
        (STATUS_CANCELLED, "Cancelled"),
        (STATUS_COMPLETED, "Completed"),
    ]

    CATEGORY_ACADEMIC = "Academic"
    CATEGORY_CULTURAL = "Cultural"
    CATEGORY_SPORTS = "Sports"
    CATEGORY_TECHNICAL = "Technical"
    CATEGORY_SOCIAL = "Social"
    CATEGORY_WORKSHOP = "Workshop"
    CATEGORY_SEMINAR = "Seminar"
    CATEGORY_COMPETITION = "Competition"
    CATEGORY_OTHER = "Other"

    CATEGORY_CHOICES = [
        (CATEGORY_ACADEMIC, "Academic"),
        (CATEGORY_CULTURAL, "Cultural"),
        (CATEGORY_SPORTS, "Sports"),
        (CATEGORY_TECHNICAL, "Technical"),
        (CATEGORY_SOCIAL, "Social"),
        (CATEGORY_WORKSHOP, "Workshop"),
        (CATEGORY_SEMINAR, "Seminar"),
        (CATEGORY_COMPETITION, "Competition"),
        (CATEGORY_OTHER, "Other"),
    ]

    MIN_CAPACITY = 1
    MAX_CAPACITY = 10000

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=200)
    description = models.TextField(max_length=2000)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    location = models.CharField(max_length=200)
    capacity = models.PositiveIntegerField()
    available_seats = models.PositiveIntegerField()
    department = models.CharField(max_length=100)
    category = models.CharField(max_length=32, choices=CATEGORY_CHOICES, default=CATEGORY_OTHER)
    poster_image = models.URLField(max_length=1024, blank=True, null=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="created_activities",
    )
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_DRAFT)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActivityQuerySet.as_manager()

    class Meta:
        verbose_name_plural = "activities"
        indexes = [
            # Discovery: published + upcoming
            models.Index(
                fields=["status", "start_date"],
                name="activity_status_start_idx",
            ),
            models.Index(fields=["department"], name="activity_department_idx"),
            models.Index(fields=["category"], name="activity_category_idx"),
            models.Index(fields=["created_by"], name="activity_creator_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(capacity__gte=1),
                name="activity_capacity_positive",
            ),
            models.CheckConstraint(
                condition=Q(available_seats__gte=0) & Q(available_seats__lte=F("capacity")),
                name="activity_seats_within_capacity",
            ),
        ]

    def __str__(self):
        return self.title

    @property
    def enrolled_count(self):
        return self.capacity - self.available_seats

    @property
    def is_full(self):
        return self.available_seats <= 0


class ParticipationQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status__in=Participation.ACTIVE_STATUSES)

    def enrolled(self):
        return self.filter(status=Participation.STATUS_ENROLLED)

    def active_for(self, activity_id, user_id):
        """The enrolled/waitlisted record for the pair, or None."""
        return self.active().filter(activity_id=activity_id, user_id=user_id).first()

    def enrolled_for(self, activity_id, user_id):
        return self.enrolled().filter(activity_id=activity_id, user_id=user_id).first()

    def mark_cancelled(self, participation_id) -> bool:
        # Guarded on the current status so two cancels cannot both win
        updated = self.filter(
            pk=participation_id,
            status=Participation.STATUS_ENROLLED,
        ).update(
            status=Participation.STATUS_CANCELLED,
            updated_at=timezone.now(),
        )
        return updated == 1


class Participation(models.Model):
    STATUS_ENROLLED = "enrolled"
    STATUS_WAITLISTED = "waitlisted"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_ENROLLED, "Enrolled"),
        (STATUS_WAITLISTED, "Waitlisted"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    ACTIVE_STATUSES = (STATUS_ENROLLED, STATUS_WAITLISTED)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    activity = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        related_name="participations",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="participations",
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_ENROLLED)
    enrolled_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ParticipationQuerySet.as_manager()

    class Meta:
        constraints = [
            # One live record per (activity, user). Cancelled rows are history
            # and do not block a later re-enrollment.
            models.UniqueConstraint(
                fields=["activity", "user"],
                condition=Q(status__in=["enrolled", "waitlisted"]),
                name="unique_active_participation",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "status"], name="part_user_status_idx"),
            models.Index(fields=["activity", "status"], name="part_activity_status_idx"),
            models.Index(fields=["-enrolled_at"], name="part_enrolled_at_idx"),
        ]

    def __str__(self):
        return f"{self.user} - {self.activity} ({self.status})"
