import csv
import logging
import math

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q
from django.http import HttpResponse
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from activities.enrollment import parse_activity_id
from activities.exceptions import InvalidInput
from activities.models import Activity, Participation
from activities.permissions import IsFacultyOrAdmin, user_can_manage_activity
from activities.serializers import ActivitySerializer, ParticipantSerializer
from activities.state_machine import can_transition, get_allowed_transitions, log_transition
from .generics import ParticipantPagination, api_error, parse_positive_int

logger = logging.getLogger('campus.activities')


def load_activity(activity_id, queryset=None):
    """
    Returns (activity, None) or (None, error_response).
    """
    try:
        pk = parse_activity_id(activity_id)
    except InvalidInput as exc:
        return None, api_error(exc.message, status.HTTP_400_BAD_REQUEST)

    qs = queryset if queryset is not None else Activity.objects.all()
    try:
        return qs.get(pk=pk), None
    except Activity.DoesNotExist:
        return None, api_error("Activity not found", status.HTTP_404_NOT_FOUND)


class ActivityListCreateView(APIView):
    """
    GET  /api/activities/   (filters: search, category, department, status,
                             startDate, endDate, myActivities, page, limit)
    POST /api/activities/   (faculty/admin)
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsFacultyOrAdmin()]
        return [IsAuthenticated()]

    def get(self, request):
        qs = Activity.objects.select_related("created_by")
        user = request.user
        params = request.query_params

        my_param = params.get("myActivities")
        if my_param and my_param.lower() in ("1", "true", "yes"):
            qs = qs.filter(created_by=user)

        # Students only ever see published activities
        if user.is_student:
            qs = qs.filter(status=Activity.STATUS_PUBLISHED)
        else:
            status_param = params.get("status", Activity.STATUS_PUBLISHED)
            if status_param != "all":
                if status_param not in dict(Activity.STATUS_CHOICES):
                    return api_error("Invalid status")
                qs = qs.filter(status=status_param)

        category = params.get("category")
        if category:
            qs = qs.filter(category=category)

        department = params.get("department")
        if department:
            qs = qs.filter(department=department)

        start_param = params.get("startDate")
        end_param = params.get("endDate")
        try:
            if start_param:
                qs = qs.filter(start_date__gte=start_param)
            if end_param:
                qs = qs.filter(end_date__lte=end_param)
        except ValidationError:
            return api_error("Invalid date filter")

        search = params.get("search")
        if search:
            qs = qs.filter(
                Q(title__icontains=search) |
                Q(description__icontains=search)
            )

        page = parse_positive_int(params.get("page"), default=1)
        limit = parse_positive_int(params.get("limit"), default=20, maximum=100)
        if page is None or limit is None:
            return api_error("Invalid pagination params")

        qs = qs.order_by("start_date")
        total = qs.count()
        offset = (page - 1) * limit

        return Response({
            "data": ActivitySerializer(qs[offset:offset + limit], many=True).data,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        })

    def post(self, request):
        serializer = ActivitySerializer(data=request.data, context={"request": request})
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        activity = serializer.save(created_by=request.user)
        logger.info(f"Activity created: activity={activity.id}, by={request.user.id}, capacity={activity.capacity}")

        return Response(
            {
                "message": "Activity created successfully",
                "activity": ActivitySerializer(activity).data,
            },
            status=status.HTTP_201_CREATED,
        )


class ActivityDetailView(APIView):
    """
    GET    /api/activities/<activity_id>/
    PUT    /api/activities/<activity_id>/   (owner faculty or admin)
    PATCH  /api/activities/<activity_id>/
    DELETE /api/activities/<activity_id>/
    """

    def get_permissions(self):
        if self.request.method in ("PUT", "PATCH", "DELETE"):
            return [IsAuthenticated(), IsFacultyOrAdmin()]
        return [IsAuthenticated()]

    def get(self, request, activity_id):
        activity, error = load_activity(activity_id, Activity.objects.select_related("created_by"))
        if error:
            return error

        is_student = request.user.is_student
        if is_student and activity.status != Activity.STATUS_PUBLISHED:
            return api_error("Activity not available", status.HTTP_403_FORBIDDEN)

        is_enrolled = False
        if is_student:
            is_enrolled = Participation.objects.active_for(activity.pk, request.user.pk) is not None

        return Response({
            "activity": ActivitySerializer(activity).data,
            "isEnrolled": is_enrolled,
            "allowedTransitions": get_allowed_transitions(activity),
        })

    def put(self, request, activity_id):
        return self._update(request, activity_id, partial=False)

    def patch(self, request, activity_id):
        return self._update(request, activity_id, partial=True)

    def _update(self, request, activity_id, partial):
        activity, error = load_activity(activity_id)
        if error:
            return error

        if not user_can_manage_activity(request.user, activity):
            return api_error("Not authorized to update this activity", status.HTTP_403_FORBIDDEN)

        with transaction.atomic():
            # Row lock: claim_seat/release_seat wait until we commit
            activity = Activity.objects.select_for_update().get(pk=activity.pk)

            serializer = ActivitySerializer(activity, data=request.data, partial=partial)
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

            data = dict(serializer.validated_data)

            new_status = data.get("status")
            if new_status:
                ok, reason = can_transition(activity, new_status)
                if not ok:
                    return api_error(reason)

            new_capacity = data.pop("capacity", activity.capacity)
            capacity_delta = new_capacity - activity.capacity
            if capacity_delta < 0 and new_capacity < activity.enrolled_count:
                return api_error(
                    f"Cannot reduce capacity below enrolled count ({activity.enrolled_count})"
                )

            old_status = activity.status
            for attr, value in data.items():
                setattr(activity, attr, value)
            # available_seats is never among the saved fields
            activity.save(update_fields=[*data.keys(), "updated_at"])

            if capacity_delta:
                # Capacity and seats move together so the check constraint holds
                Activity.objects.filter(pk=activity.pk).update(
                    capacity=new_capacity,
                    available_seats=F("available_seats") + capacity_delta,
                )
                activity.refresh_from_db(fields=["capacity", "available_seats"])

        log_transition(activity, old_status, actor=request.user)

        return Response({
            "message": "Activity updated successfully",
            "activity": ActivitySerializer(activity).data,
        })

    def delete(self, request, activity_id):
        activity, error = load_activity(activity_id)
        if error:
            return error

        if not user_can_manage_activity(request.user, activity):
            return api_error("Not authorized to delete this activity", status.HTTP_403_FORBIDDEN)

        with transaction.atomic():
            # Row lock: a concurrent claim_seat waits for us
            activity = Activity.objects.select_for_update().get(pk=activity.pk)
            enrollment_count = activity.participations.filter(
                status=Participation.STATUS_ENROLLED
            ).count()

            if enrollment_count > 0:
                return api_error(
                    f"Cannot delete activity with {enrollment_count} enrollments. Cancel it instead."
                )

            activity.participations.all().delete()
            activity.delete()

        logger.info(f"Activity deleted: activity={activity_id}, by={request.user.id}")
        return Response({"message": "Activity deleted successfully"})


class ActivityParticipantsView(APIView):
    """
    GET /api/activities/<activity_id>/participants/?status=enrolled|waitlisted|cancelled|all
    """
    permission_classes = [IsAuthenticated, IsFacultyOrAdmin]

    def get(self, request, activity_id):
        activity, error = load_activity(activity_id)
        if error:
            return error

        if not user_can_manage_activity(request.user, activity):
            return api_error("Not authorized", status.HTTP_403_FORBIDDEN)

        qs = (
            Participation.objects
            .filter(activity=activity)
            .select_related("user")
            .order_by("-enrolled_at")
        )

        status_param = request.query_params.get("status", Participation.STATUS_ENROLLED)
        if status_param != "all":
            if status_param not in dict(Participation.STATUS_CHOICES):
                return api_error("Invalid status")
            qs = qs.filter(status=status_param)

        paginator = ParticipantPagination()
        result_page = paginator.paginate_queryset(qs, request, view=self)
        serializer = ParticipantSerializer(result_page, many=True)
        return paginator.get_paginated_response(serializer.data)


class ActivityParticipantsExportView(APIView):
    """
    GET /api/activities/<activity_id>/participants/export/
    """
    permission_classes = [IsAuthenticated, IsFacultyOrAdmin]

    def get(self, request, activity_id):
        activity, error = load_activity(activity_id)
        if error:
            return error

        if not user_can_manage_activity(request.user, activity):
            return api_error("Not authorized", status.HTTP_403_FORBIDDEN)

        participants = (
            Participation.objects
            .filter(activity=activity, status=Participation.STATUS_ENROLLED)
            .select_related("user")
            .order_by("enrolled_at")
        )

        response = HttpResponse(
            content_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="activity-{activity.id}-participants.csv"'},
        )

        writer = csv.writer(response)
        writer.writerow(["Name", "Email", "Department", "Roll Number", "Enrolled At", "Status"])

        for p in participants:
            user = p.user
            writer.writerow([
                user.get_full_name() or user.username,
                user.email,
                user.department or "",
                user.roll_number or "",
                p.enrolled_at.isoformat(),
                p.status,
            ])

        return response
