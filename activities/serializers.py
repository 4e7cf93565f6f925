from rest_framework import serializers

from .models import Activity, Participation
from .sanitizers import (
    sanitize_text,
    sanitize_title,
    sanitize_description,
    validate_capacity as check_capacity,
    ValidationError as SanitizationError,
)


class UserSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    username = serializers.CharField()
    name = serializers.SerializerMethodField()
    email = serializers.EmailField()
    department = serializers.CharField(allow_null=True)
    roll_number = serializers.CharField(allow_null=True)

    def get_name(self, obj):
        return obj.get_full_name() or obj.username


# -----------------------------------------
# ACTIVITY SERIALIZER
# -----------------------------------------
class ActivitySerializer(serializers.ModelSerializer):
    created_by_name = serializers.CharField(source="created_by.username", read_only=True)
    enrolled_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Activity
        fields = [
            "id",
            "title",
            "description",
            "start_date",
            "end_date",
            "location",
            "capacity",
            "available_seats",
            "enrolled_count",
            "department",
            "category",
            "poster_image",
            "status",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "available_seats",
            "enrolled_count",
            "created_by",
            "created_by_name",
            "created_at",
            "updated_at",
        ]

    def validate_title(self, value):
        value = sanitize_title(value)
        if not 3 <= len(value) <= 200:
            raise serializers.ValidationError("Title: 3-200 chars")
        return value

    def validate_description(self, value):
        value = sanitize_description(value)
        if len(value) < 10:
            raise serializers.ValidationError("Description: 10-2000 chars")
        return value

    def validate_location(self, value):
        value = sanitize_text(value, max_length=200)
        if not value:
            raise serializers.ValidationError("Location required")
        return value

    def validate_department(self, value):
        value = sanitize_text(value, max_length=100)
        if not value:
            raise serializers.ValidationError("Department required")
        return value

    def validate_capacity(self, value):
        try:
            return check_capacity(value, Activity.MIN_CAPACITY, Activity.MAX_CAPACITY)
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))

    def validate(self, attrs):
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end <= start:
            raise serializers.ValidationError({"end_date": "End date must be after start date"})
        return attrs

    def create(self, validated_data):
        # Every seat starts free
        validated_data["available_seats"] = validated_data["capacity"]
        return super().create(validated_data)


class ActivitySummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Activity
        fields = [
            "id",
            "title",
            "description",
            "start_date",
            "end_date",
            "location",
            "category",
            "poster_image",
            "status",
        ]


# -----------------------------------------
# PARTICIPATION SERIALIZERS
# -----------------------------------------
class ParticipationSerializer(serializers.ModelSerializer):
    activity_id = serializers.UUIDField(read_only=True)
    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Participation
        fields = ["id", "activity_id", "user_id", "status", "enrolled_at"]
        read_only_fields = fields


class MyEnrollmentSerializer(serializers.ModelSerializer):
    activity = ActivitySummarySerializer(read_only=True)

    class Meta:
        model = Participation
        fields = ["id", "status", "enrolled_at", "activity"]
        read_only_fields = fields


class ParticipantSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Participation
        fields = ["id", "status", "enrolled_at", "user"]
        read_only_fields = fields
