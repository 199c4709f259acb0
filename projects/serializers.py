from rest_framework import serializers

from core.datetime_utils import days_until
from core.serializers import DynamicFieldsModelSerializer
from .filters import similar_projects
from .models import Project
from .sanitizers import (
    sanitize_description,
    sanitize_skills,
    sanitize_text,
    sanitize_title,
    validate_max_volunteers,
    ValidationError as SanitizationError,
)


class ProjectSerializer(DynamicFieldsModelSerializer):
    """
    Project representation for listings, and input validation for create/update.

    status, capacity bookkeeping and the organizer are read-only here: the
    organizer comes from the request, status changes go through
    projects.state_machine and capacity through applications.services.
    """
    organizer_name = serializers.CharField(read_only=True)
    remaining_slots = serializers.IntegerField(read_only=True)
    is_accepting_applications = serializers.BooleanField(read_only=True)
    required_skills = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
    )

    class Meta:
        model = Project
        fields = [
            "id",
            "organizer",
            "organizer_name",
            "title",
            "description",
            "location",
            "category",
            "required_skills",
            "time_commitment",
            "contact_email",
            "start_date",
            "end_date",
            "application_deadline",
            "status",
            "max_volunteers",
            "volunteer_count",
            "remaining_slots",
            "assigned_volunteers",
            "is_accepting_applications",
            "created_at",
            "updated_at",
        ]
        read_only_fields = [
            "id",
            "organizer",
            "organizer_name",
            "status",
            "volunteer_count",
            "assigned_volunteers",
            "created_at",
            "updated_at",
        ]

    def validate_title(self, value):
        value = sanitize_title(value)
        if not value:
            raise serializers.ValidationError("Title is required.")
        return value

    def validate_description(self, value):
        value = sanitize_description(value)
        if not value:
            raise serializers.ValidationError("Description is required.")
        return value

    def validate_location(self, value):
        return sanitize_text(value, max_length=255)

    def validate_category(self, value):
        return sanitize_text(value, max_length=100)

    def validate_time_commitment(self, value):
        return sanitize_text(value, max_length=255)

    def validate_required_skills(self, value):
        return sanitize_skills(value)

    def validate_max_volunteers(self, value):
        try:
            value = validate_max_volunteers(value)
        except SanitizationError as e:
            raise serializers.ValidationError(str(e))

        # capacity can shrink, but never below the volunteers already accepted
        if self.instance is not None and value < self.instance.volunteer_count:
            raise serializers.ValidationError(
                f"Max volunteers cannot be lower than the {self.instance.volunteer_count} "
                f"volunteer(s) already accepted."
            )
        return value

    def validate(self, attrs):
        start = attrs.get("start_date")
        end = attrs.get("end_date")
        deadline = attrs.get("application_deadline")

        if self.instance is not None:
            if start is None:
                start = self.instance.start_date
            if "end_date" not in attrs:
                end = self.instance.end_date
            if deadline is None:
                deadline = self.instance.application_deadline

        if start and end and end < start:
            raise serializers.ValidationError(
                {"end_date": "end_date must not be before start_date."}
            )
        if deadline and end and deadline > end:
            raise serializers.ValidationError(
                {"application_deadline": "application_deadline must not be after end_date."}
            )
        return attrs


class ProjectDetailSerializer(ProjectSerializer):
    days_until_deadline = serializers.SerializerMethodField()
    similar_projects = serializers.SerializerMethodField()

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + ["days_until_deadline", "similar_projects"]

    def get_days_until_deadline(self, obj):
        return days_until(obj.application_deadline)

    def get_similar_projects(self, obj):
        return ProjectSummarySerializer(similar_projects(obj), many=True).data


class ProjectSummarySerializer(serializers.ModelSerializer):
    """Compact form nested inside applications and dashboards."""
    days_until_deadline = serializers.SerializerMethodField()

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "organizer",
            "organizer_name",
            "location",
            "category",
            "required_skills",
            "start_date",
            "end_date",
            "application_deadline",
            "status",
            "max_volunteers",
            "volunteer_count",
            "days_until_deadline",
        ]

    def get_days_until_deadline(self, obj):
        return days_until(obj.application_deadline)


class OrganizerProjectSerializer(ProjectSerializer):
    """Organizer's own listing; the counts come from queryset annotations."""
    applications_count = serializers.IntegerField(read_only=True)
    pending_count = serializers.IntegerField(read_only=True)
    accepted_count = serializers.IntegerField(read_only=True)

    class Meta(ProjectSerializer.Meta):
        fields = ProjectSerializer.Meta.fields + [
            "applications_count",
            "pending_count",
            "accepted_count",
        ]
