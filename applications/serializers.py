from rest_framework import serializers

from core.serializers import DynamicFieldsModelSerializer
from projects.serializers import ProjectSummarySerializer
from users.serializers import UserSummarySerializer
from .models import Application


class ApplicationSerializer(DynamicFieldsModelSerializer):
    """Read representation, with compact project and volunteer blocks."""
    project_detail = ProjectSummarySerializer(source="project", read_only=True)
    volunteer_detail = UserSummarySerializer(source="volunteer", read_only=True)

    class Meta:
        model = Application
        fields = [
            "id",
            "volunteer",
            "volunteer_detail",
            "project",
            "project_detail",
            "status",
            "date_applied",
            "withdrawn_at",
            "decided_at",
            "message",
            "notes",
            "skills",
            "availability",
            "feedback",
            "updated_at",
        ]
        read_only_fields = fields


class ApplySerializer(serializers.Serializer):
    """
    Body of an apply request. project_id is required on POST /api/applications/
    and taken from the URL on POST /api/projects/<id>/apply/.
    """
    project_id = serializers.IntegerField(required=False)
    message = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    skills = serializers.ListField(
        child=serializers.CharField(max_length=100),
        required=False,
        allow_null=True,
    )
    availability = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def __init__(self, *args, require_project=True, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["project_id"].required = require_project


class DecisionSerializer(serializers.Serializer):
    """Accepted/Rejected is normalized by the lifecycle engine, not here."""
    status = serializers.CharField()
    feedback = serializers.CharField(required=False, allow_blank=True, allow_null=True)
