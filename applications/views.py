# applications/views.py
"""
HTTP surface of the application lifecycle.

Views only parse input and shape output; every state change goes through
applications.services.
"""
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from core.permissions import IsOrganizer, IsVolunteer
from core.querying import apply_ordering
from core.responses import api_response, paginated_response
from projects.views import ensure_project_owner, get_project_or_404
from . import services
from .filters import SORTABLE_FIELDS, filter_applications
from .models import Application
from .serializers import ApplicationSerializer, ApplySerializer, DecisionSerializer


def _apply(request, project_id=None):
    serializer = ApplySerializer(data=request.data, require_project=project_id is None)
    serializer.is_valid(raise_exception=True)
    data = dict(serializer.validated_data)
    if project_id is None:
        project_id = data.pop("project_id")
    else:
        data.pop("project_id", None)

    application, reactivated = services.apply_to_project(request.user, project_id, **data)

    if reactivated:
        return api_response(
            "Application reactivated successfully",
            ApplicationSerializer(application).data,
        )
    return api_response(
        "Application submitted successfully",
        ApplicationSerializer(application).data,
        status.HTTP_201_CREATED,
    )


def _decide(request, application_id, project_id=None):
    serializer = DecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    application = services.decide_application(
        request.user,
        application_id,
        serializer.validated_data["status"],
        feedback=serializer.validated_data.get("feedback"),
        project_id=project_id,
    )
    return api_response(
        f"Application {application.status.lower()} successfully",
        ApplicationSerializer(application).data,
    )


class ApplyView(APIView):
    """POST /api/applications/  body: {project_id, message?, notes?, skills?, availability?}"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        return _apply(request)


class ProjectApplyView(APIView):
    """POST /api/projects/<id>/apply/"""
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        return _apply(request, project_id=pk)


class ProjectWithdrawView(APIView):
    """PUT /api/projects/<id>/withdraw/ -> withdraw the caller's application to this project."""
    permission_classes = [IsAuthenticated]

    def put(self, request, pk):
        get_project_or_404(pk)
        application = Application.objects.filter(project_id=pk, volunteer=request.user).first()
        if application is None:
            raise NotFound("Application not found")

        application = services.withdraw_application(request.user, application.id)
        return api_response("Application withdrawn successfully", ApplicationSerializer(application).data)


class ApplicationWithdrawView(APIView):
    """PUT /api/applications/<id>/withdraw/"""
    permission_classes = [IsAuthenticated]

    def put(self, request, pk):
        application = services.withdraw_application(request.user, pk)
        return api_response("Application withdrawn successfully", ApplicationSerializer(application).data)


class ApplicationDetailView(APIView):
    """
    GET /api/applications/<id>/  -> visible to the applicant and the project organizer
    PUT /api/applications/<id>/  -> organizer decision {status: Accepted|Rejected, feedback?}
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        try:
            application = Application.objects.select_related("project", "volunteer").get(pk=pk)
        except Application.DoesNotExist:
            raise NotFound("Application not found")

        user = request.user
        if application.volunteer_id != user.id and application.project.organizer_id != user.id:
            raise PermissionDenied("You are not authorized to view this application")

        return api_response("Application retrieved successfully", ApplicationSerializer(application).data)

    def put(self, request, pk):
        return _decide(request, pk)


class ProjectApplicationDecisionView(APIView):
    """PUT /api/projects/<project_id>/applications/<id>/"""
    permission_classes = [IsAuthenticated]

    def put(self, request, project_id, pk):
        return _decide(request, pk, project_id=project_id)


class ProjectApplicationStatusView(APIView):
    """GET /api/projects/<id>/application-status/ -> the caller's application to this project, if any."""
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        get_project_or_404(pk)
        application = (
            Application.objects
            .select_related("project", "volunteer")
            .filter(project_id=pk, volunteer=request.user)
            .first()
        )
        if application is None:
            return api_response("No application found for this project", {"applied": False})

        return api_response(
            "Application status retrieved successfully",
            {
                "applied": True,
                "status": application.status,
                "application": ApplicationSerializer(application).data,
            },
        )


class VolunteerApplicationsView(APIView):
    """GET /api/applications/volunteer/ -> the caller's own applications."""
    permission_classes = [IsAuthenticated, IsVolunteer]

    def get(self, request):
        params = request.query_params
        qs = filter_applications(params, Application.objects.filter(volunteer=request.user))
        qs = apply_ordering(qs, params.get("sort"), SORTABLE_FIELDS, "-date_applied")
        return paginated_response("Applications retrieved successfully", qs, params, ApplicationSerializer)


class OrganizerApplicationsView(APIView):
    """GET /api/applications/organizer/ -> applications across every project the caller organizes."""
    permission_classes = [IsAuthenticated, IsOrganizer]

    def get(self, request):
        params = request.query_params
        qs = filter_applications(params, Application.objects.filter(project__organizer=request.user))
        qs = apply_ordering(qs, params.get("sort"), SORTABLE_FIELDS, "-date_applied")
        return paginated_response("Applications retrieved successfully", qs, params, ApplicationSerializer)


class ProjectApplicationsView(APIView):
    """
    GET /api/projects/<id>/applications/
    GET /api/applications/project/<id>/
    Applications for one of the caller's projects.
    """
    permission_classes = [IsAuthenticated, IsOrganizer]

    def get(self, request, pk):
        project = get_project_or_404(pk)
        ensure_project_owner(project, request.user, "view applications for")

        params = request.query_params
        qs = filter_applications(params, Application.objects.filter(project=project))
        qs = apply_ordering(qs, params.get("sort"), SORTABLE_FIELDS, "-date_applied")
        return paginated_response(
            "Project applications retrieved successfully", qs, params, ApplicationSerializer
        )
