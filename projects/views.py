# projects/views.py
import logging

from django.db import transaction
from django.db.models import Count, Q
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from applications.models import Application
from applications.services import sync_capacity_status
from core.constants import ENDING_SOON_DEFAULT_DAYS
from core.permissions import IsOrganizer
from core.querying import apply_ordering, parse_int_param, requested_fields
from core.responses import api_response, paginated_response
from . import state_machine
from .filters import SORTABLE_FIELDS, available_projects, ending_soon_projects, filter_projects
from .models import Project
from .serializers import OrganizerProjectSerializer, ProjectDetailSerializer, ProjectSerializer

logger = logging.getLogger("vmatch.projects")


def get_project_or_404(pk, for_update=False):
    qs = Project.objects.select_for_update() if for_update else Project.objects.all()
    try:
        return qs.get(pk=pk)
    except Project.DoesNotExist:
        raise NotFound("Project not found")


def ensure_project_owner(project, user, action="update"):
    if project.organizer_id != user.id:
        raise PermissionDenied(f"Not authorized to {action} this project")


class ProjectListCreateView(APIView):
    """
    GET  /api/projects/   -> filtered, sorted, paginated listing (public)
    POST /api/projects/   -> create (organizers only)
    """

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated(), IsOrganizer()]
        return [AllowAny()]

    def get(self, request):
        params = request.query_params
        qs = filter_projects(params).select_related("organizer")
        qs = apply_ordering(qs, params.get("sort"), SORTABLE_FIELDS, "-created_at")
        return paginated_response("Projects retrieved successfully", qs, params, ProjectSerializer)

    def post(self, request):
        serializer = ProjectSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        user = request.user
        project = serializer.save(
            organizer=user,
            organizer_name=user.username,
            contact_email=serializer.validated_data.get("contact_email") or user.email,
        )
        logger.info(f"Project created: project={project.id}, organizer={user.id}")

        return api_response(
            "Project created successfully",
            ProjectSerializer(project).data,
            status.HTTP_201_CREATED,
        )


class AvailableProjectsView(APIView):
    """GET /api/projects/available/ -> open projects, soonest deadline first."""
    permission_classes = [AllowAny]

    def get(self, request):
        qs = available_projects().order_by("application_deadline", "id")
        return paginated_response(
            "Available projects retrieved successfully", qs, request.query_params, ProjectSerializer
        )


class EndingSoonProjectsView(APIView):
    """GET /api/projects/ending-soon/?days=N -> open projects whose deadline is within N days."""
    permission_classes = [AllowAny]

    def get(self, request):
        days = parse_int_param(request.query_params, "days")
        if days is None:
            days = ENDING_SOON_DEFAULT_DAYS
        if days < 1:
            raise ValidationError({"days": ["Days must be 1 or greater."]})

        qs = ending_soon_projects(days).order_by("application_deadline", "id")
        return paginated_response(
            "Projects ending soon retrieved successfully", qs, request.query_params, ProjectSerializer
        )


class MyProjectsView(APIView):
    """GET /api/projects/mine/ -> the organizer's projects with application counts."""
    permission_classes = [IsAuthenticated, IsOrganizer]

    def get(self, request):
        params = request.query_params
        qs = filter_projects(params, Project.objects.filter(organizer=request.user)).annotate(
            applications_count=Count("applications", distinct=True),
            pending_count=Count(
                "applications",
                filter=Q(applications__status=Application.STATUS_PENDING),
                distinct=True,
            ),
            accepted_count=Count(
                "applications",
                filter=Q(applications__status=Application.STATUS_ACCEPTED),
                distinct=True,
            ),
        )
        qs = apply_ordering(qs, params.get("sort"), SORTABLE_FIELDS, "-created_at")
        return paginated_response(
            "Organizer projects retrieved successfully", qs, params, OrganizerProjectSerializer
        )


class ProjectDetailView(APIView):
    """
    GET          /api/projects/<id>/  -> detail with similar projects (public)
    PUT / PATCH  /api/projects/<id>/  -> update (owner only)
    DELETE       /api/projects/<id>/  -> delete with its applications (owner only)
    """

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get(self, request, pk):
        project = get_project_or_404(pk)
        serializer = ProjectDetailSerializer(project, fields=requested_fields(request.query_params))
        return api_response("Project retrieved successfully", serializer.data)

    def put(self, request, pk):
        return self._update(request, pk)

    def patch(self, request, pk):
        return self._update(request, pk)

    def _update(self, request, pk):
        requested_status = request.data.get("status")

        with transaction.atomic():
            project = get_project_or_404(pk, for_update=True)
            ensure_project_owner(project, request.user, "update")

            serializer = ProjectSerializer(
                project, data=request.data, partial=True, context={"request": request}
            )
            serializer.is_valid(raise_exception=True)

            if requested_status and requested_status != project.status:
                can, reason = state_machine.can_transition(project, requested_status)
                if not can:
                    raise ValidationError({"status": [reason]})

            project = serializer.save()

            if requested_status and requested_status != project.status:
                state_machine.transition(project, requested_status, actor=request.user)

            if "max_volunteers" in serializer.validated_data:
                project = sync_capacity_status(project)

        logger.info(f"Project updated: project={project.id}, organizer={request.user.id}")
        return api_response("Project updated successfully", ProjectSerializer(project).data)

    def delete(self, request, pk):
        with transaction.atomic():
            project = get_project_or_404(pk, for_update=True)
            ensure_project_owner(project, request.user, "delete")
            project_id = project.id
            deleted_applications = project.applications.count()
            project.delete()

        logger.info(
            f"Project deleted: project={project_id}, organizer={request.user.id}, "
            f"applications_removed={deleted_applications}"
        )
        return api_response("Project deleted successfully")

