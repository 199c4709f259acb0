# ux/views/dashboard.py

from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from applications.filters import SORTABLE_FIELDS, filter_applications
from applications.models import Application
from applications.serializers import ApplicationSerializer
from core.permissions import IsOrganizer, IsVolunteer
from core.querying import apply_ordering, paginate
from core.responses import api_response
from ux.services.dashboard import get_organizer_summary, get_volunteer_summary


class VolunteerDashboardView(APIView):
    """GET /api/dashboard/volunteer/ -> counts plus a page of the volunteer's applications."""
    permission_classes = [IsAuthenticated, IsVolunteer]

    def get(self, request):
        params = request.query_params
        qs = filter_applications(params, Application.objects.filter(volunteer=request.user))
        qs = apply_ordering(qs, params.get("sort"), SORTABLE_FIELDS, "-date_applied")
        page, meta = paginate(qs, params)

        return api_response(
            "Volunteer dashboard data retrieved successfully",
            {
                "stats": get_volunteer_summary(request.user),
                "applied_projects": ApplicationSerializer(page, many=True).data,
                "pagination": meta,
            },
        )


class OrganizerDashboardView(APIView):
    """GET /api/dashboard/organizer/"""
    permission_classes = [IsAuthenticated, IsOrganizer]

    def get(self, request):
        return api_response(
            "Organizer dashboard data retrieved successfully",
            get_organizer_summary(request.user),
        )
