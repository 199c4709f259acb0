# vmatch-backend/applications/filters.py
"""
Query filters for the application listings.

`search` matches the applied-to project's title or description; the date
bounds apply to date_applied.
"""
from django.db.models import Q

from core.querying import apply_date_range, parse_csv, parse_int_param
from projects.filters import skills_q
from .models import Application

SORTABLE_FIELDS = {
    "date_applied",
    "updated_at",
    "decided_at",
    "status",
}


def filter_applications(params, qs=None):
    if qs is None:
        qs = Application.objects.all()
    qs = qs.select_related("project", "volunteer")

    statuses = parse_csv(params.get("status"))
    if statuses:
        qs = qs.filter(status__in=statuses)

    search = (params.get("search") or "").strip()
    if search:
        qs = qs.filter(
            Q(project__title__icontains=search) |
            Q(project__description__icontains=search)
        )

    skills = parse_csv(params.get("skills"))
    if skills:
        qs = qs.filter(skills_q(skills))

    project_id = parse_int_param(params, "project_id")
    if project_id is not None:
        qs = qs.filter(project_id=project_id)

    volunteer_id = parse_int_param(params, "volunteer_id")
    if volunteer_id is not None:
        qs = qs.filter(volunteer_id=volunteer_id)

    return apply_date_range(qs, "date_applied", params)
