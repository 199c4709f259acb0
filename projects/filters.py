# vmatch-backend/projects/filters.py
"""
Query filters for the project listings.

All filters are ANDed; `search` ORs title and description.
"""
from django.db.models import Q

from core.datetime_utils import now, window_end
from core.querying import apply_date_range, parse_bool, parse_csv, parse_int_param
from .models import Project

SORTABLE_FIELDS = {
    "created_at",
    "updated_at",
    "title",
    "start_date",
    "end_date",
    "application_deadline",
    "max_volunteers",
    "volunteer_count",
    "status",
    "location",
}


def skills_q(skills, field="skills_index") -> Q:
    """Any-overlap match against a ",a,b," skills index column."""
    condition = Q()
    for skill in skills:
        condition |= Q(**{f"{field}__icontains": f",{skill.lower()},"})
    return condition


def filter_projects(params, qs=None):
    if qs is None:
        qs = Project.objects.all()

    statuses = parse_csv(params.get("status"))
    if statuses:
        qs = qs.filter(status__in=statuses)

    search = (params.get("search") or "").strip()
    if search:
        qs = qs.filter(Q(title__icontains=search) | Q(description__icontains=search))

    skills = parse_csv(params.get("skills"))
    if skills:
        qs = qs.filter(skills_q(skills))

    location = (params.get("location") or "").strip()
    if location:
        qs = qs.filter(location__icontains=location)

    category = (params.get("category") or "").strip()
    if category:
        qs = qs.filter(category__icontains=category)

    organizer_id = parse_int_param(params, "organizer_id")
    if organizer_id is not None:
        qs = qs.filter(organizer_id=organizer_id)

    if parse_bool(params.get("available")):
        qs = available_projects(qs)

    return apply_date_range(qs, "start_date", params)


def available_projects(qs=None):
    """Open and still before the application deadline."""
    if qs is None:
        qs = Project.objects.all()
    return qs.filter(status=Project.STATUS_OPEN, application_deadline__gt=now())


def ending_soon_projects(days: int, qs=None):
    return available_projects(qs).filter(application_deadline__lte=window_end(days))


def similar_projects(project: Project, limit: int = 3):
    """Same category or at least one shared skill, still accepting applications."""
    condition = Q()
    if project.category:
        condition |= Q(category__iexact=project.category)
    if project.required_skills:
        condition |= skills_q(project.required_skills)
    if not condition:
        return Project.objects.none()
    return (
        available_projects()
        .filter(condition)
        .exclude(pk=project.pk)
        .order_by("application_deadline", "id")[:limit]
    )
