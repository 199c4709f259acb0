# ux/services/dashboard.py
"""
Dashboard aggregation. Every number is computed on request from the
application and project tables; nothing here is stored.
"""
from django.db.models import Count

from applications.models import Application
from core.datetime_utils import format_date_only
from projects.models import Project


def _status_counts(qs, statuses):
    # drop any ordering, otherwise the ordered columns join the GROUP BY
    rows = qs.order_by().values("status").annotate(n=Count("id"))
    counts = {status: 0 for status in statuses}
    for row in rows:
        counts[row["status"]] = row["n"]
    return counts


def get_volunteer_summary(user):
    """Application counts by status plus assignment counts for one volunteer."""
    applications_qs = Application.objects.filter(volunteer=user)
    by_status = _status_counts(applications_qs, [s for s, _ in Application.STATUS_CHOICES])

    # assigned_projects is the reverse of Project.assigned_volunteers
    assigned = user.assigned_projects.all()

    return {
        "total_applied_projects": applications_qs.count(),
        "pending": by_status[Application.STATUS_PENDING],
        "accepted": by_status[Application.STATUS_ACCEPTED],
        "rejected": by_status[Application.STATUS_REJECTED],
        "withdrawn": by_status[Application.STATUS_WITHDRAWN],
        # a project with free slots stays Open after an acceptance
        "ongoing_projects": assigned.filter(
            status__in=[Project.STATUS_OPEN, Project.STATUS_ASSIGNED]
        ).count(),
        "completed_projects": assigned.filter(status=Project.STATUS_COMPLETED).count(),
    }


def get_organizer_summary(user):
    """
    Organizer overview:
    - project counts by status
    - total applications and distinct applicants across all their projects
    - the 10 most recent applications
    - up to 5 recent volunteers with the union of the skills they applied with
    - every project, newest first
    """
    projects_qs = Project.objects.filter(organizer=user).order_by("-created_at", "-id")
    project_counts = _status_counts(projects_qs, [s for s, _ in Project.STATUS_CHOICES])
    project_counts["Total"] = projects_qs.count()

    applications_qs = Application.objects.filter(project__organizer=user)

    recent = list(
        applications_qs
        .select_related("project", "volunteer")
        .order_by("-date_applied", "-id")[:10]
    )

    recent_applications = [
        {
            "id": app.id,
            "project_id": app.project_id,
            "project_title": app.project.title,
            "volunteer_id": app.volunteer_id,
            "volunteer_name": app.volunteer.username,
            "volunteer_email": app.volunteer.email,
            "status": app.status,
            "applied_date": format_date_only(app.date_applied),
            "skills": app.skills or [],
        }
        for app in recent
    ]

    recent_volunteers = []
    seen = set()
    for app in recent:
        if app.volunteer_id in seen:
            continue
        seen.add(app.volunteer_id)

        skills = []
        for skill_list in applications_qs.filter(volunteer_id=app.volunteer_id).values_list("skills", flat=True):
            for skill in skill_list or []:
                if skill not in skills:
                    skills.append(skill)

        recent_volunteers.append({
            "id": app.volunteer_id,
            "name": app.volunteer.username,
            "email": app.volunteer.email,
            "skills": skills,
        })
        if len(recent_volunteers) >= 5:
            break

    projects = [
        {
            "id": project.id,
            "title": project.title,
            "location": project.location,
            "status": project.status,
            "start_date": format_date_only(project.start_date),
            "application_deadline": format_date_only(project.application_deadline),
            "required_skills": project.required_skills or [],
            "max_volunteers": project.max_volunteers,
            "volunteer_count": project.volunteer_count,
        }
        for project in projects_qs
    ]

    return {
        "project_status_counts": project_counts,
        "total_applications": applications_qs.count(),
        "total_volunteers": applications_qs.values("volunteer").distinct().count(),
        "recent_applications": recent_applications,
        "recent_volunteers": recent_volunteers,
        "projects": projects,
    }
