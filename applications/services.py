# vmatch-backend/applications/services.py
"""
Application lifecycle & capacity allocation.

Every operation:
- runs all precondition checks before writing anything
- runs inside transaction.atomic(), so any failure rolls back every write
- changes state with conditional UPDATEs ("... WHERE status = Pending",
  "... WHERE volunteer_count < max_volunteers") and treats 0 affected rows as
  a lost race, never as success

Policies:
- re-applying after a withdrawal reactivates the existing row
- sibling Pending applications are rejected only once the project is full
- a project holds up to max_volunteers accepted volunteers
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from core.constants import AUTO_REJECTION_FEEDBACK, ROLE_VOLUNTEER
from core.datetime_utils import is_deadline_passed, now
from core.exceptions import ConflictError
from core.permissions import user_has_role
from projects.models import Project
from projects.sanitizers import (
    build_skills_index,
    sanitize_description,
    sanitize_skills,
    sanitize_text,
)
from .models import Application
from .state_machine import can_transition

logger = logging.getLogger("vmatch.applications")


DECISION_ALIASES = {
    "accepted": Application.STATUS_ACCEPTED,
    "accept": Application.STATUS_ACCEPTED,
    "rejected": Application.STATUS_REJECTED,
    "reject": Application.STATUS_REJECTED,
}


def normalize_decision(decision) -> str:
    """'accepted' / 'Accept' / 'REJECTED' -> Application status constant."""
    key = str(decision or "").strip().lower()
    if key not in DECISION_ALIASES:
        raise ValidationError(
            {"status": ["Invalid status. Status must be either Accepted or Rejected"]}
        )
    return DECISION_ALIASES[key]


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def _lock_project(project_id) -> Project:
    """Fetch the project row with a write lock (a no-op on SQLite)."""
    try:
        return Project.objects.select_for_update().get(pk=project_id)
    except (Project.DoesNotExist, ValueError, TypeError):
        raise NotFound("Project not found")


def _get_application(application_id, for_update=False, **filters) -> Application:
    qs = Application.objects.select_for_update() if for_update else Application.objects.all()
    try:
        return qs.get(pk=application_id, **filters)
    except (Application.DoesNotExist, ValueError, TypeError):
        raise NotFound("Application not found")


def _clean_metadata(message=None, notes=None, skills=None, availability=None) -> dict:
    """Only the keys the caller actually sent, sanitized."""
    metadata = {}
    if message is not None:
        metadata["message"] = sanitize_description(message)
    if notes is not None:
        metadata["notes"] = sanitize_description(notes)
    if skills is not None:
        metadata["skills"] = sanitize_skills(skills)
    if availability is not None:
        metadata["availability"] = sanitize_text(availability, max_length=255)
    return metadata


# ---------------------------------------------------------------------------
# Apply
# ---------------------------------------------------------------------------

def apply_to_project(volunteer, project_id, message=None, notes=None, skills=None, availability=None):
    """
    Create a Pending application, or reactivate the volunteer's withdrawn one.

    Returns (application, reactivated: bool).

    Raises PermissionDenied (not a volunteer), NotFound (no project) and
    ConflictError (project not open, deadline passed, already applied,
    no capacity left).
    """
    if not user_has_role(volunteer, ROLE_VOLUNTEER):
        raise PermissionDenied("Only volunteers can apply for projects")

    metadata = _clean_metadata(message, notes, skills, availability)

    with transaction.atomic():
        project = _lock_project(project_id)

        if project.status != Project.STATUS_OPEN:
            raise ConflictError("This project is not open for applications")

        if is_deadline_passed(project.application_deadline):
            raise ConflictError("Application deadline has passed")

        existing = (
            Application.objects
            .select_for_update()
            .filter(volunteer=volunteer, project=project)
            .first()
        )
        if existing is not None and existing.status != Application.STATUS_WITHDRAWN:
            raise ConflictError("You have already applied for this project")

        active_count = Application.objects.filter(
            project=project,
            status__in=Application.ACTIVE_STATUSES,
        ).count()
        if active_count >= project.max_volunteers:
            logger.warning(
                f"Application refused: capacity reached for project={project.id} "
                f"(active={active_count}, max={project.max_volunteers}), volunteer={volunteer.id}"
            )
            raise ConflictError("This project has no remaining volunteer slots")

        if existing is not None:
            application = _reactivate(existing, metadata)
            reactivated = True
        else:
            metadata.setdefault("skills", sanitize_skills(getattr(volunteer, "skills", None)))
            application = _create(volunteer, project, metadata)
            reactivated = False

    logger.info(
        f"Application {'reactivated' if reactivated else 'created'}: "
        f"application={application.id}, volunteer={volunteer.id}, project={project.id}"
    )
    return application, reactivated


def _create(volunteer, project, metadata) -> Application:
    try:
        # savepoint: a duplicate must not poison the outer transaction
        with transaction.atomic():
            return Application.objects.create(volunteer=volunteer, project=project, **metadata)
    except IntegrityError:
        # lost the race against a concurrent apply for the same pair
        logger.warning(f"Duplicate application blocked by constraint: volunteer={volunteer.id}, project={project.id}")
        raise ConflictError("You have already applied for this project")


def _reactivate(existing: Application, metadata) -> Application:
    timestamp = now()
    changes = {
        "status": Application.STATUS_PENDING,
        "withdrawn_at": None,
        "decided_at": None,
        "feedback": "",
        "date_applied": timestamp,
        "updated_at": timestamp,
    }
    changes.update(metadata)
    if "skills" in metadata:
        changes["skills_index"] = build_skills_index(metadata["skills"])

    updated = Application.objects.filter(
        pk=existing.pk,
        status=Application.STATUS_WITHDRAWN,
    ).update(**changes)
    if not updated:
        raise ConflictError("You have already applied for this project")

    existing.refresh_from_db()
    return existing


# ---------------------------------------------------------------------------
# Withdraw
# ---------------------------------------------------------------------------

def withdraw_application(volunteer, application_id) -> Application:
    """
    Pending -> Withdrawn, by the volunteer who applied. Nothing else is touched:
    a pending application never held a project slot.
    """
    with transaction.atomic():
        application = _get_application(application_id, for_update=True)

        if application.volunteer_id != volunteer.id:
            raise PermissionDenied("You are not authorized to withdraw this application")

        can, reason = can_transition(application, Application.STATUS_WITHDRAWN)
        if not can:
            logger.warning(
                f"Invalid application transition attempted: application={application.id}, "
                f"from={application.status}, to={Application.STATUS_WITHDRAWN}, actor={volunteer.id}"
            )
            raise ConflictError(reason)

        timestamp = now()
        updated = Application.objects.filter(
            pk=application.pk,
            status=Application.STATUS_PENDING,
        ).update(
            status=Application.STATUS_WITHDRAWN,
            withdrawn_at=timestamp,
            updated_at=timestamp,
        )
        if not updated:
            raise ConflictError("Only pending applications can be withdrawn")

    application.refresh_from_db()
    logger.info(
        f"Application state transition: application={application.id}, "
        f"from={Application.STATUS_PENDING}, to={Application.STATUS_WITHDRAWN}, actor={volunteer.id}"
    )
    return application


# ---------------------------------------------------------------------------
# Decide (accept / reject)
# ---------------------------------------------------------------------------

def decide_application(organizer, application_id, decision, feedback=None, project_id=None) -> Application:
    """
    Organizer decision on a Pending application.

    project_id is optional; when given the application must belong to it
    (NotFound otherwise).

    Reject: Pending -> Rejected, feedback stored, nothing else changes.
    Accept: claims one volunteer slot on the project with a conditional
    UPDATE, marks the application Accepted, adds the volunteer to the
    assigned set and, if that was the last slot, moves the project to
    Assigned and rejects every remaining Pending sibling. All of it commits
    together or not at all.
    """
    new_status = normalize_decision(decision)
    feedback = sanitize_description(feedback) if feedback else ""

    if project_id is None:
        project_id = _get_application(application_id).project_id

    with transaction.atomic():
        project = _lock_project(project_id)

        if project.organizer_id != organizer.id:
            raise PermissionDenied("Not authorized to update applications for this project")

        application = _get_application(application_id, for_update=True, project=project)

        can, reason = can_transition(application, new_status)
        if not can:
            logger.warning(
                f"Invalid application transition attempted: application={application.id}, "
                f"from={application.status}, to={new_status}, actor={organizer.id}. Reason: {reason}"
            )
            raise ConflictError(reason)

        if new_status == Application.STATUS_REJECTED:
            _reject(application, feedback)
        else:
            _accept(project, application, feedback)

    application.refresh_from_db()
    logger.info(
        f"Application state transition: application={application.id}, "
        f"from={Application.STATUS_PENDING}, to={new_status}, actor={organizer.id}"
    )
    return application


def _reject(application: Application, feedback: str):
    timestamp = now()
    updated = Application.objects.filter(
        pk=application.pk,
        status=Application.STATUS_PENDING,
    ).update(
        status=Application.STATUS_REJECTED,
        feedback=feedback,
        decided_at=timestamp,
        updated_at=timestamp,
    )
    if not updated:
        raise ConflictError("Cannot reject an application that is no longer pending")


def _accept(project: Project, application: Application, feedback: str):
    if project.status == Project.STATUS_ASSIGNED:
        raise ConflictError("All volunteer slots for this project are filled")
    if project.status != Project.STATUS_OPEN:
        raise ConflictError(f"Cannot accept volunteers for a project with status: {project.status}")

    timestamp = now()

    # Check-and-increment in one statement; 0 rows means the project filled
    # up (or changed status) since it was read.
    claimed = Project.objects.filter(
        pk=project.pk,
        status=Project.STATUS_OPEN,
        volunteer_count__lt=F("max_volunteers"),
    ).update(
        volunteer_count=F("volunteer_count") + 1,
        updated_at=timestamp,
    )
    if not claimed:
        logger.warning(f"Accept refused: project={project.id} has no free volunteer slot")
        raise ConflictError("All volunteer slots for this project are filled")

    updated = Application.objects.filter(
        pk=application.pk,
        status=Application.STATUS_PENDING,
    ).update(
        status=Application.STATUS_ACCEPTED,
        feedback=feedback,
        decided_at=timestamp,
        updated_at=timestamp,
    )
    if not updated:
        # raising rolls the slot claim back with the rest of the transaction
        raise ConflictError("Cannot accept an application that is no longer pending")

    project.assigned_volunteers.add(application.volunteer_id)
    project.refresh_from_db()

    logger.info(
        f"Volunteer slot claimed: project={project.id}, volunteer={application.volunteer_id}, "
        f"filled={project.volunteer_count}/{project.max_volunteers}"
    )

    close_project_if_full(project)


# ---------------------------------------------------------------------------
# Capacity driven project status
# ---------------------------------------------------------------------------

def close_project_if_full(project: Project) -> int:
    """
    If the project has no free slot left: Open -> Assigned and every Pending
    application on it -> Rejected with the standard feedback.

    Idempotent: on a project that is not full, or already closed with no
    Pending applications left, nothing changes. Returns the number of
    applications rejected by this call.
    """
    with transaction.atomic():
        is_full = Project.objects.filter(
            pk=project.pk,
            status__in=[Project.STATUS_OPEN, Project.STATUS_ASSIGNED],
            volunteer_count__gte=F("max_volunteers"),
        ).exists()
        if not is_full:
            return 0

        timestamp = now()
        promoted = Project.objects.filter(
            pk=project.pk,
            status=Project.STATUS_OPEN,
        ).update(status=Project.STATUS_ASSIGNED, updated_at=timestamp)

        rejected = Application.objects.filter(
            project_id=project.pk,
            status=Application.STATUS_PENDING,
        ).update(
            status=Application.STATUS_REJECTED,
            feedback=AUTO_REJECTION_FEEDBACK,
            decided_at=timestamp,
            updated_at=timestamp,
        )

    project.refresh_from_db()
    if promoted:
        logger.info(f"Project state transition: project={project.id}, from=Open, to=Assigned (capacity reached)")
    if rejected:
        logger.info(f"Cascade rejection: project={project.id}, rejected={rejected}")
    return rejected


def sync_capacity_status(project: Project) -> Project:
    """
    Re-derive Open/Assigned after the organizer edited max_volunteers.

    Assigned with a free slot re-opens; Open with no free slot closes (and
    cascades). Completed / Cancelled projects are left alone.
    """
    with transaction.atomic():
        locked = _lock_project(project.pk)

        if locked.status == Project.STATUS_ASSIGNED and locked.volunteer_count < locked.max_volunteers:
            reopened = Project.objects.filter(
                pk=locked.pk,
                status=Project.STATUS_ASSIGNED,
                volunteer_count__lt=F("max_volunteers"),
            ).update(status=Project.STATUS_OPEN, updated_at=now())
            if reopened:
                logger.info(f"Project state transition: project={locked.id}, from=Assigned, to=Open (capacity raised)")
        elif locked.status == Project.STATUS_OPEN and locked.is_full:
            close_project_if_full(locked)

    project.refresh_from_db()
    return project
