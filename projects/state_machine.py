# vmatch-backend/projects/state_machine.py
"""
Project State Machine.

Organizer driven transitions:
Open ─────┬→ Completed
Assigned ─┴→ Cancelled

Capacity driven transitions (lifecycle engine only, never requested directly):
Open → Assigned   (last volunteer slot filled)
Assigned → Open   (organizer raised max_volunteers)

Completed and Cancelled are terminal.
"""
from typing import Tuple
import logging

from .models import Project

logger = logging.getLogger('vmatch.projects')


# Transitions an organizer may request through the project update endpoint
ORGANIZER_TRANSITIONS = {
    Project.STATUS_OPEN: [Project.STATUS_COMPLETED, Project.STATUS_CANCELLED],
    Project.STATUS_ASSIGNED: [Project.STATUS_COMPLETED, Project.STATUS_CANCELLED],
    Project.STATUS_COMPLETED: [],
    Project.STATUS_CANCELLED: [],
}

# Transitions applied by the lifecycle engine as capacity changes
CAPACITY_TRANSITIONS = {
    Project.STATUS_OPEN: [Project.STATUS_ASSIGNED],
    Project.STATUS_ASSIGNED: [Project.STATUS_OPEN],
}


def can_transition(project: Project, new_status: str) -> Tuple[bool, str]:
    """
    Check if an organizer may move a project to a new status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = project.status

    if new_status == current_status:
        return True, "Same status"

    if new_status not in dict(Project.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    allowed = ORGANIZER_TRANSITIONS.get(current_status, [])

    if new_status not in allowed:
        if new_status in CAPACITY_TRANSITIONS.get(current_status, []):
            return False, f"Status '{new_status}' is set automatically from volunteer capacity"
        return False, f"Cannot transition from '{current_status}' to '{new_status}'"

    return True, ""


def transition(project: Project, new_status: str, actor=None, save: bool = True) -> Tuple[bool, str]:
    """
    Attempt to move a project to a new status on behalf of its organizer.

    Returns (success: bool, message: str)
    """
    can, reason = can_transition(project, new_status)

    if not can:
        logger.warning(
            f"Invalid project transition attempted: project={project.id}, "
            f"from={project.status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}. "
            f"Reason: {reason}"
        )
        return False, reason

    old_status = project.status
    project.status = new_status

    if save:
        project.save(update_fields=['status', 'updated_at'])

    logger.info(
        f"Project state transition: project={project.id}, "
        f"from={old_status}, to={new_status}, actor={getattr(actor, 'id', 'unknown')}"
    )

    return True, f"Transitioned from '{old_status}' to '{new_status}'"


def get_allowed_transitions(project: Project) -> list:
    return ORGANIZER_TRANSITIONS.get(project.status, [])


def is_terminal_status(status: str) -> bool:
    return status in ORGANIZER_TRANSITIONS and len(ORGANIZER_TRANSITIONS[status]) == 0
