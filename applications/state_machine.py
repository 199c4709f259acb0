# vmatch-backend/applications/state_machine.py
"""
Application State Machine.

Pending ─┬→ Accepted   (project organizer; may fill the project and cascade)
         ├→ Rejected   (project organizer, or cascade when the project fills)
         └→ Withdrawn  (owning volunteer)

Withdrawn → Pending is not a transition anyone can request; it only happens
when the same volunteer applies again (reactivation, see services.apply_to_project).

Accepted, Rejected and Withdrawn are terminal for organizer/volunteer actions.
"""
from typing import Tuple

from .models import Application


VALID_TRANSITIONS = {
    Application.STATUS_PENDING: [
        Application.STATUS_ACCEPTED,
        Application.STATUS_REJECTED,
        Application.STATUS_WITHDRAWN,
    ],
    Application.STATUS_ACCEPTED: [],
    Application.STATUS_REJECTED: [],
    Application.STATUS_WITHDRAWN: [],
}

# Human verbs used in error messages
ACTION_VERBS = {
    Application.STATUS_ACCEPTED: "accept",
    Application.STATUS_REJECTED: "reject",
    Application.STATUS_WITHDRAWN: "withdraw",
}


def can_transition(application: Application, new_status: str) -> Tuple[bool, str]:
    """
    Check if an application can transition to a new status.

    Returns (can_transition: bool, reason: str)
    """
    current_status = application.status

    if new_status not in dict(Application.STATUS_CHOICES):
        return False, f"Invalid status: {new_status}"

    allowed = VALID_TRANSITIONS.get(current_status, [])

    if new_status not in allowed:
        verb = ACTION_VERBS.get(new_status, "update")
        if new_status == Application.STATUS_WITHDRAWN:
            return False, f"Only pending applications can be withdrawn (current status: {current_status})"
        return False, f"Cannot {verb} an application with status: {current_status}"

    return True, ""


def get_allowed_transitions(application: Application) -> list:
    return VALID_TRANSITIONS.get(application.status, [])


def is_terminal_status(status: str) -> bool:
    return status in VALID_TRANSITIONS and len(VALID_TRANSITIONS[status]) == 0
