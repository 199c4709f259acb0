from rest_framework.permissions import BasePermission

from .constants import ROLE_ORGANIZER, ROLE_VOLUNTEER


def user_has_role(user, role) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return getattr(user, "role", None) == role


class IsOrganizer(BasePermission):
    """
    Organizer-only endpoints (project creation, organizer listings, dashboards).
    Ownership of a specific project is checked by the view/engine, not here.
    """
    message = "Not authorized as an organizer"

    def has_permission(self, request, view):
        return user_has_role(request.user, ROLE_ORGANIZER)


class IsVolunteer(BasePermission):
    message = "Only volunteers can access this endpoint"

    def has_permission(self, request, view):
        return user_has_role(request.user, ROLE_VOLUNTEER)
