from django.urls import path
from ux.views.dashboard import OrganizerDashboardView, VolunteerDashboardView

urlpatterns = [
    path("volunteer/", VolunteerDashboardView.as_view(), name="volunteer-dashboard"),
    path("organizer/", OrganizerDashboardView.as_view(), name="organizer-dashboard"),
]
