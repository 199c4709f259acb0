# applications/urls.py
from django.urls import path

from .views import (
    ApplicationDetailView,
    ApplicationWithdrawView,
    ApplyView,
    OrganizerApplicationsView,
    ProjectApplicationsView,
    VolunteerApplicationsView,
)

urlpatterns = [
    path("", ApplyView.as_view(), name="application-apply"),
    path("volunteer/", VolunteerApplicationsView.as_view(), name="volunteer-applications"),
    path("organizer/", OrganizerApplicationsView.as_view(), name="organizer-applications"),
    path("project/<int:pk>/", ProjectApplicationsView.as_view(), name="applications-for-project"),
    path("<int:pk>/", ApplicationDetailView.as_view(), name="application-detail"),
    path("<int:pk>/withdraw/", ApplicationWithdrawView.as_view(), name="application-withdraw"),
]
