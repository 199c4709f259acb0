# projects/urls.py
from django.urls import path

from applications.views import (
    ProjectApplicationDecisionView,
    ProjectApplicationStatusView,
    ProjectApplicationsView,
    ProjectApplyView,
    ProjectWithdrawView,
)
from .views import (
    AvailableProjectsView,
    EndingSoonProjectsView,
    MyProjectsView,
    ProjectDetailView,
    ProjectListCreateView,
)

urlpatterns = [
    path("", ProjectListCreateView.as_view(), name="project-list"),
    path("available/", AvailableProjectsView.as_view(), name="project-available"),
    path("ending-soon/", EndingSoonProjectsView.as_view(), name="project-ending-soon"),
    path("mine/", MyProjectsView.as_view(), name="project-mine"),
    path("<int:pk>/", ProjectDetailView.as_view(), name="project-detail"),
    path("<int:pk>/apply/", ProjectApplyView.as_view(), name="project-apply"),
    path("<int:pk>/withdraw/", ProjectWithdrawView.as_view(), name="project-withdraw"),
    path("<int:pk>/application-status/", ProjectApplicationStatusView.as_view(), name="project-application-status"),
    path("<int:pk>/applications/", ProjectApplicationsView.as_view(), name="project-applications"),
    path(
        "<int:project_id>/applications/<int:pk>/",
        ProjectApplicationDecisionView.as_view(),
        name="project-application-decision",
    ),
]
