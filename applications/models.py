# vmatch-backend/applications/models.py
from django.conf import settings
from django.db import models
from django.utils import timezone

from projects.models import Project
from projects.sanitizers import build_skills_index


class Application(models.Model):
    """
    A volunteer's application to a project.

    One row per (volunteer, project): withdrawing keeps the row and a later
    re-application reactivates it. Status only moves through
    applications/services.py.
    """
    STATUS_PENDING = "Pending"
    STATUS_ACCEPTED = "Accepted"
    STATUS_REJECTED = "Rejected"
    STATUS_WITHDRAWN = "Withdrawn"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_REJECTED, "Rejected"),
        (STATUS_WITHDRAWN, "Withdrawn"),
    ]

    # Count against project capacity
    ACTIVE_STATUSES = (STATUS_PENDING, STATUS_ACCEPTED)

    volunteer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="applications",
    )
    project = models.ForeignKey(
        Project,
        on_delete=models.CASCADE,
        related_name="applications",
    )

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_PENDING)

    date_applied = models.DateTimeField(default=timezone.now)
    withdrawn_at = models.DateTimeField(blank=True, null=True)
    decided_at = models.DateTimeField(blank=True, null=True)

    # Volunteer supplied metadata
    message = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    skills = models.JSONField(default=list, blank=True)
    skills_index = models.TextField(blank=True, default="", editable=False)
    availability = models.CharField(max_length=255, blank=True, default="")

    # Organizer feedback (manual, or the automatic cascade message)
    feedback = models.TextField(blank=True, default="")

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date_applied"]
        constraints = [
            models.UniqueConstraint(
                fields=["volunteer", "project"],
                name="unique_volunteer_project_application",
            ),
        ]
        indexes = [
            # List applications for a project by status (cascade, organizer view)
            models.Index(
                fields=["project", "status"],
                name="app_project_status_idx",
            ),
            # Volunteer's own listing, newest first
            models.Index(
                fields=["volunteer", "date_applied"],
                name="app_volunteer_applied_idx",
            ),
        ]

    def save(self, *args, **kwargs):
        self.skills_index = build_skills_index(self.skills)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "skills" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"skills_index"}
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.volunteer} -> {self.project} ({self.status})"
