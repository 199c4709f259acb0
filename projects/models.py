# vmatch-backend/projects/models.py
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from .sanitizers import build_skills_index


class Project(models.Model):
    """
    A volunteering opportunity posted by an organizer.

    status and the assigned volunteer set are only changed by the
    application lifecycle engine (applications/services.py), except for the
    organizer's terminal Completed / Cancelled transitions.
    """
    STATUS_OPEN = "Open"
    STATUS_ASSIGNED = "Assigned"
    STATUS_COMPLETED = "Completed"
    STATUS_CANCELLED = "Cancelled"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_ASSIGNED, "Assigned"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="organized_projects",
    )
    organizer_name = models.CharField(max_length=150, blank=True)

    title = models.CharField(max_length=255)
    description = models.TextField()
    location = models.CharField(max_length=255)
    category = models.CharField(max_length=100, blank=True)
    required_skills = models.JSONField(default=list, blank=True)
    # ",skill a,skill b," - maintained in save(), used by the skills filter
    skills_index = models.TextField(blank=True, default="", editable=False)
    time_commitment = models.CharField(max_length=255)
    contact_email = models.EmailField(blank=True)

    start_date = models.DateTimeField()
    end_date = models.DateTimeField(blank=True, null=True)
    application_deadline = models.DateTimeField()

    status = models.CharField(
        max_length=32,
        choices=STATUS_CHOICES,
        default=STATUS_OPEN,
    )

    # Capacity
    max_volunteers = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)],
    )
    assigned_volunteers = models.ManyToManyField(
        settings.AUTH_USER_MODEL,
        related_name="assigned_projects",
        blank=True,
    )
    # Size of assigned_volunteers; the engine claims slots with a conditional
    # UPDATE on this column so two concurrent accepts cannot overbook.
    volunteer_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(volunteer_count__lte=models.F("max_volunteers")),
                name="project_volunteers_within_capacity",
            ),
            models.CheckConstraint(
                condition=models.Q(max_volunteers__gte=1),
                name="project_max_volunteers_positive",
            ),
        ]
        indexes = [
            models.Index(
                fields=["status", "application_deadline"],
                name="project_status_deadline_idx",
            ),
            models.Index(
                fields=["organizer", "created_at"],
                name="project_org_created_idx",
            ),
            models.Index(
                fields=["created_at"],
                name="project_created_idx",
            ),
        ]

    def save(self, *args, **kwargs):
        self.skills_index = build_skills_index(self.required_skills)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "required_skills" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"skills_index"}
        super().save(*args, **kwargs)

    @property
    def remaining_slots(self):
        return max(0, self.max_volunteers - self.volunteer_count)

    @property
    def is_full(self):
        return self.volunteer_count >= self.max_volunteers

    @property
    def is_accepting_applications(self):
        return (
            self.status == self.STATUS_OPEN
            and self.application_deadline is not None
            and self.application_deadline > timezone.now()
        )

    def __str__(self):
        return f"{self.title} ({self.status})"
