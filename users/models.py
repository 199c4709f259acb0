# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models

from core.constants import ROLE_ADMIN, ROLE_ORGANIZER, ROLE_VOLUNTEER


class User(AbstractUser):
    ROLE_VOLUNTEER = ROLE_VOLUNTEER
    ROLE_ORGANIZER = ROLE_ORGANIZER
    ROLE_ADMIN = ROLE_ADMIN

    ROLE_CHOICES = (
        (ROLE_VOLUNTEER, 'Volunteer'),
        (ROLE_ORGANIZER, 'Organizer'),
        (ROLE_ADMIN, 'Admin'),
    )

    role = models.CharField(
        max_length=30,
        choices=ROLE_CHOICES,
        default=ROLE_VOLUNTEER
    )

    phone = models.CharField(max_length=20, blank=True, null=True)
    bio = models.TextField(blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)

    # Default skills offered when applying to a project
    skills = models.JSONField(default=list, blank=True, help_text="List of skills")

    @property
    def is_volunteer(self):
        return self.role == self.ROLE_VOLUNTEER

    @property
    def is_organizer(self):
        return self.role == self.ROLE_ORGANIZER

    def __str__(self):
        return self.username
