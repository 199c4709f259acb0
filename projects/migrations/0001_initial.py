import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Project",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("organizer_name", models.CharField(blank=True, max_length=150)),
                ("title", models.CharField(max_length=255)),
                ("description", models.TextField()),
                ("location", models.CharField(max_length=255)),
                ("category", models.CharField(blank=True, max_length=100)),
                ("required_skills", models.JSONField(blank=True, default=list)),
                ("skills_index", models.TextField(blank=True, default="", editable=False)),
                ("time_commitment", models.CharField(max_length=255)),
                ("contact_email", models.EmailField(blank=True, max_length=254)),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField(blank=True, null=True)),
                ("application_deadline", models.DateTimeField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Open", "Open"),
                            ("Assigned", "Assigned"),
                            ("Completed", "Completed"),
                            ("Cancelled", "Cancelled"),
                        ],
                        default="Open",
                        max_length=32,
                    ),
                ),
                (
                    "max_volunteers",
                    models.PositiveIntegerField(
                        default=1,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("volunteer_count", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "organizer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="organized_projects",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "assigned_volunteers",
                    models.ManyToManyField(
                        blank=True,
                        related_name="assigned_projects",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(volunteer_count__lte=models.F("max_volunteers")),
                        name="project_volunteers_within_capacity",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(max_volunteers__gte=1),
                        name="project_max_volunteers_positive",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["status", "application_deadline"], name="project_status_deadline_idx"),
                    models.Index(fields=["organizer", "created_at"], name="project_org_created_idx"),
                    models.Index(fields=["created_at"], name="project_created_idx"),
                ],
            },
        ),
    ]
