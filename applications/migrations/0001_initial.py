import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("projects", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Application",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Pending", "Pending"),
                            ("Accepted", "Accepted"),
                            ("Rejected", "Rejected"),
                            ("Withdrawn", "Withdrawn"),
                        ],
                        default="Pending",
                        max_length=32,
                    ),
                ),
                ("date_applied", models.DateTimeField(default=django.utils.timezone.now)),
                ("withdrawn_at", models.DateTimeField(blank=True, null=True)),
                ("decided_at", models.DateTimeField(blank=True, null=True)),
                ("message", models.TextField(blank=True, default="")),
                ("notes", models.TextField(blank=True, default="")),
                ("skills", models.JSONField(blank=True, default=list)),
                ("skills_index", models.TextField(blank=True, default="", editable=False)),
                ("availability", models.CharField(blank=True, default="", max_length=255)),
                ("feedback", models.TextField(blank=True, default="")),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "project",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="applications",
                        to="projects.project",
                    ),
                ),
                (
                    "volunteer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="applications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date_applied"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("volunteer", "project"),
                        name="unique_volunteer_project_application",
                    ),
                ],
                "indexes": [
                    models.Index(fields=["project", "status"], name="app_project_status_idx"),
                    models.Index(fields=["volunteer", "date_applied"], name="app_volunteer_applied_idx"),
                ],
            },
        ),
    ]
