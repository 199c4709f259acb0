from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from applications import services
from applications.models import Application
from core.datetime_utils import now, window_end
from projects.models import Project

User = get_user_model()


class Command(BaseCommand):
    help = "Seeds the database with demo organizers, volunteers, projects and applications"

    def add_arguments(self, parser):
        parser.add_argument(
            "--password",
            default="password",
            help="Password set on every seeded account",
        )

    def _user(self, username, role, password, **extra):
        user, created = User.objects.get_or_create(
            username=username,
            defaults={"email": f"{username}@example.com", "role": role, **extra},
        )
        if created or not user.check_password(password):
            user.set_password(password)
            user.save()
        return user

    @transaction.atomic
    def handle(self, *args, **options):
        password = options["password"]
        self.stdout.write("Seeding data...")

        # 1. Users
        organizer = self._user("greenhands", User.ROLE_ORGANIZER, password, location="Manchester")
        alice = self._user("alice", User.ROLE_VOLUNTEER, password, skills=["First Aid", "Cooking"])
        bob = self._user("bob", User.ROLE_VOLUNTEER, password, skills=["Driving", "Gardening"])
        carol = self._user("carol", User.ROLE_VOLUNTEER, password, skills=["Teaching"])

        # 2. Projects
        projects_data = [
            {
                "title": "Community kitchen helpers",
                "description": "Prepare and serve hot meals for the Saturday drop-in.",
                "location": "Manchester",
                "category": "Food",
                "required_skills": ["Cooking", "First Aid"],
                "time_commitment": "4 hours / week",
                "max_volunteers": 2,
            },
            {
                "title": "Allotment restoration",
                "description": "Clear and replant the shared allotment beds before spring.",
                "location": "Salford",
                "category": "Environment",
                "required_skills": ["Gardening"],
                "time_commitment": "Weekends",
                "max_volunteers": 1,
            },
            {
                "title": "After-school reading club",
                "description": "Read with primary school children twice a week.",
                "location": "Stockport",
                "category": "Education",
                "required_skills": ["Teaching"],
                "time_commitment": "2 hours / week",
                "max_volunteers": 3,
            },
        ]

        projects = []
        for index, data in enumerate(projects_data):
            project, created = Project.objects.get_or_create(
                organizer=organizer,
                title=data["title"],
                defaults={
                    **data,
                    "organizer_name": organizer.username,
                    "contact_email": organizer.email,
                    "start_date": window_end(14 + index * 7),
                    "application_deadline": window_end(7 + index * 7),
                },
            )
            projects.append(project)
            self.stdout.write(f"{'Created' if created else 'Found'} project: {project.title}")

        # 3. Applications, through the lifecycle engine so capacity rules hold
        kitchen, allotment, reading = projects
        plan = [
            (alice, kitchen, "I cook for a living."),
            (bob, allotment, "I have my own plot."),
            (carol, reading, "I used to run a school library."),
            (bob, kitchen, "Can drive supplies over."),
        ]
        for volunteer, project, message in plan:
            if Application.objects.filter(volunteer=volunteer, project=project).exists():
                continue
            if not project.is_accepting_applications:
                continue
            services.apply_to_project(volunteer, project.id, message=message)

        # Fill the allotment so one project shows up as Assigned
        pending = Application.objects.filter(
            project=allotment, volunteer=bob, status=Application.STATUS_PENDING
        ).first()
        if pending is not None:
            services.decide_application(organizer, pending.id, "Accepted")

        self.stdout.write(self.style.SUCCESS(
            f"Done: {Project.objects.count()} projects, "
            f"{Application.objects.count()} applications at {now():%Y-%m-%d %H:%M}"
        ))
