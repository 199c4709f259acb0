from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from applications.models import Application
from core.constants import AUTO_REJECTION_FEEDBACK
from projects.models import Project
from users.models import User


class ApplicationApiTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.organizer = User.objects.create_user(
            username="organizer", email="organizer@example.com", password="pass", role="organizer"
        )
        self.other_organizer = User.objects.create_user(
            username="organizer2", email="organizer2@example.com", password="pass", role="organizer"
        )
        self.volunteer = User.objects.create_user(
            username="volunteer", email="volunteer@example.com", password="pass", role="volunteer"
        )
        self.volunteer2 = User.objects.create_user(
            username="volunteer2", email="volunteer2@example.com", password="pass", role="volunteer"
        )

        now = timezone.now()
        self.project = Project.objects.create(
            organizer=self.organizer,
            organizer_name="organizer",
            title="Food bank shift",
            description="Sort donations",
            location="Leeds",
            time_commitment="3 hours",
            start_date=now + timedelta(days=7),
            application_deadline=now + timedelta(days=3),
            max_volunteers=2,
        )

    def auth(self, user):
        self.client.force_authenticate(user=user)

    def apply(self, user, project=None, **extra):
        self.auth(user)
        body = {"project_id": (project or self.project).id, **extra}
        return self.client.post("/api/applications/", body, format="json")

    # -- apply ---------------------------------------------------------------

    def test_apply_returns_201_envelope(self):
        resp = self.apply(self.volunteer, message="Count me in", skills=["Lifting", "lifting"])

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        body = resp.json()
        self.assertEqual(body["status"], 201)
        self.assertEqual(body["message"], "Application submitted successfully")
        self.assertEqual(body["data"]["status"], "Pending")
        self.assertEqual(body["data"]["skills"], ["Lifting"])
        self.assertEqual(body["data"]["project_detail"]["title"], "Food bank shift")
        self.assertEqual(body["data"]["volunteer_detail"]["username"], "volunteer")

    def test_apply_requires_project_id(self):
        self.auth(self.volunteer)
        resp = self.client.post("/api/applications/", {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("project_id", resp.json()["data"])

    def test_apply_through_project_route_and_duplicate(self):
        self.auth(self.volunteer)
        url = f"/api/projects/{self.project.id}/apply/"

        first = self.client.post(url, {}, format="json")
        second = self.client.post(url, {}, format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(second.json()["message"], "You have already applied for this project")
        self.assertEqual(Application.objects.count(), 1)

    def test_apply_to_unknown_project_is_404(self):
        self.auth(self.volunteer)
        resp = self.client.post("/api/projects/999999/apply/", {}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.json()["message"], "Project not found")

    def test_organizer_cannot_apply(self):
        resp = self.apply(self.organizer)

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()["message"], "Only volunteers can apply for projects")

    def test_apply_requires_authentication(self):
        resp = self.client.post("/api/applications/", {"project_id": self.project.id}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(resp.json()["status"], 401)

    def test_apply_after_deadline_is_rejected(self):
        Project.objects.filter(pk=self.project.pk).update(
            application_deadline=timezone.now() - timedelta(minutes=5)
        )

        resp = self.apply(self.volunteer)

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["message"], "Application deadline has passed")
        self.assertFalse(Application.objects.exists())

    # -- withdraw / reactivate -----------------------------------------------

    def test_withdraw_then_reapply_reactivates(self):
        app_id = self.apply(self.volunteer).json()["data"]["id"]

        resp = self.client.put(f"/api/applications/{app_id}/withdraw/")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["data"]["status"], "Withdrawn")

        again = self.client.put(f"/api/applications/{app_id}/withdraw/")
        self.assertEqual(again.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.apply(self.volunteer)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["message"], "Application reactivated successfully")
        self.assertEqual(resp.json()["data"]["id"], app_id)
        self.assertEqual(resp.json()["data"]["status"], "Pending")
        self.assertIsNone(resp.json()["data"]["withdrawn_at"])

    def test_withdraw_through_project_route(self):
        self.apply(self.volunteer)

        resp = self.client.put(f"/api/projects/{self.project.id}/withdraw/")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(Application.objects.get().status, Application.STATUS_WITHDRAWN)

    def test_cannot_withdraw_other_volunteers_application(self):
        app_id = self.apply(self.volunteer).json()["data"]["id"]

        self.auth(self.volunteer2)
        resp = self.client.put(f"/api/applications/{app_id}/withdraw/")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    # -- decide --------------------------------------------------------------

    def test_accept_last_slot_cascades(self):
        Project.objects.filter(pk=self.project.pk).update(max_volunteers=3)
        a1 = self.apply(self.volunteer).json()["data"]["id"]
        a2 = self.apply(self.volunteer2).json()["data"]["id"]
        Project.objects.filter(pk=self.project.pk).update(max_volunteers=1)

        self.auth(self.organizer)
        resp = self.client.put(
            f"/api/projects/{self.project.id}/applications/{a1}/",
            {"status": "Accepted", "feedback": "Welcome aboard"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["message"], "Application accepted successfully")
        self.assertEqual(resp.json()["data"]["feedback"], "Welcome aboard")

        self.project.refresh_from_db()
        self.assertEqual(self.project.status, Project.STATUS_ASSIGNED)
        self.assertEqual(self.project.volunteer_count, 1)

        sibling = Application.objects.get(pk=a2)
        self.assertEqual(sibling.status, Application.STATUS_REJECTED)
        self.assertEqual(sibling.feedback, AUTO_REJECTION_FEEDBACK)

        resp = self.client.put(f"/api/applications/{a2}/", {"status": "Accepted"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reject_by_application_route(self):
        app_id = self.apply(self.volunteer).json()["data"]["id"]

        self.auth(self.organizer)
        resp = self.client.put(
            f"/api/applications/{app_id}/",
            {"status": "rejected", "feedback": "Shift is full"},
            format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["data"]["status"], "Rejected")
        self.assertEqual(resp.json()["data"]["feedback"], "Shift is full")

    def test_invalid_decision_is_validation_error(self):
        app_id = self.apply(self.volunteer).json()["data"]["id"]

        self.auth(self.organizer)
        resp = self.client.put(f"/api/applications/{app_id}/", {"status": "Pending"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("status", resp.json()["data"])

    def test_other_organizer_cannot_decide(self):
        app_id = self.apply(self.volunteer).json()["data"]["id"]

        self.auth(self.other_organizer)
        resp = self.client.put(f"/api/applications/{app_id}/", {"status": "Accepted"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(Application.objects.get(pk=app_id).status, Application.STATUS_PENDING)

    def test_decide_unknown_application_is_404(self):
        self.auth(self.organizer)
        resp = self.client.put("/api/applications/999999/", {"status": "Accepted"}, format="json")

        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_application_detail_visibility(self):
        app_id = self.apply(self.volunteer).json()["data"]["id"]

        self.assertEqual(self.client.get(f"/api/applications/{app_id}/").status_code, 200)

        self.auth(self.organizer)
        self.assertEqual(self.client.get(f"/api/applications/{app_id}/").status_code, 200)

        self.auth(self.volunteer2)
        self.assertEqual(self.client.get(f"/api/applications/{app_id}/").status_code, 403)

    # -- listings ------------------------------------------------------------

    def _projects(self, count):
        now = timezone.now()
        return [
            Project.objects.create(
                organizer=self.organizer,
                organizer_name="organizer",
                title=f"Project {i}",
                description="Park maintenance" if i % 2 else "Library reading",
                location="York",
                time_commitment="2 hours",
                start_date=now + timedelta(days=10),
                application_deadline=now + timedelta(days=5),
                max_volunteers=2,
            )
            for i in range(count)
        ]

    def test_volunteer_listing_paginates_with_total(self):
        for project in self._projects(3):
            self.apply(self.volunteer, project=project)

        resp = self.client.get("/api/applications/volunteer/?limit=2&page=2")

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        data = resp.json()["data"]
        self.assertEqual(len(data["results"]), 1)
        self.assertEqual(data["pagination"], {"total": 3, "page": 2, "limit": 2, "pages": 2})

    def test_volunteer_listing_filters(self):
        projects = self._projects(3)
        ids = [self.apply(self.volunteer, project=p).json()["data"]["id"] for p in projects]
        self.client.put(f"/api/applications/{ids[0]}/withdraw/")

        resp = self.client.get("/api/applications/volunteer/?status=Withdrawn")
        self.assertEqual([a["id"] for a in resp.json()["data"]["results"]], [ids[0]])

        resp = self.client.get("/api/applications/volunteer/?search=park")
        self.assertEqual({a["id"] for a in resp.json()["data"]["results"]}, {ids[1]})

        resp = self.client.get(f"/api/applications/volunteer/?project_id={projects[2].id}")
        self.assertEqual([a["id"] for a in resp.json()["data"]["results"]], [ids[2]])

    def test_volunteer_listing_default_order_is_newest_first(self):
        projects = self._projects(2)
        older = self.apply(self.volunteer, project=projects[0]).json()["data"]["id"]
        newer = self.apply(self.volunteer, project=projects[1]).json()["data"]["id"]
        Application.objects.filter(pk=older).update(date_applied=timezone.now() - timedelta(days=2))

        resp = self.client.get("/api/applications/volunteer/")
        self.assertEqual([a["id"] for a in resp.json()["data"]["results"]], [newer, older])

        resp = self.client.get("/api/applications/volunteer/?sort=date_applied:asc")
        self.assertEqual([a["id"] for a in resp.json()["data"]["results"]], [older, newer])

    def test_listing_field_projection(self):
        self.apply(self.volunteer)

        resp = self.client.get("/api/applications/volunteer/?fields=status,project")

        item = resp.json()["data"]["results"][0]
        self.assertEqual(set(item), {"id", "status", "project"})

    def test_listing_rejects_unknown_sort_field(self):
        self.auth(self.volunteer)
        resp = self.client.get("/api/applications/volunteer/?sort=password:asc")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("sort", resp.json()["data"])

    def test_listing_rejects_invalid_page(self):
        self.auth(self.volunteer)
        resp = self.client.get("/api/applications/volunteer/?page=0")

        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_organizer_listing_only_covers_own_projects(self):
        now = timezone.now()
        foreign = Project.objects.create(
            organizer=self.other_organizer,
            title="Elsewhere",
            description="Other organizer",
            location="Hull",
            time_commitment="1 hour",
            start_date=now + timedelta(days=7),
            application_deadline=now + timedelta(days=3),
        )
        mine = self.apply(self.volunteer).json()["data"]["id"]
        self.apply(self.volunteer, project=foreign)

        self.auth(self.organizer)
        resp = self.client.get("/api/applications/organizer/")

        self.assertEqual([a["id"] for a in resp.json()["data"]["results"]], [mine])

    def test_volunteer_cannot_use_organizer_listing(self):
        self.auth(self.volunteer)
        resp = self.client.get("/api/applications/organizer/")

        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()["message"], "Not authorized as an organizer")

    def test_project_applications_for_owner_only(self):
        self.apply(self.volunteer)
        self.apply(self.volunteer2)

        self.auth(self.organizer)
        resp = self.client.get(f"/api/projects/{self.project.id}/applications/")
        self.assertEqual(resp.json()["data"]["pagination"]["total"], 2)

        resp = self.client.get(f"/api/applications/project/{self.project.id}/?status=Pending")
        self.assertEqual(resp.json()["data"]["pagination"]["total"], 2)

        self.auth(self.other_organizer)
        resp = self.client.get(f"/api/projects/{self.project.id}/applications/")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_application_status_endpoint(self):
        self.auth(self.volunteer)
        url = f"/api/projects/{self.project.id}/application-status/"

        resp = self.client.get(url)
        self.assertEqual(resp.json()["data"], {"applied": False})

        self.apply(self.volunteer)
        resp = self.client.get(url)
        self.assertTrue(resp.json()["data"]["applied"])
        self.assertEqual(resp.json()["data"]["status"], "Pending")
