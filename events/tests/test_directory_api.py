from rest_framework import status

from events.models import Attendee
from .helpers import PortalTestCase


class AttendeeDirectoryApiTestCase(PortalTestCase):
    def setUp(self):
        super().setUp()
        self.ana, token = self.make_attendee("ana@example.com", "Ana", skills=["Python", "Django"], company="Acme")
        self.ana_client = self.client_for(token)
        self.ben, _ = self.make_attendee("ben@example.com", "Ben", skills=["React"])
        self.cid, _ = self.make_attendee("cid@example.com", "Cid", skills=["PostgreSQL"])
        Attendee.objects.filter(pk=self.cid.pk).update(looking_for_team=False)
        Attendee.objects.create(event=self.event, email="gone@example.com", name="Gone", status=Attendee.STATUS_CANCELLED)

    def names(self, query=""):
        resp = self.client.get(self.url(f"attendees/{query}"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        return {a["name"] for a in resp.json()["attendees"]}

    def test_lists_confirmed_attendees(self):
        resp = self.client.get(self.url("attendees/"))
        self.assertEqual(resp.json()["count"], 3)
        self.assertEqual(self.names(), {"Ana", "Ben", "Cid"})

    def test_directory_hides_private_fields(self):
        entry = self.client.get(self.url("attendees/")).json()["attendees"][0]
        for field in ("email", "phone", "password"):
            self.assertNotIn(field, entry)

    def test_filter_looking_for_team(self):
        self.assertEqual(self.names("?looking_for_team=true"), {"Ana", "Ben"})
        self.assertEqual(self.names("?looking_for_team=false"), {"Cid"})

    def test_filter_skills_any_match_case_insensitive(self):
        self.assertEqual(self.names("?skills=python"), {"Ana"})
        self.assertEqual(self.names("?skills=REACT,postgres"), {"Ben", "Cid"})
        self.assertEqual(self.names("?skills=cobol"), set())

    def test_directory_requires_published_event(self):
        hidden = self.make_event("hidden-hack", is_published=False)
        resp = self.client.get(self.url("attendees/", event=hidden))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_own_profile(self):
        resp = self.ana_client.patch(
            self.url("attendees/"),
            {"bio": "Backend dev", "looking_for_team": False, "skills": ["Go"]},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["attendee"]["skills"], ["Go"])

        ana = self.reload(self.ana)
        self.assertEqual(ana.bio, "Backend dev")
        self.assertFalse(ana.looking_for_team)

    def test_update_profile_requires_token(self):
        resp = self.client.patch(self.url("attendees/"), {"bio": "x"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
