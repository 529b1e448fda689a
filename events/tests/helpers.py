from datetime import timedelta

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from events.models import Event
from events.services import identity


class PortalTestCase(TestCase):
    """Shared fixtures: one published hackathon and a client per attendee."""

    password = "correct-horse"

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.event = self.make_event("spring-hack")

    def make_event(self, slug, **overrides):
        now = timezone.now()
        fields = {
            "title": slug.replace("-", " ").title(),
            "slug": slug,
            "event_type": Event.TYPE_HACKATHON,
            "start_date": now + timedelta(days=1),
            "end_date": now + timedelta(days=3),
            "is_public": True,
            "is_published": True,
            "requirements": {},
        }
        fields.update(overrides)
        return Event.objects.create(**fields)

    def make_attendee(self, email, name=None, event=None, **extra):
        data = {"email": email, "password": self.password, "name": name or email.split("@")[0].title()}
        data.update(extra)
        attendee, token = identity.register(event or self.event, data)
        return attendee, token

    def client_for(self, token):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    def url(self, path="", event=None):
        return f"/api/events/public/{(event or self.event).slug}/{path}"

    def reload(self, obj):
        obj.refresh_from_db()
        return obj


def attendee_ids(team_payload):
    return [m["attendee"]["id"] for m in team_payload["members"]]
