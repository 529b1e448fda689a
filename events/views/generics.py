from rest_framework.permissions import SAFE_METHODS
from rest_framework.views import APIView

from core.attendee_auth import OptionalAttendeeJWTAuthentication
from core.exceptions import BadRequest, Unauthorized
from events.models import Attendee
from events.services import context


class PortalAPIView(APIView):
    """
    Base view for /api/events/public/<slug>/...

    Safe methods authenticate optionally (anonymous visitors allowed,
    signed-in attendees see a bit more); writes use the strict
    bearer-token authenticator from settings.
    """

    def get_authenticators(self):
        if self.request.method in SAFE_METHODS:
            return [OptionalAttendeeJWTAuthentication()]
        return super().get_authenticators()

    @property
    def slug(self):
        return self.kwargs["slug"]

    def get_event(self):
        return context.get_event(self.slug)

    def get_accessible_event(self, forbidden_message="Event not accessible"):
        return context.get_accessible_event(self.slug, forbidden_message)

    def require_attendee(self, event=None) -> Attendee:
        """
        The attendee behind the bearer token. The token must have been
        issued for the event named in the URL.
        """
        attendee = self.request.user
        if not isinstance(attendee, Attendee):
            raise Unauthorized("Unauthorized")

        if event is None:
            event = self.get_event()
        if attendee.event_id != event.id:
            raise Unauthorized("Invalid token for this event")
        return attendee

    def get_action(self):
        """The `action` switch of a JSON body; the body must be an object."""
        if not isinstance(self.request.data, dict):
            raise BadRequest("Request body must be a JSON object")
        return self.request.data.get("action")

    def optional_attendee(self, event):
        attendee = self.request.user
        if isinstance(attendee, Attendee) and attendee.event_id == event.id:
            return attendee
        return None
