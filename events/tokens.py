# events/tokens.py
from django.conf import settings
from rest_framework_simplejwt.tokens import Token


class AttendeeToken(Token):
    """
    Bearer credential for one attendee of one event.

    Signed with SIMPLE_JWT's key, carries `attendee_id` and `event_id`.
    There is no server-side session: a token is valid until it expires.
    """
    token_type = "attendee"
    lifetime = settings.ATTENDEE_TOKEN_LIFETIME

    @classmethod
    def for_attendee(cls, attendee):
        token = cls()
        token["attendee_id"] = attendee.id
        token["event_id"] = attendee.event_id
        return token
