# core/attendee_auth.py
# Custom DRF authentication class to verify attendee bearer tokens

import logging
from rest_framework.authentication import BaseAuthentication, get_authorization_header
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import TokenError

logger = logging.getLogger("portal.auth")


class AttendeeJWTAuthentication(BaseAuthentication):
    """
    Authentication class for the public event portal.

    This authenticator:
    1. Extracts the token from the Authorization header
    2. Verifies the signature and expiry (stateless, no session store)
    3. Loads the Attendee bound to the token and checks it still belongs
       to the token's event

    request.user is the Attendee, request.auth the verified token.
    Matching the token's event against the URL slug is left to the views.
    """
    keyword = "Bearer"

    def authenticate(self, request):
        auth = get_authorization_header(request).split()

        if not auth or auth[0].lower() != self.keyword.lower().encode():
            return None  # Anonymous; protected views reject it themselves

        if len(auth) != 2:
            raise AuthenticationFailed("Invalid token")

        try:
            raw_token = auth[1].decode()
        except UnicodeError:
            raise AuthenticationFailed("Invalid token")

        from events.tokens import AttendeeToken

        try:
            token = AttendeeToken(raw_token)
        except TokenError as e:
            logger.debug(f"Rejected attendee token: {e}")
            raise AuthenticationFailed("Invalid token")

        attendee = self._get_attendee(token)
        return (attendee, token)

    def authenticate_header(self, request):
        return f'{self.keyword} realm="api"'

    def _get_attendee(self, token):
        from events.models import Attendee

        attendee_id = token.get("attendee_id")
        event_id = token.get("event_id")
        if not attendee_id or not event_id:
            raise AuthenticationFailed("Invalid token")

        try:
            attendee = Attendee.objects.select_related("event").get(pk=attendee_id)
        except Attendee.DoesNotExist:
            raise AuthenticationFailed("Attendee not found")

        if attendee.event_id != event_id:
            raise AuthenticationFailed("Invalid token")

        return attendee


class OptionalAttendeeJWTAuthentication(AttendeeJWTAuthentication):
    """
    For public reads that show a bit more to a signed-in attendee
    (own drafts, own team's join code). A bad token there is treated
    as anonymous instead of failing the request.
    """

    def authenticate(self, request):
        try:
            return super().authenticate(request)
        except AuthenticationFailed:
            return None
