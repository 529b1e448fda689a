from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.attendee_auth import OptionalAttendeeJWTAuthentication
from core.exceptions import BadRequest
from events.serializers import (
    AttendeeSelfSerializer,
    EventSummarySerializer,
    LoginSerializer,
    RegisterSerializer,
)
from events.services import identity
from events.services.context import get_active_membership
from events.team_serializers import TeamDetailSerializer
from events.throttles import AttendeeAuthThrottle
from .generics import PortalAPIView


def auth_payload(attendee, token):
    return {
        "success": True,
        "attendee": {
            "id": attendee.id,
            "email": attendee.email,
            "name": attendee.name,
            "avatar_url": attendee.avatar_url,
        },
        "token": token,
    }


class AttendeeAuthView(PortalAPIView):
    """
    POST /api/events/public/<slug>/auth/   {"action": "register" | "login", ...}
    GET  /api/events/public/<slug>/auth/   current session (bearer token)
    """
    throttle_classes = [AttendeeAuthThrottle]
    throttle_scope = "attendee-auth"

    def get_authenticators(self):
        # Register/login must work even with a stale token in the header,
        # while the session check rejects a bad token outright
        if self.request.method == "POST":
            return [OptionalAttendeeJWTAuthentication()]
        return APIView.get_authenticators(self)

    def post(self, request, slug):
        action = self.get_action()
        if action not in ("register", "login"):
            raise BadRequest("Invalid action")

        event = self.get_accessible_event("Event is not accepting registrations")

        if action == "register":
            serializer = RegisterSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            attendee, token = identity.register(event, serializer.validated_data)
            return Response(auth_payload(attendee, token), status=status.HTTP_201_CREATED)

        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        attendee, token = identity.login(
            event,
            serializer.validated_data["email"],
            serializer.validated_data["password"],
        )
        return Response(auth_payload(attendee, token), status=status.HTTP_200_OK)

    def get(self, request, slug):
        attendee = self.require_attendee()
        event = attendee.event

        membership = get_active_membership(attendee)
        team_data = None
        if membership is not None:
            team_data = TeamDetailSerializer(membership.team, context={"viewer": attendee}).data

        return Response({
            "attendee": AttendeeSelfSerializer(attendee).data,
            "team": team_data,
            "teamRole": membership.role if membership else None,
            "event": EventSummarySerializer(event).data,
        })
