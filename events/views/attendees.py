from rest_framework.response import Response

from events.serializers import AttendeeDirectorySerializer, AttendeeSelfSerializer, ProfileUpdateSerializer
from events.services import directory, identity
from .generics import PortalAPIView


class AttendeeDirectoryView(PortalAPIView):
    """
    GET   /api/events/public/<slug>/attendees/?looking_for_team=true&skills=python,react
    PATCH /api/events/public/<slug>/attendees/   update own profile
    """

    def get(self, request, slug):
        event = self.get_accessible_event()

        attendees = directory.list_attendees(
            event,
            looking_for_team=directory.parse_bool(request.query_params.get("looking_for_team")),
            skills=request.query_params.get("skills"),
        )
        return Response({
            "attendees": AttendeeDirectorySerializer(attendees, many=True).data,
            "count": len(attendees),
        })

    def patch(self, request, slug):
        attendee = self.require_attendee()

        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        attendee = identity.update_profile(attendee, serializer.validated_data)

        return Response({"attendee": AttendeeSelfSerializer(attendee).data})
