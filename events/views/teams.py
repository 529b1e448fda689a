# events/views/teams.py - Team Formation API Views

from rest_framework import status
from rest_framework.response import Response

from core.exceptions import BadRequest
from events.services import teams as team_service
from events.team_serializers import (
    JoinWithCodeSerializer,
    TeamCreateSerializer,
    TeamDetailSerializer,
    TeamMemberSerializer,
    TeamSerializer,
    TeamUpdateSerializer,
)
from .generics import PortalAPIView


class TeamListCreateView(PortalAPIView):
    """
    GET  /api/events/public/<slug>/teams/   public list, join codes withheld
    POST /api/events/public/<slug>/teams/   create a team, caller becomes leader
    """

    def get(self, request, slug):
        event = self.get_accessible_event()
        teams = team_service.list_teams(event)
        return Response({"teams": TeamSerializer(teams, many=True).data})

    def post(self, request, slug):
        attendee = self.require_attendee()

        serializer = TeamCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        team = team_service.create_team(attendee.event, attendee, serializer.validated_data)

        team = team_service.get_team(attendee.event, team.pk)
        return Response(
            {"team": TeamDetailSerializer(team, context={"viewer": attendee}).data},
            status=status.HTTP_201_CREATED,
        )


class TeamDetailView(PortalAPIView):
    """
    GET   /api/events/public/<slug>/teams/<team_id>/
    PATCH /api/events/public/<slug>/teams/<team_id>/   leader only
    POST  /api/events/public/<slug>/teams/<team_id>/   {"action": "join" | "leave"}
    """

    def get(self, request, slug, team_id):
        event = self.get_accessible_event()
        team = team_service.get_team(event, team_id)
        viewer = self.optional_attendee(event)
        return Response({"team": TeamDetailSerializer(team, context={"viewer": viewer}).data})

    def patch(self, request, slug, team_id):
        attendee = self.require_attendee()

        serializer = TeamUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        team = team_service.update_team(attendee.event, attendee, team_id, serializer.validated_data)

        return Response({"team": TeamDetailSerializer(team, context={"viewer": attendee}).data})

    def post(self, request, slug, team_id):
        attendee = self.require_attendee()
        action = self.get_action()

        if action == "join":
            membership = team_service.join_team(attendee.event, attendee, team_id)
            return Response({
                "success": True,
                "message": "Joined team successfully",
                "membership": TeamMemberSerializer(membership).data,
            })

        if action == "leave":
            result = team_service.leave_team(attendee.event, attendee, team_id)
            message = "Left team successfully"
            if result["team_deleted"]:
                message = "Left team successfully. Team was deleted."
            return Response({"success": True, "message": message, **result})

        raise BadRequest("Invalid action")


class TeamJoinWithCodeView(PortalAPIView):
    """
    POST /api/events/public/<slug>/teams/join-with-code/   {"code": "AB12CD"}
    """

    def post(self, request, slug):
        attendee = self.require_attendee()

        serializer = JoinWithCodeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        membership = team_service.join_team_by_code(attendee.event, attendee, serializer.validated_data.get("code"))
        team = team_service.get_team(attendee.event, membership.team_id)

        return Response({
            "success": True,
            "message": "Joined team successfully",
            "team": TeamDetailSerializer(team, context={"viewer": attendee}).data,
        })
