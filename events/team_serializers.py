# events/team_serializers.py - Team payloads

from rest_framework import serializers

from .models import Team, TeamMembership
from .sanitizers import sanitize_description, sanitize_string_list, sanitize_title
from .serializers import AttendeeSummarySerializer


def active_members_of(team):
    """Use the prefetched active memberships when the queryset provides them."""
    members = getattr(team, "active_members", None)
    if members is None:
        members = list(
            team.active_memberships().select_related("attendee").order_by("joined_at", "id")
        )
    return members


class TeamMemberSerializer(serializers.ModelSerializer):
    """Serializer for active team members"""
    attendee = AttendeeSummarySerializer(read_only=True)

    class Meta:
        model = TeamMembership
        fields = ['id', 'role', 'status', 'joined_at', 'attendee']
        read_only_fields = fields


class TeamSerializer(serializers.ModelSerializer):
    """
    Team as listed publicly. The join code is never part of a list.
    """
    is_open = serializers.BooleanField(read_only=True)
    members = serializers.SerializerMethodField()
    memberCount = serializers.SerializerMethodField()

    class Meta:
        model = Team
        fields = [
            'id', 'name', 'description', 'logo_url', 'max_members', 'is_open',
            'join_type', 'looking_for_members', 'skills_needed', 'created_at',
            'members', 'memberCount',
        ]
        read_only_fields = fields

    def get_members(self, team):
        return TeamMemberSerializer(active_members_of(team), many=True).data

    def get_memberCount(self, team):
        return len(active_members_of(team))


class TeamDetailSerializer(TeamSerializer):
    """
    Single team. `join_code` is only filled in for the team's own active
    members (pass the viewing attendee as context["viewer"]).
    """
    join_code = serializers.SerializerMethodField()

    class Meta(TeamSerializer.Meta):
        fields = TeamSerializer.Meta.fields + ['join_code', 'updated_at']
        read_only_fields = fields

    def get_join_code(self, team):
        viewer = self.context.get("viewer")
        if viewer is None or not team.join_code:
            return None
        if any(m.attendee_id == viewer.id for m in active_members_of(team)):
            return team.join_code
        return None


class TeamCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(max_length=10000, required=False, allow_blank=True, allow_null=True)
    skills_needed = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    max_members = serializers.IntegerField(min_value=1, max_value=100, required=False, allow_null=True)
    join_type = serializers.ChoiceField(choices=Team.JOIN_TYPE_CHOICES, required=False)
    logo_url = serializers.URLField(max_length=1024, required=False, allow_blank=True, allow_null=True)

    def validate_name(self, value):
        name = sanitize_title(value, max_length=100)
        if not name:
            raise serializers.ValidationError("Team name is required")
        return name

    def validate_description(self, value):
        return sanitize_description(value) if value else value

    def validate_skills_needed(self, value):
        return sanitize_string_list(value)


class TeamUpdateSerializer(TeamCreateSerializer):
    name = serializers.CharField(max_length=100, required=False)
    is_open = serializers.BooleanField(required=False)
    looking_for_members = serializers.BooleanField(required=False)
    join_code = serializers.RegexField(
        r'^[A-Za-z0-9]{4,12}$',
        required=False,
        allow_blank=True,
        error_messages={"invalid": "Join code must be 4-12 letters or digits"},
    )
    generate_new_code = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        # Capacity is fixed at creation from event policy
        attrs.pop("max_members", None)
        return attrs


class JoinWithCodeSerializer(serializers.Serializer):
    # Emptiness is reported by the service as "Join code is required"
    code = serializers.CharField(max_length=12, required=False, allow_blank=True, allow_null=True)
