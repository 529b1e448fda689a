# events/team_models.py - Participant team formation

from django.db import models
from django.db.models import Q


class Team(models.Model):
    """
    Team Formation System

    Allows attendees to:
    1. Create a team for their event (creator becomes leader)
    2. Let others join directly (open), with a shared code (code),
       or not at all (invite_only)
    3. Leave, with leadership passed on or the team dissolved

    Invariants held by the database, not only by the services:
    - one active membership per attendee (see TeamMembership)
    - one active leader per team
    - team name unique per event, join code unique per event
    """
    JOIN_OPEN = "open"
    JOIN_CODE = "code"
    JOIN_INVITE_ONLY = "invite_only"

    JOIN_TYPE_CHOICES = [
        (JOIN_OPEN, "Open"),
        (JOIN_CODE, "Join code"),
        (JOIN_INVITE_ONLY, "Invite only"),
    ]

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="teams")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    logo_url = models.URLField(max_length=1024, blank=True, null=True)
    skills_needed = models.JSONField(default=list, blank=True, help_text="Skills the team is looking for")

    max_members = models.PositiveIntegerField(default=5, help_text="Maximum active team members")
    join_type = models.CharField(max_length=20, choices=JOIN_TYPE_CHOICES, default=JOIN_OPEN)
    join_code = models.CharField(max_length=12, blank=True, null=True)
    looking_for_members = models.BooleanField(default=True)

    created_by = models.ForeignKey(
        "events.Attendee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_teams",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["event", "name"], name="unique_team_name_per_event"),
            models.UniqueConstraint(
                fields=["event", "join_code"],
                condition=Q(join_code__isnull=False),
                name="unique_team_join_code_per_event",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "created_at"], name="team_event_created_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.event.title})"

    @property
    def is_open(self):
        return self.join_type == self.JOIN_OPEN

    def active_memberships(self):
        return self.memberships.filter(status=TeamMembership.STATUS_ACTIVE)

    @property
    def member_count(self):
        return self.active_memberships().count()

    @property
    def is_full(self):
        return self.member_count >= self.max_members


class TeamMembership(models.Model):
    """
    Attendee <-> Team join row.

    Rows are never deleted when someone leaves; they flip to `left` so the
    team history survives. Only `active` rows count toward capacity and
    leadership.
    """
    ROLE_LEADER = "leader"
    ROLE_MEMBER = "member"

    ROLE_CHOICES = [
        (ROLE_LEADER, "Team Leader"),
        (ROLE_MEMBER, "Member"),
    ]

    STATUS_ACTIVE = "active"
    STATUS_LEFT = "left"

    STATUS_CHOICES = [
        (STATUS_ACTIVE, "Active"),
        (STATUS_LEFT, "Left"),
    ]

    team = models.ForeignKey(Team, on_delete=models.CASCADE, related_name="memberships")
    attendee = models.ForeignKey("events.Attendee", on_delete=models.CASCADE, related_name="team_memberships")
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_MEMBER)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    joined_at = models.DateTimeField(auto_now_add=True)
    left_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["attendee"],
                condition=Q(status="active"),
                name="one_active_team_per_attendee",
            ),
            models.UniqueConstraint(
                fields=["team"],
                condition=Q(status="active", role="leader"),
                name="one_active_leader_per_team",
            ),
        ]
        indexes = [
            models.Index(fields=["team", "status", "joined_at"], name="membership_team_active_idx"),
        ]

    def __str__(self):
        return f"{self.attendee.name} in {self.team.name} ({self.role}, {self.status})"

    @property
    def is_leader(self):
        return self.role == self.ROLE_LEADER
