# events/models.py
from django.conf import settings
from django.contrib.auth.hashers import check_password, make_password
from django.db import models

from .requirements import EventRequirements


class Event(models.Model):
    """
    Event context for the public portal.

    Created and edited by the operator (admin); the portal only reads it.
    Event-specific policy lives in the free-form `requirements` document and
    is read through `Event.policy`.
    """
    TYPE_HACKATHON = "hackathon"
    TYPE_CONFERENCE = "conference"
    TYPE_MEETUP = "meetup"
    TYPE_WORKSHOP = "workshop"
    TYPE_OTHER = "other"

    TYPE_CHOICES = [
        (TYPE_HACKATHON, "Hackathon"),
        (TYPE_CONFERENCE, "Conference"),
        (TYPE_MEETUP, "Meetup"),
        (TYPE_WORKSHOP, "Workshop"),
        (TYPE_OTHER, "Other"),
    ]

    organizer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="organized_events",
        null=True,
        blank=True,
    )
    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=120, unique=True)
    description = models.TextField(blank=True)
    event_type = models.CharField(max_length=32, choices=TYPE_CHOICES, default=TYPE_OTHER)
    color = models.CharField(max_length=20, blank=True)
    start_date = models.DateTimeField(blank=True, null=True)
    end_date = models.DateTimeField(blank=True, null=True)

    is_public = models.BooleanField(default=True)
    is_published = models.BooleanField(default=False)

    requirements = models.JSONField(
        default=dict,
        blank=True,
        help_text="Event policy: team_size_min, team_size_max, submission_deadline",
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["created_at"], name="event_created_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def is_accessible(self):
        return self.is_public and self.is_published

    @property
    def policy(self) -> EventRequirements:
        return EventRequirements.from_document(self.requirements)


class Attendee(models.Model):
    """
    A person registered for exactly one event.

    Not a Django user: attendees authenticate with event-scoped bearer tokens
    (see core.attendee_auth), so this model carries the bits DRF expects from
    request.user (`is_authenticated`).
    """
    STATUS_CONFIRMED = "confirmed"
    STATUS_PENDING = "pending"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_PENDING, "Pending"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="attendees")
    email = models.EmailField()
    name = models.CharField(max_length=150)

    phone = models.CharField(max_length=40, blank=True, null=True)
    company = models.CharField(max_length=150, blank=True, null=True)
    job_title = models.CharField(max_length=150, blank=True, null=True)
    avatar_url = models.URLField(max_length=1024, blank=True, null=True)
    skills = models.JSONField(default=list, blank=True)
    bio = models.TextField(blank=True, null=True)
    social_links = models.JSONField(default=dict, blank=True)

    looking_for_team = models.BooleanField(default=True)

    # Salted hash; null until the attendee self-registers
    password = models.CharField(max_length=128, blank=True, null=True)

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_CONFIRMED)
    registered_at = models.DateTimeField(auto_now_add=True)
    last_login_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["event", "email"],
                name="unique_attendee_email_per_event",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="attendee_event_status_idx"),
            models.Index(fields=["event", "looking_for_team"], name="attendee_looking_idx"),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}> ({self.event.slug})"

    # DRF / request.user protocol
    is_authenticated = True
    is_anonymous = False

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password) -> bool:
        if not self.password:
            return False
        return check_password(raw_password, self.password)

    @property
    def has_password(self):
        return bool(self.password)


from .team_models import Team, TeamMembership  # noqa: E402,F401
from .submission_models import Submission, SubmissionFile  # noqa: E402,F401
