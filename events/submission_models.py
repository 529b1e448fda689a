# events/submission_models.py - Project submissions

from django.db import models
from django.db.models import Q


class Submission(models.Model):
    """
    A project entered into an event.

    Owned by exactly one of a team or a lone attendee. The core only moves
    draft -> submitted; the remaining statuses are assigned by operators
    (see events.submission_states).
    """
    STATUS_DRAFT = "draft"
    STATUS_SUBMITTED = "submitted"
    STATUS_ACCEPTED = "accepted"
    STATUS_WINNER = "winner"
    STATUS_REJECTED = "rejected"

    STATUS_CHOICES = [
        (STATUS_DRAFT, "Draft"),
        (STATUS_SUBMITTED, "Submitted"),
        (STATUS_ACCEPTED, "Accepted"),
        (STATUS_WINNER, "Winner"),
        (STATUS_REJECTED, "Rejected"),
    ]

    # Statuses anyone may see in public listings
    PUBLIC_STATUSES = [STATUS_SUBMITTED, STATUS_ACCEPTED, STATUS_WINNER]

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="submissions")
    team = models.ForeignKey(
        "events.Team",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="submissions",
    )
    attendee = models.ForeignKey(
        "events.Attendee",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="submissions",
    )

    title = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True, null=True)
    project_url = models.URLField(max_length=1024, blank=True, null=True)
    demo_url = models.URLField(max_length=1024, blank=True, null=True)
    video_url = models.URLField(max_length=1024, blank=True, null=True)
    repository_url = models.URLField(max_length=1024, blank=True, null=True)
    presentation_url = models.URLField(max_length=1024, blank=True, null=True)
    technologies = models.JSONField(default=list, blank=True)
    categories = models.JSONField(default=list, blank=True)
    screenshots = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    submitted_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(team__isnull=False, attendee__isnull=True)
                    | Q(team__isnull=True, attendee__isnull=False)
                ),
                name="submission_single_owner",
            ),
            models.UniqueConstraint(
                fields=["event", "team"],
                condition=Q(team__isnull=False),
                name="one_submission_per_team",
            ),
            models.UniqueConstraint(
                fields=["event", "attendee"],
                condition=Q(team__isnull=True),
                name="one_solo_submission_per_attendee",
            ),
        ]
        indexes = [
            models.Index(fields=["event", "status"], name="submission_event_status_idx"),
        ]

    def __str__(self):
        return f"{self.title or 'Untitled'} ({self.get_status_display()})"

    @property
    def is_draft(self):
        return self.status == self.STATUS_DRAFT

    @property
    def is_team_owned(self):
        return self.team_id is not None


class SubmissionFile(models.Model):
    """Attachment metadata; the bytes live in the configured storage."""
    submission = models.ForeignKey(Submission, on_delete=models.CASCADE, related_name="files")
    file_name = models.CharField(max_length=255)
    file_url = models.CharField(max_length=2048)
    file_size = models.PositiveBigIntegerField(default=0)
    file_type = models.CharField(max_length=150, blank=True)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["uploaded_at", "id"]

    def __str__(self):
        return self.file_name
