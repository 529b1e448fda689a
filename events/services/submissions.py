# events/services/submissions.py
"""
Submission workflow: (none) -> draft -> submitted.

Ownership is either the attendee's team (events whose team_size_min > 1)
or the attendee alone. One submission per owner per event, enforced by
partial unique indexes as well as the checks below.
"""
import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from core.exceptions import BadRequest, Forbidden, NotFound
from events import submission_states
from events.models import Attendee, Event, Submission, SubmissionFile, TeamMembership
from events.services.context import get_active_membership

logger = logging.getLogger("portal.submissions")

CONTENT_FIELDS = (
    "title", "description", "project_url", "demo_url", "video_url",
    "repository_url", "presentation_url", "technologies", "categories", "screenshots",
)

ACTION_SUBMIT = "submit"

TEAM_DUPLICATE = "Your team already has a submission. Edit the existing one instead."
SOLO_DUPLICATE = "You already have a submission. Edit the existing one instead."


# ---- Access rules ------------------------------------------------------


def is_team_member(team_id, attendee, leader_only: bool = False) -> bool:
    if team_id is None or attendee is None:
        return False
    qs = TeamMembership.objects.filter(
        team_id=team_id,
        attendee=attendee,
        status=TeamMembership.STATUS_ACTIVE,
    )
    if leader_only:
        qs = qs.filter(role=TeamMembership.ROLE_LEADER)
    return qs.exists()


def can_edit(submission: Submission, attendee) -> bool:
    """Owning attendee, or any active member of the owning team."""
    if attendee is None:
        return False
    if submission.is_team_owned:
        return is_team_member(submission.team_id, attendee)
    return submission.attendee_id == attendee.id


def can_delete(submission: Submission, attendee) -> bool:
    """Owning attendee, or the owning team's leader (not plain members)."""
    if attendee is None:
        return False
    if submission.is_team_owned:
        return is_team_member(submission.team_id, attendee, leader_only=True)
    return submission.attendee_id == attendee.id


def _owner_filter(attendee) -> Q:
    """Submissions `attendee` owns directly or through their active team."""
    owned = Q(attendee=attendee)
    membership = get_active_membership(attendee)
    if membership is not None:
        owned |= Q(team_id=membership.team_id)
    return owned


def visible_submissions(event: Event, attendee=None):
    """
    Public statuses for everyone; owners additionally see their own rows
    (drafts included).
    """
    visible = Q(status__in=Submission.PUBLIC_STATUSES)
    if attendee is not None and attendee.event_id == event.id:
        visible |= _owner_filter(attendee)

    return (
        Submission.objects
        .filter(event=event)
        .filter(visible)
        .select_related("team", "attendee")
        .order_by(F("submitted_at").desc(nulls_last=True), "-created_at", "-id")
    )


def list_submissions(event: Event, attendee=None):
    return visible_submissions(event, attendee)


def get_submission(event: Event, submission_id, attendee=None) -> Submission:
    submission = (
        visible_submissions(event, attendee)
        .prefetch_related("files")
        .filter(pk=submission_id)
        .first()
    )
    if submission is None:
        raise NotFound("Submission not found")
    return submission


def _get_owned_submission(event: Event, submission_id, for_update: bool = False) -> Submission:
    qs = Submission.objects.filter(event=event, pk=submission_id)
    if for_update:
        qs = qs.select_for_update()
    submission = qs.first()
    if submission is None:
        raise NotFound("Submission not found")
    return submission


# ---- Mutations ---------------------------------------------------------


def _attach_files(submission: Submission, files) -> list:
    created = [
        SubmissionFile(
            submission=submission,
            file_name=item["file_name"],
            file_url=item["file_url"],
            file_size=item.get("file_size") or 0,
            file_type=item.get("file_type") or "",
        )
        for item in files or []
    ]
    if created:
        SubmissionFile.objects.bulk_create(created)
    return created


def create_submission(event: Event, attendee: Attendee, data: dict) -> Submission:
    """
    Start a draft. `data` is validated SubmissionWriteSerializer output.
    """
    policy = event.policy

    if not policy.solo_submissions_allowed:
        membership = get_active_membership(attendee)
        if membership is None:
            raise BadRequest("You must be in a team to submit")

        owner = {"team": membership.team, "attendee": None}
        duplicate_message = TEAM_DUPLICATE
        exists = Submission.objects.filter(event=event, team=membership.team).exists()
    else:
        owner = {"team": None, "attendee": attendee}
        duplicate_message = SOLO_DUPLICATE
        exists = Submission.objects.filter(event=event, attendee=attendee, team__isnull=True).exists()

    if exists:
        raise BadRequest(duplicate_message)

    fields = {field: data[field] for field in CONTENT_FIELDS if field in data}

    try:
        with transaction.atomic():
            submission = Submission.objects.create(
                event=event,
                status=Submission.STATUS_DRAFT,
                **owner,
                **fields,
            )
            _attach_files(submission, data.get("files"))
    except IntegrityError:
        raise BadRequest(duplicate_message)

    logger.info(
        f"Submission created: submission={submission.id}, event={event.id}, "
        f"owner={'team:%s' % submission.team_id if submission.team_id else 'attendee:%s' % attendee.id}"
    )
    return submission


def update_submission(event: Event, attendee: Attendee, submission_id, data: dict, action=None) -> Submission:
    """
    Edit a draft, or finalize it with action="submit".

    Finalizing applies the accompanying field changes, then requires the
    deadline not to have passed and a non-empty title.
    """
    if action not in (None, "", ACTION_SUBMIT):
        raise BadRequest("Invalid action")

    with transaction.atomic():
        submission = _get_owned_submission(event, submission_id, for_update=True)

        if not can_edit(submission, attendee):
            raise Forbidden("Not authorized to edit this submission")

        fields = {field: data[field] for field in CONTENT_FIELDS if field in data}

        if action == ACTION_SUBMIT:
            if not submission.is_draft:
                raise BadRequest("Project has already been submitted")

            if event.policy.deadline_passed():
                raise BadRequest("Submission deadline has passed")

            title = fields.get("title", submission.title)
            if not (title or "").strip():
                raise BadRequest("Title is required")

            for field, value in fields.items():
                setattr(submission, field, value)

            ok, reason = submission_states.transition(submission, Submission.STATUS_SUBMITTED, actor=attendee)
            if not ok:
                raise BadRequest(reason)
            submission.submitted_at = timezone.now()
        else:
            if not submission.is_draft:
                raise BadRequest("Cannot edit a submitted project")

            for field, value in fields.items():
                setattr(submission, field, value)

        submission.save()
        _attach_files(submission, data.get("files"))

    logger.info(
        f"Submission {'finalized' if action == ACTION_SUBMIT else 'updated'}: "
        f"submission={submission.id}, attendee={attendee.id}, fields={sorted(fields)}"
    )
    return submission


def delete_submission(event: Event, attendee: Attendee, submission_id):
    with transaction.atomic():
        submission = _get_owned_submission(event, submission_id, for_update=True)

        if not submission.is_draft:
            raise BadRequest("Cannot delete a submitted project")

        if not can_delete(submission, attendee):
            raise Forbidden("Not authorized to delete this submission")

        submission.delete()

    logger.info(f"Submission deleted: submission={submission_id}, attendee={attendee.id}")


def get_attachable_submission(event: Event, attendee: Attendee, submission_id, for_update: bool = False) -> Submission:
    """A draft the attendee may edit, or the matching error."""
    submission = _get_owned_submission(event, submission_id, for_update=for_update)

    if not can_edit(submission, attendee):
        raise Forbidden("Not authorized to edit this submission")

    if not submission.is_draft:
        raise BadRequest("Cannot edit a submitted project")

    return submission


def attach_uploaded_file(event: Event, attendee: Attendee, submission_id, file_info: dict) -> SubmissionFile:
    """Append one stored file to a draft the attendee may edit."""
    with transaction.atomic():
        submission = get_attachable_submission(event, attendee, submission_id, for_update=True)
        return SubmissionFile.objects.create(submission=submission, **file_info)
