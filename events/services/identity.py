# events/services/identity.py
"""
Identity & session issuing for event attendees.

Attendees are scoped to one event. Registering or logging in returns a
signed bearer token (events.tokens.AttendeeToken) that every other portal
call presents; there is no server-side session, tokens simply expire.
"""
import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import Conflict, Unauthorized
from events.models import Attendee, Event
from events.tokens import AttendeeToken

logger = logging.getLogger("portal.auth")

PROFILE_FIELDS = (
    "name", "phone", "company", "job_title", "avatar_url",
    "skills", "bio", "social_links", "looking_for_team",
)


def issue_token(attendee: Attendee) -> str:
    return str(AttendeeToken.for_attendee(attendee))


def dispatch_registration_notification(attendee_id: int):
    """
    Fire-and-forget: hand the "attendee registered" notification to Celery.
    Failing to enqueue never affects the registration itself.
    """
    from events.tasks import send_registration_notification

    try:
        send_registration_notification.delay(attendee_id)
    except Exception as e:
        logger.warning(f"Failed to dispatch registration notification for attendee {attendee_id}: {e}")


def register(event: Event, data: dict):
    """
    Enroll a new attendee for `event` and issue their first token.

    `data` is validated RegisterSerializer output.
    Returns (attendee, token).
    """
    email = data["email"].strip().lower()

    if Attendee.objects.filter(event=event, email=email).exists():
        raise Conflict("Email already registered for this event")

    attendee = Attendee(
        event=event,
        email=email,
        status=Attendee.STATUS_CONFIRMED,
        looking_for_team=True,
    )
    for field in PROFILE_FIELDS:
        if field in data and field != "looking_for_team":
            setattr(attendee, field, data[field])
    attendee.set_password(data["password"])

    try:
        with transaction.atomic():
            attendee.save()
            # Notification goes out only once the attendee row is committed
            transaction.on_commit(lambda: dispatch_registration_notification(attendee.id))
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        raise Conflict("Email already registered for this event")

    logger.info(f"Attendee registered: attendee={attendee.id}, event={event.id}")
    return attendee, issue_token(attendee)


def login(event: Event, email: str, password: str):
    """
    Check credentials and issue a fresh token.
    Returns (attendee, token).
    """
    attendee = Attendee.objects.filter(event=event, email=(email or "").strip().lower()).first()

    if attendee is None:
        raise Unauthorized("Invalid email or password")

    if not attendee.has_password:
        raise Unauthorized("Please register first to set up your password")

    if not attendee.check_password(password or ""):
        logger.warning(f"Failed login: attendee={attendee.id}, event={event.id}")
        raise Unauthorized("Invalid email or password")

    attendee.last_login_at = timezone.now()
    attendee.save(update_fields=["last_login_at"])

    logger.info(f"Attendee logged in: attendee={attendee.id}, event={event.id}")
    return attendee, issue_token(attendee)


def update_profile(attendee: Attendee, data: dict) -> Attendee:
    changed = [field for field in PROFILE_FIELDS if field in data]
    for field in changed:
        setattr(attendee, field, data[field])

    if changed:
        attendee.save(update_fields=changed)
        logger.info(f"Attendee profile updated: attendee={attendee.id}, fields={changed}")
    return attendee
