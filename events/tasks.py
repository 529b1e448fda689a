# events/tasks.py
import logging

from celery import shared_task

from .emails import send_registration_email
from .models import Attendee

logger = logging.getLogger("portal.auth")


@shared_task
def send_registration_notification(attendee_id: int):
    """
    Async wrapper for the registration confirmation email.
    Queued after the registering transaction commits.
    """
    try:
        attendee = Attendee.objects.select_related("event").get(id=attendee_id)
    except Attendee.DoesNotExist:
        return "attendee_not_found"

    try:
        send_registration_email(attendee)
    except Exception:
        # Avoid crashing worker if email fails
        logger.exception(f"Registration email failed: attendee={attendee_id}")
        return "email_failed"

    return "sent"
