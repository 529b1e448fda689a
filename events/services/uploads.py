# events/services/uploads.py
"""
Attachment uploads for submissions.

Files go to Django's default storage (local MEDIA_ROOT in dev, S3 through
django-storages in prod); the caller gets back a URL it can store on a
submission.
"""
import logging
import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from django.utils.text import get_valid_filename

from core.exceptions import BadRequest
from events.models import Attendee, Event
from events.services import submissions as submission_service

logger = logging.getLogger("portal.uploads")


def max_upload_bytes() -> int:
    return getattr(settings, "SUBMISSION_UPLOAD_MAX_BYTES", 10 * 1024 * 1024)


def validate_upload(uploaded_file):
    if uploaded_file is None:
        raise BadRequest("No file provided")

    size = uploaded_file.size or 0
    if size <= 0:
        raise BadRequest("File is empty")

    limit = max_upload_bytes()
    if size > limit:
        raise BadRequest(f"File is too large. Maximum size is {limit // (1024 * 1024)} MB")

    extension = os.path.splitext(uploaded_file.name or "")[1].lower()
    blocked_extensions = getattr(settings, "SUBMISSION_UPLOAD_BLOCKED_EXTENSIONS", [])
    if extension in blocked_extensions:
        raise BadRequest("This file type is not allowed")

    content_type = (getattr(uploaded_file, "content_type", "") or "").split(";")[0].strip().lower()
    blocked_types = getattr(settings, "SUBMISSION_UPLOAD_BLOCKED_CONTENT_TYPES", [])
    if content_type in blocked_types:
        raise BadRequest("This file type is not allowed")


def build_storage_path(event: Event, attendee: Attendee, original_name: str) -> str:
    safe_name = get_valid_filename(os.path.basename(original_name or "upload")) or "upload"
    return f"submissions/{event.id}/{attendee.id}/{uuid.uuid4().hex}-{safe_name}"


def upload_attachment(event: Event, attendee: Attendee, uploaded_file, submission_id=None) -> dict:
    """
    Validate and store a file; optionally attach it to a draft right away.

    Returns {"url", "file_name", "file_size", "file_type"} plus
    "file_id" when attached.
    """
    validate_upload(uploaded_file)

    if submission_id:
        # Fail before writing anything to storage
        submission_service.get_attachable_submission(event, attendee, submission_id)

    try:
        stored_path = default_storage.save(build_storage_path(event, attendee, uploaded_file.name), uploaded_file)
        url = default_storage.url(stored_path)
    except Exception:
        logger.exception(f"Attachment storage failed: attendee={attendee.id}, event={event.id}")
        raise

    result = {
        "url": url,
        "file_name": uploaded_file.name,
        "file_size": uploaded_file.size,
        "file_type": getattr(uploaded_file, "content_type", "") or "",
    }

    logger.info(
        f"Attachment stored: path={stored_path}, size={uploaded_file.size}, "
        f"attendee={attendee.id}, event={event.id}"
    )

    if submission_id:
        attached = submission_service.attach_uploaded_file(
            event,
            attendee,
            submission_id,
            {
                "file_name": result["file_name"],
                "file_url": result["url"],
                "file_size": result["file_size"],
                "file_type": result["file_type"],
            },
        )
        result["file_id"] = attached.id

    return result
