# events/requirements.py
"""
Typed view over an event's `requirements` document.

The document is free-form JSON edited by the operator. The portal only
recognizes a few options; everything else is kept as-is and ignored here.

    team_size_min        int >= 1, default 1 (1 means solo submissions)
    team_size_max        int >= 1, default None (teams fall back to 5)
    submission_deadline  ISO date or datetime, default None (no deadline)
"""
import logging
from datetime import datetime, time, timezone as dt_timezone
from typing import Optional

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

logger = logging.getLogger("portal.events")


def _coerce_size(value, option: str) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        size = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed event option {option}={value!r}")
        return None
    if size < 1:
        logger.warning(f"Ignoring out-of-range event option {option}={value!r}")
        return None
    return size


def _coerce_deadline(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        try:
            # A bare date means the whole day is still open. Checked first
            # because parse_datetime also reads "YYYY-MM-DD" as midnight.
            day = parse_date(text)
            if day is not None:
                parsed = datetime.combine(day, time.max, tzinfo=dt_timezone.utc)
            else:
                parsed = parse_datetime(text)
        except ValueError:
            parsed = None
    if parsed is None:
        logger.warning(f"Ignoring malformed event option submission_deadline={value!r}")
        return None
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


class EventRequirements:
    """
    Recognized event policy options with explicit defaults.
    Build one with `EventRequirements.from_document(event.requirements)`.
    """

    def __init__(self, team_size_min=None, team_size_max=None, submission_deadline=None, extra=None):
        self.team_size_min = team_size_min or getattr(settings, "DEFAULT_TEAM_SIZE_MIN", 1)
        self.team_size_max = team_size_max
        self.submission_deadline = submission_deadline
        self.extra = extra or {}

    @classmethod
    def from_document(cls, document) -> "EventRequirements":
        if not isinstance(document, dict):
            document = {}
        known = ("team_size_min", "team_size_max", "submission_deadline")
        return cls(
            team_size_min=_coerce_size(document.get("team_size_min"), "team_size_min"),
            team_size_max=_coerce_size(document.get("team_size_max"), "team_size_max"),
            submission_deadline=_coerce_deadline(document.get("submission_deadline")),
            extra={k: v for k, v in document.items() if k not in known},
        )

    def __repr__(self):
        return (
            f"EventRequirements(team_size_min={self.team_size_min}, "
            f"team_size_max={self.team_size_max}, "
            f"submission_deadline={self.submission_deadline})"
        )

    @property
    def solo_submissions_allowed(self) -> bool:
        return self.team_size_min <= 1

    def resolve_max_members(self, requested: Optional[int] = None) -> int:
        """
        Team capacity: the value the creator asked for, else the event's
        team_size_max, else the project default. Never above team_size_max.
        """
        size = requested or self.team_size_max or getattr(settings, "DEFAULT_TEAM_MAX_MEMBERS", 5)
        if self.team_size_max:
            size = min(size, self.team_size_max)
        return size

    def deadline_passed(self, now: Optional[datetime] = None) -> bool:
        if self.submission_deadline is None:
            return False
        return self.submission_deadline < (now or timezone.now())
