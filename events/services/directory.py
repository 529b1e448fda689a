# events/services/directory.py
from events.models import Attendee, Event


def parse_bool(value):
    """Query-string flag -> True / False / None (not given)."""
    if value is None:
        return None
    value = str(value).strip().lower()
    if value in ("1", "true", "yes"):
        return True
    if value in ("0", "false", "no"):
        return False
    return None


def parse_skills(value) -> list:
    if not value:
        return []
    return [s.strip().lower() for s in str(value).split(",") if s.strip()]


def _has_any_skill(attendee: Attendee, wanted: list) -> bool:
    skills = [str(s).lower() for s in (attendee.skills or [])]
    return any(w in skill for w in wanted for skill in skills)


def list_attendees(event: Event, looking_for_team=None, skills=None) -> list:
    """
    Confirmed attendees of one event, newest first.

    `skills` matches case-insensitively by substring; an attendee matches
    when any of their skills contains any requested skill.
    """
    qs = (
        Attendee.objects
        .filter(event=event, status=Attendee.STATUS_CONFIRMED)
        .order_by("-registered_at", "-id")
    )
    if looking_for_team is not None:
        qs = qs.filter(looking_for_team=looking_for_team)

    wanted = parse_skills(skills) if isinstance(skills, str) else [s.lower() for s in (skills or [])]
    if not wanted:
        return list(qs)
    return [attendee for attendee in qs if _has_any_skill(attendee, wanted)]
