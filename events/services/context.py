# events/services/context.py
"""
Lookups shared by every public-portal service: resolving the event from
its slug and the attendee's current team.
"""
from core.exceptions import Forbidden, NotFound
from events.models import Event, TeamMembership


def get_event(slug: str) -> Event:
    try:
        return Event.objects.get(slug=slug)
    except Event.DoesNotExist:
        raise NotFound("Event not found")


def get_accessible_event(slug: str, forbidden_message: str = "Event not accessible") -> Event:
    """Event must exist and be both public and published."""
    event = get_event(slug)
    if not event.is_accessible:
        raise Forbidden(forbidden_message)
    return event


def get_active_membership(attendee, for_update: bool = False):
    """
    The attendee's single active membership, or None.
    The one_active_team_per_attendee constraint guarantees there is at most one.
    """
    qs = TeamMembership.objects.filter(attendee=attendee, status=TeamMembership.STATUS_ACTIVE)
    if for_update:
        qs = qs.select_for_update()
    return qs.select_related("team").first()
