# events/services/teams.py
"""
Team lifecycle for event attendees.

Per attendee: NoTeam -> ActiveMember(leader | member) -> NoTeam.

"Has no active team" and "team has a free seat" are checked inside a
transaction with the team row locked, and backed by partial unique
constraints (one active membership per attendee, one active leader per
team). When a concurrent writer still slips past the checks, the
IntegrityError is translated into the same error the check would have
raised.
"""
import logging
import secrets
import string

from django.db import IntegrityError, transaction
from django.db.models import Prefetch
from django.utils import timezone

from core.exceptions import BadRequest, Conflict, Forbidden, NotFound
from events.models import Attendee, Event, Submission, Team, TeamMembership
from events.services.context import get_active_membership

logger = logging.getLogger("portal.teams")

JOIN_CODE_ALPHABET = string.ascii_uppercase + string.digits
JOIN_CODE_LENGTH = 6

ALREADY_IN_TEAM = "You are already in a team"
NAME_TAKEN = "A team with this name already exists"

UPDATABLE_FIELDS = ("name", "description", "skills_needed", "looking_for_members", "logo_url")


def generate_join_code(event: Event) -> str:
    """Short upper-case code, unique within the event."""
    for _ in range(10):
        code = "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))
        if not Team.objects.filter(event=event, join_code=code).exists():
            return code
    raise BadRequest("Could not generate a unique join code, please retry")


def active_members_prefetch():
    return Prefetch(
        "memberships",
        queryset=(
            TeamMembership.objects
            .filter(status=TeamMembership.STATUS_ACTIVE)
            .select_related("attendee")
            .order_by("joined_at", "id")
        ),
        to_attr="active_members",
    )


def list_teams(event: Event):
    return (
        Team.objects
        .filter(event=event)
        .prefetch_related(active_members_prefetch())
        .order_by("-created_at", "-id")
    )


def get_team(event: Event, team_id) -> Team:
    team = (
        Team.objects
        .filter(event=event, pk=team_id)
        .prefetch_related(active_members_prefetch())
        .first()
    )
    if team is None:
        raise NotFound("Team not found")
    return team


def _name_taken(event: Event, name: str, exclude_id=None) -> bool:
    qs = Team.objects.filter(event=event, name__iexact=name)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()


def _membership_error(attendee: Attendee, fallback):
    """Decide which domain error a constraint violation stands for."""
    if get_active_membership(attendee) is not None:
        return Conflict(ALREADY_IN_TEAM)
    return fallback


def create_team(event: Event, attendee: Attendee, data: dict) -> Team:
    """
    Create a team with `attendee` as its leader.

    `data` is validated TeamCreateSerializer output.
    """
    if get_active_membership(attendee) is not None:
        raise Conflict("You are already in a team. Leave your current team first.")

    name = data["name"]
    join_type = data.get("join_type") or Team.JOIN_OPEN
    max_members = event.policy.resolve_max_members(data.get("max_members"))

    if _name_taken(event, name):
        raise BadRequest(NAME_TAKEN)

    try:
        with transaction.atomic():
            # Serializes concurrent create/join calls by the same attendee
            Attendee.objects.select_for_update().filter(pk=attendee.pk).first()

            if get_active_membership(attendee) is not None:
                raise Conflict("You are already in a team. Leave your current team first.")

            team = Team.objects.create(
                event=event,
                name=name,
                description=data.get("description") or None,
                skills_needed=data.get("skills_needed") or [],
                logo_url=data.get("logo_url") or None,
                max_members=max_members,
                join_type=join_type,
                join_code=generate_join_code(event) if join_type == Team.JOIN_CODE else None,
                looking_for_members=True,
                created_by=attendee,
            )

            # Same transaction: a failure here removes the team too
            TeamMembership.objects.create(
                team=team,
                attendee=attendee,
                role=TeamMembership.ROLE_LEADER,
                status=TeamMembership.STATUS_ACTIVE,
            )

            Attendee.objects.filter(pk=attendee.pk).update(looking_for_team=False)
    except IntegrityError:
        if _name_taken(event, name):
            raise BadRequest(NAME_TAKEN)
        raise _membership_error(attendee, Conflict(ALREADY_IN_TEAM))

    attendee.looking_for_team = False
    logger.info(
        f"Team created: team={team.id}, event={event.id}, leader={attendee.id}, "
        f"join_type={join_type}, max_members={max_members}"
    )
    return team


def _add_member(team: Team, attendee: Attendee) -> TeamMembership:
    """
    Insert an active member row. Caller holds the team row lock inside
    transaction.atomic().
    """
    if team.is_full:
        logger.warning(
            f"Join rejected: team {team.id} is full ({team.max_members} members), "
            f"attendee={attendee.id}"
        )
        raise BadRequest("Team is full")

    membership = TeamMembership.objects.create(
        team=team,
        attendee=attendee,
        role=TeamMembership.ROLE_MEMBER,
        status=TeamMembership.STATUS_ACTIVE,
    )
    Attendee.objects.filter(pk=attendee.pk).update(looking_for_team=False)
    return membership


def join_team(event: Event, attendee: Attendee, team_id) -> TeamMembership:
    """Self-service join of an `open` team."""
    if get_active_membership(attendee) is not None:
        raise Conflict(ALREADY_IN_TEAM)

    try:
        with transaction.atomic():
            team = Team.objects.select_for_update().filter(event=event, pk=team_id).first()
            if team is None:
                raise NotFound("Team not found")

            if team.join_type != Team.JOIN_OPEN:
                raise BadRequest("This team is not accepting new members")

            membership = _add_member(team, attendee)
    except IntegrityError:
        raise _membership_error(attendee, BadRequest("Failed to join team"))

    attendee.looking_for_team = False
    logger.info(f"Team joined: team={team.id}, attendee={attendee.id}")
    return membership


def join_team_by_code(event: Event, attendee: Attendee, code: str) -> TeamMembership:
    """Join a `code` team. Codes are stored upper-cased; input case is ignored."""
    if get_active_membership(attendee) is not None:
        raise Conflict(ALREADY_IN_TEAM)

    normalized = (code or "").strip().upper()
    if not normalized:
        raise BadRequest("Join code is required")

    try:
        with transaction.atomic():
            team = (
                Team.objects
                .select_for_update()
                .filter(event=event, join_type=Team.JOIN_CODE, join_code=normalized)
                .first()
            )
            if team is None:
                raise NotFound("Invalid join code")

            membership = _add_member(team, attendee)
    except IntegrityError:
        raise _membership_error(attendee, BadRequest("Failed to join team"))

    attendee.looking_for_team = False
    logger.info(f"Team joined with code: team={team.id}, attendee={attendee.id}")
    return membership


def leave_team(event: Event, attendee: Attendee, team_id) -> dict:
    """
    Leave a team.

    A leaving leader hands leadership to the remaining active member who
    joined earliest (ties by membership id). When nobody is left the team
    itself is deleted.

    Returns {"team_deleted": bool, "new_leader_id": attendee id or None}.
    """
    with transaction.atomic():
        team = Team.objects.select_for_update().filter(event=event, pk=team_id).first()
        membership = None
        if team is not None:
            membership = (
                TeamMembership.objects
                .select_for_update()
                .filter(team=team, attendee=attendee, status=TeamMembership.STATUS_ACTIVE)
                .first()
            )
        if membership is None:
            raise BadRequest("You are not a member of this team")

        # Mark as left first so the one-leader constraint holds during handover
        membership.status = TeamMembership.STATUS_LEFT
        membership.left_at = timezone.now()
        membership.save(update_fields=["status", "left_at"])

        successor = (
            team.active_memberships()
            .select_for_update()
            .order_by("joined_at", "id")
            .first()
        )

        team_deleted = False
        new_leader_id = None
        if successor is None:
            finalized = (
                Submission.objects
                .filter(team=team)
                .exclude(status=Submission.STATUS_DRAFT)
                .values_list("id", "status")
                .first()
            )
            if finalized is not None:
                logger.warning(
                    f"Dissolving team {team.id} deletes submission {finalized[0]} (status={finalized[1]})"
                )
            team.delete()
            team_deleted = True
        elif membership.is_leader:
            successor.role = TeamMembership.ROLE_LEADER
            successor.save(update_fields=["role"])
            new_leader_id = successor.attendee_id

        Attendee.objects.filter(pk=attendee.pk).update(looking_for_team=True)

    attendee.looking_for_team = True

    if team_deleted:
        logger.info(f"Team dissolved: team={team_id}, last member={attendee.id}")
    elif new_leader_id:
        logger.info(f"Team leadership transferred: team={team_id}, from={attendee.id}, to={new_leader_id}")
    logger.info(f"Team left: team={team_id}, attendee={attendee.id}")

    return {"team_deleted": team_deleted, "new_leader_id": new_leader_id}


def update_team(event: Event, attendee: Attendee, team_id, data: dict) -> Team:
    """
    Leader-only edit. `data` is validated TeamUpdateSerializer output.

    join_type switches recompute the join code: switching to `code` keeps
    an explicit/new/existing code (or generates one), any other type clears it.
    The legacy `is_open` flag maps to open / invite_only.
    """
    team = Team.objects.filter(event=event, pk=team_id).first()
    if team is None:
        raise NotFound("Team not found")

    is_leader = TeamMembership.objects.filter(
        team=team,
        attendee=attendee,
        status=TeamMembership.STATUS_ACTIVE,
        role=TeamMembership.ROLE_LEADER,
    ).exists()
    if not is_leader:
        raise Forbidden("Only team leaders can update the team")

    if "name" in data and _name_taken(event, data["name"], exclude_id=team.pk):
        raise BadRequest(NAME_TAKEN)

    changed = []
    for field in UPDATABLE_FIELDS:
        if field in data:
            setattr(team, field, data[field])
            changed.append(field)

    join_type = data.get("join_type")
    if join_type is None and "is_open" in data:
        join_type = Team.JOIN_OPEN if data["is_open"] else Team.JOIN_INVITE_ONLY

    if join_type:
        team.join_type = join_type
        if join_type == Team.JOIN_CODE:
            if data.get("generate_new_code"):
                team.join_code = generate_join_code(event)
            elif data.get("join_code"):
                team.join_code = data["join_code"].strip().upper()
            elif not team.join_code:
                team.join_code = generate_join_code(event)
        else:
            team.join_code = None
        changed += ["join_type", "join_code"]
    elif team.join_type == Team.JOIN_CODE and (data.get("generate_new_code") or data.get("join_code")):
        team.join_code = generate_join_code(event) if data.get("generate_new_code") else data["join_code"].strip().upper()
        changed.append("join_code")

    if not changed:
        return get_team(event, team.pk)

    try:
        with transaction.atomic():
            team.save(update_fields=changed + ["updated_at"])
    except IntegrityError:
        if "name" in data and _name_taken(event, data["name"], exclude_id=team.pk):
            raise BadRequest(NAME_TAKEN)
        raise BadRequest("This join code is already in use")

    logger.info(f"Team updated: team={team.id}, leader={attendee.id}, fields={changed}")
    return get_team(event, team.pk)
