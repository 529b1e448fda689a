from unittest import mock

from django.db import IntegrityError, transaction
from rest_framework import status

from events.models import Submission, Team, TeamMembership
from events.services import teams as team_service
from .helpers import PortalTestCase, attendee_ids


class TeamApiTestCase(PortalTestCase):
    def setUp(self):
        super().setUp()
        self.leader, leader_token = self.make_attendee("leader@example.com", "Lea")
        self.member, member_token = self.make_attendee("member@example.com", "Max")
        self.outsider, outsider_token = self.make_attendee("outsider@example.com", "Oli")
        self.leader_client = self.client_for(leader_token)
        self.member_client = self.client_for(member_token)
        self.outsider_client = self.client_for(outsider_token)

    def create_team(self, client=None, **payload):
        payload.setdefault("name", "Rocket")
        return (client or self.leader_client).post(self.url("teams/"), payload, format="json")

    def join(self, client, team_id):
        return client.post(self.url(f"teams/{team_id}/"), {"action": "join"}, format="json")

    def leave(self, client, team_id):
        return client.post(self.url(f"teams/{team_id}/"), {"action": "leave"}, format="json")

    # ---- create -------------------------------------------------------

    def test_create_team_makes_caller_leader(self):
        resp = self.create_team(description="We build rockets", skills_needed=["rust"])
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        team = resp.json()["team"]
        self.assertEqual(team["name"], "Rocket")
        self.assertEqual(team["max_members"], 5)
        self.assertTrue(team["is_open"])
        self.assertEqual(team["memberCount"], 1)
        self.assertEqual(team["members"][0]["role"], TeamMembership.ROLE_LEADER)
        self.assertEqual(attendee_ids(team), [self.leader.id])
        self.assertFalse(self.reload(self.leader).looking_for_team)

    def test_event_team_size_max_caps_requested_capacity(self):
        self.event.requirements = {"team_size_max": 3}
        self.event.save()
        resp = self.create_team(max_members=10)
        self.assertEqual(resp.json()["team"]["max_members"], 3)

    def test_requested_capacity_used_without_event_limit(self):
        resp = self.create_team(max_members=4)
        self.assertEqual(resp.json()["team"]["max_members"], 4)

    def test_create_requires_token(self):
        resp = self.client.post(self.url("teams/"), {"name": "Anon"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_while_in_team_conflicts(self):
        self.create_team()
        resp = self.create_team(name="Second")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Team.objects.filter(event=self.event).count(), 1)

    def test_duplicate_name_rejected(self):
        self.create_team()
        resp = self.create_team(client=self.member_client, name="rocket")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "A team with this name already exists")

    def test_code_team_gets_join_code(self):
        resp = self.create_team(join_type=Team.JOIN_CODE)
        code = resp.json()["team"]["join_code"]
        self.assertRegex(code, r"^[A-Z0-9]{6}$")

    def test_invalid_join_type_rejected(self):
        resp = self.create_team(join_type="secret")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    # ---- list / detail ------------------------------------------------

    def test_list_hides_join_codes_and_orders_newest_first(self):
        self.create_team(name="First", join_type=Team.JOIN_CODE)
        self.create_team(client=self.member_client, name="Second")

        resp = self.client.get(self.url("teams/"))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        teams = resp.json()["teams"]
        self.assertEqual([t["name"] for t in teams], ["Second", "First"])
        for team in teams:
            self.assertNotIn("join_code", team)

    def test_detail_shows_join_code_to_members_only(self):
        team_id = self.create_team(join_type=Team.JOIN_CODE).json()["team"]["id"]

        own = self.leader_client.get(self.url(f"teams/{team_id}/")).json()["team"]
        self.assertIsNotNone(own["join_code"])

        other = self.outsider_client.get(self.url(f"teams/{team_id}/")).json()["team"]
        self.assertIsNone(other["join_code"])

        anon = self.client.get(self.url(f"teams/{team_id}/")).json()["team"]
        self.assertIsNone(anon["join_code"])

    def test_unknown_team_is_not_found(self):
        resp = self.client.get(self.url("teams/99999/"))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.json()["error"], "Team not found")

    def test_team_of_other_event_is_not_found(self):
        other = self.make_event("other-hack")
        stranger, _ = self.make_attendee("s@example.com", event=other)
        team = team_service.create_team(other, stranger, {"name": "Elsewhere"})
        resp = self.client.get(self.url(f"teams/{team.id}/"))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_requires_accessible_event(self):
        hidden = self.make_event("hidden-hack", is_public=False)
        resp = self.client.get(self.url("teams/", event=hidden))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    # ---- join ---------------------------------------------------------

    def test_join_open_team(self):
        team_id = self.create_team().json()["team"]["id"]
        resp = self.join(self.member_client, team_id)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.json()["success"])
        self.assertEqual(resp.json()["membership"]["role"], TeamMembership.ROLE_MEMBER)
        self.assertFalse(self.reload(self.member).looking_for_team)

    def test_join_when_already_in_team(self):
        team_id = self.create_team().json()["team"]["id"]
        self.create_team(client=self.member_client, name="Own")
        resp = self.join(self.member_client, team_id)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_join_closed_team(self):
        for join_type in (Team.JOIN_CODE, Team.JOIN_INVITE_ONLY):
            Team.objects.all().delete()
            team_id = self.create_team(join_type=join_type).json()["team"]["id"]
            resp = self.join(self.member_client, team_id)
            self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(resp.json()["error"], "This team is not accepting new members")

    def test_full_team_rejects_join(self):
        team_id = self.create_team(max_members=4).json()["team"]["id"]
        self.join(self.member_client, team_id)
        self.join(self.outsider_client, team_id)
        _, token = self.make_attendee("fourth@example.com")
        self.assertEqual(self.join(self.client_for(token), team_id).status_code, status.HTTP_200_OK)

        _, token = self.make_attendee("fifth@example.com")
        resp = self.join(self.client_for(token), team_id)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Team is full")
        self.assertEqual(Team.objects.get(pk=team_id).member_count, 4)
        self.assertTrue(Team.objects.get(pk=team_id).is_full)

    def test_join_with_code_any_case(self):
        team = self.create_team(join_type=Team.JOIN_CODE).json()["team"]
        resp = self.member_client.post(
            self.url("teams/join-with-code/"), {"code": team["join_code"].lower()}, format="json"
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn(self.member.id, attendee_ids(resp.json()["team"]))

    def test_join_with_unknown_code(self):
        self.create_team(join_type=Team.JOIN_CODE)
        for code in ("ZZZZZZ", "zzzzzz", "ZzZzZz"):
            resp = self.member_client.post(self.url("teams/join-with-code/"), {"code": code}, format="json")
            self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
            self.assertEqual(resp.json()["error"], "Invalid join code")

    def test_join_with_code_requires_code(self):
        resp = self.member_client.post(self.url("teams/join-with-code/"), {}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Join code is required")

    def test_join_with_code_of_wrong_type(self):
        self.create_team(join_type=Team.JOIN_CODE)
        resp = self.member_client.post(self.url("teams/join-with-code/"), {"code": 123456}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.json()["error"], "Invalid join code")

        resp = self.member_client.post(self.url("teams/join-with-code/"), {"code": ["AB12CD"]}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(resp.json()["error"].startswith("code: "))
        self.assertIsNone(team_service.get_active_membership(self.member))

    def test_invalid_team_action(self):
        team_id = self.create_team().json()["team"]["id"]
        resp = self.member_client.post(self.url(f"teams/{team_id}/"), {"action": "kick"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Invalid action")

    def test_team_action_body_must_be_object(self):
        team_id = self.create_team().json()["team"]["id"]
        resp = self.member_client.post(self.url(f"teams/{team_id}/"), ["join"], format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "Request body must be a JSON object")

    # ---- leave --------------------------------------------------------

    def test_leader_leaving_promotes_member(self):
        team_id = self.create_team().json()["team"]["id"]
        self.join(self.member_client, team_id)

        resp = self.leave(self.leader_client, team_id)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(resp.json()["team_deleted"])
        self.assertEqual(resp.json()["new_leader_id"], self.member.id)

        self.assertTrue(Team.objects.filter(pk=team_id).exists())
        promoted = TeamMembership.objects.get(team_id=team_id, attendee=self.member)
        self.assertEqual(promoted.role, TeamMembership.ROLE_LEADER)
        left = TeamMembership.objects.get(team_id=team_id, attendee=self.leader)
        self.assertEqual(left.status, TeamMembership.STATUS_LEFT)
        self.assertIsNotNone(left.left_at)
        self.assertTrue(self.reload(self.leader).looking_for_team)

    def test_earliest_member_inherits_leadership(self):
        team_id = self.create_team().json()["team"]["id"]
        self.join(self.member_client, team_id)
        self.join(self.outsider_client, team_id)

        resp = self.leave(self.leader_client, team_id)
        self.assertEqual(resp.json()["new_leader_id"], self.member.id)

    def test_member_leaving_keeps_leader(self):
        team_id = self.create_team().json()["team"]["id"]
        self.join(self.member_client, team_id)

        resp = self.leave(self.member_client, team_id)
        self.assertIsNone(resp.json()["new_leader_id"])
        leader = TeamMembership.objects.get(team_id=team_id, attendee=self.leader)
        self.assertEqual(leader.role, TeamMembership.ROLE_LEADER)

    def test_last_member_leaving_deletes_team(self):
        team_id = self.create_team().json()["team"]["id"]
        Submission.objects.create(event=self.event, team_id=team_id, title="Orphan")

        resp = self.leave(self.leader_client, team_id)
        self.assertTrue(resp.json()["team_deleted"])
        self.assertFalse(Team.objects.filter(pk=team_id).exists())
        self.assertFalse(Submission.objects.filter(team_id=team_id).exists())
        self.assertTrue(self.reload(self.leader).looking_for_team)

    def test_dissolving_team_warns_about_finalized_submission(self):
        team_id = self.create_team().json()["team"]["id"]
        submission = Submission.objects.create(
            event=self.event, team_id=team_id, title="Shipped", status=Submission.STATUS_SUBMITTED
        )

        with self.assertLogs("portal.teams", "WARNING") as logs:
            resp = self.leave(self.leader_client, team_id)
        self.assertTrue(resp.json()["team_deleted"])
        self.assertIn(f"deletes submission {submission.id} (status=submitted)", logs.output[0])
        self.assertFalse(Submission.objects.filter(pk=submission.id).exists())

    def test_leave_when_not_member(self):
        team_id = self.create_team().json()["team"]["id"]
        resp = self.leave(self.outsider_client, team_id)
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.json()["error"], "You are not a member of this team")

    def test_rejoin_after_leaving(self):
        team_id = self.create_team().json()["team"]["id"]
        self.join(self.member_client, team_id)
        self.leave(self.member_client, team_id)

        resp = self.join(self.member_client, team_id)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(
            TeamMembership.objects.filter(team_id=team_id, attendee=self.member).count(), 2
        )

    # ---- update -------------------------------------------------------

    def test_leader_updates_team(self):
        team_id = self.create_team().json()["team"]["id"]
        resp = self.leader_client.patch(
            self.url(f"teams/{team_id}/"),
            {"description": "New plan", "looking_for_members": False},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.json()["team"]["description"], "New plan")
        self.assertFalse(resp.json()["team"]["looking_for_members"])

    def test_member_cannot_update_team(self):
        team_id = self.create_team().json()["team"]["id"]
        self.join(self.member_client, team_id)
        resp = self.member_client.patch(self.url(f"teams/{team_id}/"), {"name": "Mine"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(resp.json()["error"], "Only team leaders can update the team")

    def test_switching_join_type_manages_code(self):
        team_id = self.create_team().json()["team"]["id"]

        team = self.leader_client.patch(
            self.url(f"teams/{team_id}/"), {"join_type": Team.JOIN_CODE}, format="json"
        ).json()["team"]
        self.assertRegex(team["join_code"], r"^[A-Z0-9]{6}$")

        team = self.leader_client.patch(
            self.url(f"teams/{team_id}/"), {"join_code": "mycode"}, format="json"
        ).json()["team"]
        self.assertEqual(team["join_code"], "MYCODE")

        team = self.leader_client.patch(
            self.url(f"teams/{team_id}/"), {"is_open": True}, format="json"
        ).json()["team"]
        self.assertEqual(team["join_type"], Team.JOIN_OPEN)
        self.assertIsNone(team["join_code"])

        team = self.leader_client.patch(
            self.url(f"teams/{team_id}/"), {"is_open": False}, format="json"
        ).json()["team"]
        self.assertEqual(team["join_type"], Team.JOIN_INVITE_ONLY)

    def test_capacity_cannot_be_changed(self):
        team_id = self.create_team(max_members=3).json()["team"]["id"]
        resp = self.leader_client.patch(self.url(f"teams/{team_id}/"), {"max_members": 50}, format="json")
        self.assertEqual(resp.json()["team"]["max_members"], 3)

    def test_session_check_includes_team(self):
        team_id = self.create_team(join_type=Team.JOIN_CODE).json()["team"]["id"]
        data = self.leader_client.get(self.url("auth/")).json()
        self.assertEqual(data["team"]["id"], team_id)
        self.assertEqual(data["teamRole"], TeamMembership.ROLE_LEADER)
        self.assertIsNotNone(data["team"]["join_code"])


class TeamConstraintTestCase(PortalTestCase):
    """The membership rules hold at the database level too."""

    def setUp(self):
        super().setUp()
        self.alice, _ = self.make_attendee("alice@example.com")
        self.bob, _ = self.make_attendee("bob@example.com")
        self.team = team_service.create_team(self.event, self.alice, {"name": "Alpha"})

    def test_second_active_membership_violates_constraint(self):
        other = Team.objects.create(event=self.event, name="Beta")
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                TeamMembership.objects.create(team=other, attendee=self.alice)

    def test_second_active_leader_violates_constraint(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                TeamMembership.objects.create(
                    team=self.team, attendee=self.bob, role=TeamMembership.ROLE_LEADER
                )

    def test_left_rows_do_not_count(self):
        TeamMembership.objects.filter(team=self.team).update(status=TeamMembership.STATUS_LEFT)
        other = Team.objects.create(event=self.event, name="Beta")
        TeamMembership.objects.create(team=other, attendee=self.alice, role=TeamMembership.ROLE_LEADER)
        self.assertEqual(
            TeamMembership.objects.filter(attendee=self.alice, status=TeamMembership.STATUS_ACTIVE).count(), 1
        )

    def test_service_reports_conflict_for_second_team(self):
        from core.exceptions import Conflict

        with self.assertRaises(Conflict):
            team_service.create_team(self.event, self.alice, {"name": "Gamma"})
        self.assertFalse(Team.objects.filter(name="Gamma").exists())

    def test_join_code_unique_per_event(self):
        self.team.join_type = Team.JOIN_CODE
        self.team.join_code = "SAME01"
        self.team.save()
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Team.objects.create(event=self.event, name="Beta", join_type=Team.JOIN_CODE, join_code="SAME01")

        other_event = self.make_event("other-hack")
        Team.objects.create(event=other_event, name="Beta", join_type=Team.JOIN_CODE, join_code="SAME01")
        self.assertEqual(Team.objects.filter(join_code="SAME01").count(), 2)


def stale_membership_check(misses):
    """
    Make the first `misses` membership lookups in the team service see no
    team, as they would when another request commits in between.
    """
    lookup = team_service.get_active_membership
    remaining = [misses]

    def racing_lookup(attendee, *args, **kwargs):
        if remaining[0]:
            remaining[0] -= 1
            return None
        return lookup(attendee, *args, **kwargs)

    return mock.patch("events.services.teams.get_active_membership", side_effect=racing_lookup)


class ConcurrentMembershipTestCase(PortalTestCase):
    """A request that passed the membership check still cannot add a second team."""

    def setUp(self):
        super().setUp()
        self.alice, alice_token = self.make_attendee("alice@example.com")
        self.bob, bob_token = self.make_attendee("bob@example.com")
        self.alice_client = self.client_for(alice_token)
        self.bob_client = self.client_for(bob_token)
        self.alpha = team_service.create_team(self.event, self.alice, {"name": "Alpha"})
        self.beta = team_service.create_team(
            self.event, self.bob, {"name": "Beta", "join_type": Team.JOIN_CODE}
        )

    def active_teams(self, attendee):
        return list(
            TeamMembership.objects
            .filter(attendee=attendee, status=TeamMembership.STATUS_ACTIVE)
            .values_list("team_id", flat=True)
        )

    def test_create_after_stale_check_conflicts(self):
        with stale_membership_check(2):
            resp = self.alice_client.post(self.url("teams/"), {"name": "Gamma"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["error"], team_service.ALREADY_IN_TEAM)
        self.assertEqual(self.active_teams(self.alice), [self.alpha.id])
        self.assertFalse(Team.objects.filter(name="Gamma").exists())

    def test_join_after_stale_check_conflicts(self):
        self.beta.join_type = Team.JOIN_OPEN
        self.beta.join_code = None
        self.beta.save()

        with stale_membership_check(1):
            resp = self.alice_client.post(self.url(f"teams/{self.beta.id}/"), {"action": "join"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["error"], team_service.ALREADY_IN_TEAM)
        self.assertEqual(self.active_teams(self.alice), [self.alpha.id])
        self.assertEqual(self.beta.member_count, 1)

    def test_join_with_code_after_stale_check_conflicts(self):
        with stale_membership_check(1):
            resp = self.alice_client.post(
                self.url("teams/join-with-code/"), {"code": self.beta.join_code}, format="json"
            )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(resp.json()["error"], team_service.ALREADY_IN_TEAM)
        self.assertEqual(self.active_teams(self.alice), [self.alpha.id])
        self.assertEqual(self.beta.member_count, 1)
