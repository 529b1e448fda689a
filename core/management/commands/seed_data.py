from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from events.models import Attendee, Event, Submission, Team, TeamMembership

User = get_user_model()

DEMO_PASSWORD = "password123"

ATTENDEES = [
    ("alice@example.com", "Alice Nguyen", ["python", "django", "postgres"], "Acme"),
    ("bob@example.com", "Bob Martin", ["react", "typescript"], "Globex"),
    ("carol@example.com", "Carol Diaz", ["design", "figma"], None),
    ("dave@example.com", "Dave Okafor", ["python", "ml"], "Initech"),
    ("erin@example.com", "Erin Walsh", ["go", "kubernetes"], None),
]


class Command(BaseCommand):
    help = "Seeds the database with a demo hackathon, attendees, a team and a submission"

    def add_arguments(self, parser):
        parser.add_argument("--slug", default="demo-hackathon")

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("🌱 Seeding data...")

        admin, _ = User.objects.get_or_create(
            username="admin", defaults={"email": "admin@example.com", "is_staff": True, "is_superuser": True}
        )
        if not admin.check_password("admin"):
            admin.set_password("admin")
            admin.save()

        now = timezone.now()
        event, created = Event.objects.get_or_create(
            slug=options["slug"],
            defaults={
                "title": "Build for Good Hackathon",
                "description": "48-hour coding marathon to solve social issues.",
                "event_type": Event.TYPE_HACKATHON,
                "color": "#8b5cf6",
                "organizer": admin,
                "start_date": now + timezone.timedelta(days=7),
                "end_date": now + timezone.timedelta(days=9),
                "is_public": True,
                "is_published": True,
                "requirements": {
                    "team_size_min": 2,
                    "team_size_max": 4,
                    "submission_deadline": (now + timezone.timedelta(days=9)).isoformat(),
                },
            },
        )
        self.stdout.write(f"{'Created' if created else 'Used'} Event: {event.title} ({event.slug})")

        attendees = []
        for email, name, skills, company in ATTENDEES:
            attendee, made = Attendee.objects.get_or_create(
                event=event,
                email=email,
                defaults={"name": name, "skills": skills, "company": company},
            )
            if made:
                attendee.set_password(DEMO_PASSWORD)
                attendee.save()
            attendees.append(attendee)

        alice, bob = attendees[0], attendees[1]

        team, made = Team.objects.get_or_create(
            event=event,
            name="Green Routes",
            defaults={
                "description": "Routing app that minimises emissions for delivery fleets.",
                "skills_needed": ["design", "ml"],
                "max_members": event.policy.resolve_max_members(None),
                "join_type": Team.JOIN_CODE,
                "join_code": "GREEN1",
                "created_by": alice,
            },
        )
        if made:
            TeamMembership.objects.create(team=team, attendee=alice, role=TeamMembership.ROLE_LEADER)
            TeamMembership.objects.create(team=team, attendee=bob, role=TeamMembership.ROLE_MEMBER)
            Attendee.objects.filter(pk__in=[alice.pk, bob.pk]).update(looking_for_team=False)

        Submission.objects.get_or_create(
            event=event,
            team=team,
            defaults={
                "title": "Green Routes",
                "description": "Work in progress.",
                "technologies": ["python", "react"],
            },
        )

        self.stdout.write(self.style.SUCCESS(
            f"✅ Seeded {len(attendees)} attendees (password: {DEMO_PASSWORD}), "
            f"team '{team.name}' (code {team.join_code})"
        ))
