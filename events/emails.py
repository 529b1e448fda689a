# events/emails.py
from django.conf import settings
from django.core.mail import send_mail


def send_registration_email(attendee):
    """
    Send a simple registration confirmation email
    to the attendee.
    """
    event = attendee.event

    if not attendee.email:
        return

    subject = f"Registered for {event.title}"

    lines = [
        f"Hi {attendee.name},",
        "",
        "You have successfully registered for the event:",
        f"  {event.title}",
    ]
    if event.start_date:
        lines.append(f"  Starts: {event.start_date:%Y-%m-%d %H:%M} UTC")
    lines += [
        "",
        "Sign in with the email and password you registered with to find a team",
        "and submit your project.",
        "",
        "Thank you,",
        event.title,
    ]

    send_mail(
        subject=subject,
        message="\n".join(lines),
        from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
        recipient_list=[attendee.email],
        fail_silently=True,
    )
