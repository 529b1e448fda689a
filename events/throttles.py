# events/throttles.py
#
# Views opt in with `throttle_classes = [...]` and a matching
# `throttle_scope`; rates live in REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"].

from rest_framework.throttling import ScopedRateThrottle

from .models import Attendee


class AttendeeAuthThrottle(ScopedRateThrottle):
    """
    Throttle register/login attempts per client IP per event.

    Scope key: 'attendee-auth'
    Cache key shape:
      throttle_attendee-auth_<ip>_e<slug>
    """

    def get_cache_key(self, request, view):
        # Only throttle POST (register / login); session checks are free
        if request.method != "POST":
            return None

        slug = getattr(view, "kwargs", {}).get("slug", "unknown")
        return f"throttle_{self.scope}_{self.get_ident(request)}_e{slug}"


class SubmissionUploadThrottle(ScopedRateThrottle):
    """
    Throttle attachment uploads per attendee.

    Scope key: 'submission-upload'
    Cache key shape:
      throttle_submission-upload_a<attendee_id>
    """

    def get_cache_key(self, request, view):
        attendee = getattr(request, "user", None)
        if not isinstance(attendee, Attendee):
            return None

        return f"throttle_{self.scope}_a{attendee.id}"
