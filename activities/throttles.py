# activities/throttles.py

from rest_framework.throttling import SimpleRateThrottle


class EnrollmentThrottle(SimpleRateThrottle):
    """
    Throttle enrollment attempts per user.

    Scope key: 'activity-enroll' (rate in REST_FRAMEWORK.DEFAULT_THROTTLE_RATES)
    Cache key shape:
      throttle_activity-enroll_u<user_id>

    Only bounds request volume. Seat correctness never relies on it.
    """
    scope = "activity-enroll"

    def get_cache_key(self, request, view):
        # Only throttle POST (enroll)
        if request.method != "POST":
            return None

        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return self.cache_format % {
                "scope": self.scope,
                "ident": self.get_ident(request),
            }

        return f"throttle_{self.scope}_u{user.id}"
