from rest_framework.throttling import AnonRateThrottle


class AuthRateThrottle(AnonRateThrottle):
    """Stricter per-address limit for credential endpoints (register, login, resets)."""
    scope = 'auth'
