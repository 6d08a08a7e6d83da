# accounts/throttles.py
"""
Rate limiting classes for authentication endpoints.

These throttles protect against:
- Bot signups (company registration)
- OTP brute force and mail flooding
- Brute force attacks (login)
"""

from rest_framework.throttling import AnonRateThrottle, UserRateThrottle


class RegistrationThrottle(AnonRateThrottle):
    """
    Rate limit company registration attempts.

    Configured via settings.REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['registration']
    """
    scope = 'registration'


class OTPThrottle(UserRateThrottle):
    """
    Rate limit OTP verification and reissue per user.

    Configured via settings.REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['otp']
    """
    scope = 'otp'


class LoginThrottle(AnonRateThrottle):
    """
    Rate limit login attempts.

    Configured via settings.REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['login']
    """
    scope = 'login'
