# accounts/authentication.py
"""
JWT authentication that accepts either an Authorization header or the
access-token cookie set at login.
"""

from django.conf import settings
from rest_framework import exceptions
from rest_framework.authentication import CSRFCheck
from rest_framework_simplejwt.authentication import JWTAuthentication


class CookieJWTAuthentication(JWTAuthentication):
    """
    Bearer token first, then the ``accessToken`` cookie.

    Browser clients rely on the http-only cookie; API clients send the
    header. Both resolve to the same user. The browser sends the cookie on
    its own, so cookie-authenticated requests go through the same CSRF
    check as DRF's session authentication. Header requests skip it.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is not None:
            return super().authenticate(request)

        raw_token = request.COOKIES.get(settings.ACCESS_TOKEN_COOKIE)
        if not raw_token:
            return None

        validated_token = self.get_validated_token(raw_token.encode())
        user = self.get_user(validated_token)
        self.enforce_csrf(request)
        return user, validated_token

    def enforce_csrf(self, request):
        def dummy_get_response(request):
            return None

        check = CSRFCheck(dummy_get_response)
        # populates request.META['CSRF_COOKIE'], which is used in process_view()
        check.process_request(request)
        reason = check.process_view(request, None, (), {})
        if reason:
            raise exceptions.PermissionDenied(f"CSRF Failed: {reason}")
