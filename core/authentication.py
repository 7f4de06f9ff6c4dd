"""
Bearer token authentication for the API.

This module defines a subclass of simplejwt's ``JWTAuthentication`` that
accepts only :class:`core.tokens.SessionToken` values and reports the
failure modes with messages the front-end shows verbatim.  Keeping it
separate from any view module avoids circular imports while DRF loads
its authentication classes.
"""
from __future__ import annotations

from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from core.models import User
from core.tokens import TokenExpired, TokenInvalid, token_user_id, verify_session_token

DEACTIVATED_MESSAGE = 'Your account has been deactivated. Please contact support.'


class BearerTokenAuthentication(JWTAuthentication):
    """Resolve ``Authorization: Bearer <session token>`` to an active user.

    Requests without the header are left anonymous so that public views
    keep working and protected views answer 401 through their permission
    classes.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None
        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None
        validated_token = self.get_validated_token(raw_token)
        return self.get_user(validated_token), validated_token

    def get_validated_token(self, raw_token):
        try:
            return verify_session_token(raw_token)
        except TokenExpired:
            raise AuthenticationFailed('Token has expired. Please login again.')
        except TokenInvalid:
            raise AuthenticationFailed('Invalid token. Please login again.')

    def get_user(self, validated_token):
        try:
            user_id = token_user_id(validated_token)
        except KeyError:
            raise AuthenticationFailed('Invalid token. Please login again.')
        user = User.objects.filter(pk=user_id).first()
        if user is None:
            raise AuthenticationFailed('User not found. Token may be invalid.')
        if not user.is_active:
            raise AuthenticationFailed(DEACTIVATED_MESSAGE)
        return user
