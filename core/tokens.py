"""
Signed tokens issued by the API.

Two kinds exist and neither is accepted where the other is expected:

* :class:`SessionToken` proves identity on every authenticated request.
  Its lifetime follows ``SIMPLE_JWT['ACCESS_TOKEN_LIFETIME']``.
* :class:`PasswordResetToken` authorises a single password overwrite.  It
  is recorded as an outstanding token when issued and blacklisted when
  consumed, so a second reset with the same value is rejected.

Verification distinguishes an expired token from a malformed one.  Both
verifiers raise :class:`TokenExpired` or :class:`TokenInvalid`; callers
map those to their own HTTP status.
"""
from __future__ import annotations

from datetime import timedelta

import jwt
from django.conf import settings
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import BlacklistMixin, Token


class TokenExpired(Exception):
    pass


class TokenInvalid(Exception):
    pass


class SessionToken(Token):
    token_type = 'session'
    lifetime = api_settings.ACCESS_TOKEN_LIFETIME


class PasswordResetToken(BlacklistMixin, Token):
    token_type = 'password_reset'
    lifetime = timedelta(minutes=getattr(settings, 'PASSWORD_RESET_TOKEN_MINUTES', 60))


def _is_expired(token_class, raw) -> bool:
    """Whether ``raw`` is a correctly signed ``token_class`` past its expiry."""
    try:
        payload = jwt.decode(
            raw,
            api_settings.SIGNING_KEY,
            algorithms=[api_settings.ALGORITHM],
            options={'verify_exp': False, 'verify_aud': False},
        )
    except jwt.PyJWTError:
        return False
    if payload.get(api_settings.TOKEN_TYPE_CLAIM) != token_class.token_type:
        return False
    exp = payload.get('exp')
    return isinstance(exp, (int, float)) and exp <= timezone.now().timestamp()


def _load(token_class, raw):
    if not raw:
        raise TokenInvalid('empty token')
    try:
        return token_class(raw)
    except TokenError as exc:
        if _is_expired(token_class, raw):
            raise TokenExpired(str(exc)) from exc
        raise TokenInvalid(str(exc)) from exc


def issue_session_token(user) -> str:
    return str(SessionToken.for_user(user))


def verify_session_token(raw) -> SessionToken:
    return _load(SessionToken, raw)


def issue_reset_token(user) -> str:
    return str(PasswordResetToken.for_user(user))


def verify_reset_token(raw) -> PasswordResetToken:
    return _load(PasswordResetToken, raw)


def token_user_id(token) -> str:
    return str(token[api_settings.USER_ID_CLAIM])
