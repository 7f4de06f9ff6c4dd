"""
Credential and session operations.

Passwords are hashed with Django's configured hashers; tokens come from
:mod:`core.tokens`.  Login answers the same message for an unknown email
and a wrong password, and hashes a throwaway password for unknown
emails so both paths take comparable time.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.authentication import DEACTIVATED_MESSAGE
from core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from core.models import User
from core.services.users import create_account, normalize_email
from core.tokens import (
    TokenExpired,
    TokenInvalid,
    issue_reset_token,
    issue_session_token,
    token_user_id,
    verify_reset_token,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid email or password'
FORGOT_PASSWORD_MESSAGE = 'If an account exists with this email, a password reset link has been sent.'


def register(*, name, email, password, role=User.ROLE_PATIENT, phone='', specialization=''):
    """Self-service signup; only patients may register themselves."""
    if (role or User.ROLE_PATIENT) != User.ROLE_PATIENT:
        raise AuthorizationError('Invalid role. Only patients can self-register.')
    user = create_account(
        role=User.ROLE_PATIENT, name=name, email=email, password=password, phone=phone,
    )
    return user, issue_session_token(user)


def login(*, email, password):
    user = User.objects.filter(email=normalize_email(email)).first()
    if user is None:
        User().set_password(password)
        logger.warning("Failed login for unknown email")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.check_password(password):
        logger.warning("Failed login for user %s", user.id)
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.is_active:
        logger.warning("Login attempt on deactivated account %s", user.id)
        raise AuthenticationError(DEACTIVATED_MESSAGE)
    user.last_login = timezone.now()
    user.save(update_fields=['last_login'])
    return user, issue_session_token(user)


def update_password(user: User, *, current_password, new_password) -> None:
    if len(new_password or '') < 6:
        raise ValidationError('Password must be at least 6 characters long')
    if not user.check_password(current_password):
        raise AuthenticationError('Current password is incorrect')
    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info("Password changed for user %s", user.id)


def forgot_password(email) -> str | None:
    """Issue a reset token for a known active account.

    Returns the token, or ``None`` when there is nothing to reset.  The
    caller answers identically in both cases.
    """
    user = User.objects.filter(email=normalize_email(email), is_active=True).first()
    if user is None:
        logger.info("Password reset requested for unknown email")
        return None
    token = issue_reset_token(user)
    logger.info("Password reset token issued for user %s", user.id)
    return token


def expose_reset_token() -> bool:
    return bool(getattr(settings, 'EXPOSE_RESET_TOKEN', False))


def reset_password(raw_token, new_password) -> User:
    if len(new_password or '') < 6:
        raise ValidationError('Password must be at least 6 characters long')
    try:
        token = verify_reset_token(raw_token)
    except TokenExpired:
        raise ValidationError('Reset token has expired')
    except TokenInvalid:
        raise ValidationError('Invalid reset token')
    user = User.objects.filter(pk=token_user_id(token)).first()
    if user is None:
        raise NotFoundError('User not found')
    with transaction.atomic():
        user.set_password(new_password)
        user.save(update_fields=['password', 'updated_at'])
        token.blacklist()
    logger.info("Password reset completed for user %s", user.id)
    return user
