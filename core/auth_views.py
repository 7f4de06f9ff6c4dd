"""
Authentication views.

Registration, login, the caller's own profile, password change and the
forgot/reset pair.  The bearer authentication class itself lives in
``core.authentication`` so DRF can import it without pulling in views.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import (
    api_view,
    authentication_classes,
    permission_classes,
    throttle_classes,
)
from rest_framework.permissions import AllowAny, IsAuthenticated

from core.responses import api_response
from core.serializers.auth import (
    ForgotPasswordSerializer,
    LoginSerializer,
    PasswordUpdateSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
)
from core.serializers.users import format_user
from core.services import auth as auth_service
from core.services.users import with_profiles
from core.throttling import AuthRateThrottle
from core.tokens import PasswordResetToken

from .models import User


def _session_payload(user, token):
    user = with_profiles(User.objects.filter(pk=user.pk)).get()
    return {'token': token, 'user': format_user(user)}


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def register_view(request):
    """Patient self-registration; answers with a session token."""
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user, token = auth_service.register(
        name=vd['name'],
        email=vd['email'],
        password=vd['password'],
        role=vd.get('role'),
        phone=vd.get('phone', ''),
        specialization=vd.get('specialization', ''),
    )
    return api_response(
        _session_payload(user, token),
        message='User registered successfully',
        status=status.HTTP_201_CREATED,
    )


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user, token = auth_service.login(
        email=s.validated_data['email'],
        password=s.validated_data['password'],
    )
    return api_response(_session_payload(user, token), message='Login successful')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Session tokens are stateless; the client discards its copy."""
    return api_response(message='Logged out successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    user = with_profiles(User.objects.filter(pk=request.user.pk)).get()
    return api_response(format_user(user))


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def update_password_view(request):
    s = PasswordUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    auth_service.update_password(
        request.user,
        current_password=s.validated_data['currentPassword'],
        new_password=s.validated_data['newPassword'],
    )
    return api_response(message='Password updated successfully')


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def forgot_password_view(request):
    s = ForgotPasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    token = auth_service.forgot_password(s.validated_data['email'])
    data = None
    if token and auth_service.expose_reset_token():
        # stands in for the reset e-mail outside production
        data = {'resetToken': token, 'expiresIn': int(PasswordResetToken.lifetime.total_seconds())}
    return api_response(data, message=auth_service.FORGOT_PASSWORD_MESSAGE)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([AuthRateThrottle])
def reset_password_view(request, token):
    s = ResetPasswordSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    auth_service.reset_password(token, s.validated_data['newPassword'])
    return api_response(message='Password reset successful')
