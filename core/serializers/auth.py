from rest_framework import serializers

from core.models import User
from core.serializers.common import CleanCharField, PhoneField

PASSWORD_LENGTH_MESSAGE = 'Password must be at least 6 characters long'


def password_field(**kwargs):
    return serializers.CharField(
        min_length=6, max_length=128, write_only=True, trim_whitespace=False,
        error_messages={'min_length': PASSWORD_LENGTH_MESSAGE}, **kwargs,
    )


class RegisterSerializer(serializers.Serializer):
    name = CleanCharField(min_length=2, max_length=50)
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})
    password = password_field()
    role = serializers.CharField(required=False, default=User.ROLE_PATIENT)
    phone = PhoneField(required=False, allow_blank=True)
    specialization = CleanCharField(required=False, allow_blank=True, max_length=100)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(max_length=254)
    password = serializers.CharField(max_length=128, trim_whitespace=False)

    def validate_email(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Please provide email and password')
        return v


class PasswordUpdateSerializer(serializers.Serializer):
    currentPassword = serializers.CharField(max_length=128, trim_whitespace=False)
    newPassword = password_field()


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})


class ResetPasswordSerializer(serializers.Serializer):
    newPassword = password_field()
