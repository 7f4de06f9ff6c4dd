"""
Request serializers and response shapes for user accounts.

``format_user`` is the only place that decides which fields of a user
leave the API; the password hash never does.
"""
from __future__ import annotations

from rest_framework import serializers

from core.models import PatientProfile, User
from core.serializers.auth import password_field
from core.serializers.common import (
    CleanCharField,
    DayField,
    PhoneField,
    SearchQuerySerializer,
)


def _iso(value):
    return value.isoformat() if value else None


def format_doctor_fields(profile) -> dict:
    if profile is None:
        return {'specialization': '', 'qualifications': '', 'experience': 0, 'availability': {}}
    return {
        'specialization': profile.specialization,
        'qualifications': profile.qualifications,
        'experience': profile.experience,
        'availability': profile.availability or {},
    }


def format_patient_fields(profile) -> dict:
    if profile is None:
        return {'dateOfBirth': None, 'gender': '', 'address': '', 'emergencyContact': '', 'bloodGroup': ''}
    return {
        'dateOfBirth': _iso(profile.date_of_birth),
        'gender': profile.gender,
        'address': profile.address,
        'emergencyContact': profile.emergency_contact,
        'bloodGroup': profile.blood_group,
    }


def format_user(user: User) -> dict:
    data = {
        'id': user.id,
        'name': user.name,
        'email': user.email,
        'role': user.role,
        'phone': user.phone,
        'isActive': user.is_active,
        'lastLogin': _iso(user.last_login),
        'createdAt': _iso(user.created_at),
        'updatedAt': _iso(user.updated_at),
    }
    if user.role == User.ROLE_DOCTOR:
        data.update(format_doctor_fields(user.role_profile))
    elif user.role == User.ROLE_PATIENT:
        data.update(format_patient_fields(user.role_profile))
    return data


def format_user_ref(user, *, with_specialization: bool = False) -> dict | None:
    """Short form used when a user is embedded in another record."""
    if user is None:
        return None
    data = {'id': user.id, 'name': user.name, 'email': user.email, 'phone': user.phone}
    if with_specialization:
        profile = getattr(user, 'doctor_profile', None) if user.role == User.ROLE_DOCTOR else None
        data['specialization'] = profile.specialization if profile else ''
    return data


class StaffCreateSerializer(serializers.Serializer):
    name = CleanCharField(min_length=2, max_length=50)
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email format'})
    password = password_field()
    phone = PhoneField(required=False, allow_blank=True)


class DoctorCreateSerializer(StaffCreateSerializer):
    specialization = CleanCharField(max_length=100)
    qualifications = CleanCharField(required=False, allow_blank=True, max_length=255)
    experience = serializers.IntegerField(required=False, min_value=0, default=0)


class PatientCreateSerializer(StaffCreateSerializer):
    phone = PhoneField()
    dateOfBirth = DayField(required=False, allow_null=True)
    gender = serializers.ChoiceField(
        required=False, allow_blank=True, choices=[c for c, _ in PatientProfile.GENDER_CHOICES if c]
    )
    address = CleanCharField(required=False, allow_blank=True, max_length=200)
    emergencyContact = PhoneField(required=False, allow_blank=True)
    bloodGroup = serializers.ChoiceField(required=False, allow_blank=True, choices=PatientProfile.BLOOD_GROUPS)


class DoctorProfileUpdateSerializer(serializers.Serializer):
    name = CleanCharField(required=False, min_length=2, max_length=50)
    phone = PhoneField(required=False, allow_blank=True)
    specialization = CleanCharField(required=False, max_length=100)
    qualifications = CleanCharField(required=False, allow_blank=True, max_length=255)
    experience = serializers.IntegerField(required=False, min_value=0)
    availability = serializers.DictField(required=False)


class PatientProfileUpdateSerializer(serializers.Serializer):
    name = CleanCharField(required=False, min_length=2, max_length=50)
    phone = PhoneField(required=False, allow_blank=True)
    dateOfBirth = DayField(required=False, allow_null=True)
    gender = serializers.ChoiceField(
        required=False, allow_blank=True, choices=[c for c, _ in PatientProfile.GENDER_CHOICES if c]
    )
    address = CleanCharField(required=False, allow_blank=True, max_length=200)
    emergencyContact = PhoneField(required=False, allow_blank=True)
    bloodGroup = serializers.ChoiceField(required=False, allow_blank=True, choices=PatientProfile.BLOOD_GROUPS)


class AdminUserUpdateSerializer(serializers.Serializer):
    name = CleanCharField(required=False, min_length=2, max_length=50)
    phone = PhoneField(required=False, allow_blank=True)
    role = serializers.ChoiceField(required=False, choices=[c for c, _ in User.ROLE_CHOICES])
    isActive = serializers.BooleanField(required=False)


class DoctorListQuerySerializer(SearchQuerySerializer):
    specialization = serializers.CharField(required=False, allow_blank=True, max_length=100)


class UserListQuerySerializer(SearchQuerySerializer):
    role = serializers.ChoiceField(required=False, choices=[c for c, _ in User.ROLE_CHOICES])
    isActive = serializers.BooleanField(required=False, allow_null=True, default=None)
