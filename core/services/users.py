"""
Identity store operations.

Every function that acts on behalf of somebody takes that user as
``actor``; nothing here reads request state.  Accounts are created with
the payload model matching their role and are only ever deactivated,
never removed.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from core.ids import ensure_object_id
from core.models import DoctorProfile, PatientProfile, User

logger = logging.getLogger(__name__)

ROLE_LABELS = {
    User.ROLE_PATIENT: 'Patient',
    User.ROLE_DOCTOR: 'Doctor',
    User.ROLE_ADMIN: 'Admin',
    User.ROLE_RECEPTIONIST: 'Receptionist',
}

DOCTOR_FIELDS = {
    'specialization': 'specialization',
    'qualifications': 'qualifications',
    'experience': 'experience',
    'availability': 'availability',
}
PATIENT_FIELDS = {
    'dateOfBirth': 'date_of_birth',
    'gender': 'gender',
    'address': 'address',
    'emergencyContact': 'emergency_contact',
    'bloodGroup': 'blood_group',
}


def normalize_email(email) -> str:
    return User.objects.normalize_email(email)


def email_taken(email: str) -> bool:
    return User.objects.filter(email=normalize_email(email)).exists()


def ensure_profile(user: User):
    """Create the payload model for ``user.role`` if it does not exist yet."""
    if user.role == User.ROLE_DOCTOR:
        return DoctorProfile.objects.get_or_create(user=user)[0]
    if user.role == User.ROLE_PATIENT:
        return PatientProfile.objects.get_or_create(user=user)[0]
    return None


def _apply(profile, data: dict, mapping: dict) -> None:
    for key, attr in mapping.items():
        if key in data:
            value = data[key]
            if value is None and attr != 'date_of_birth':
                value = ''
            setattr(profile, attr, value)


def create_account(*, role: str, name: str, email: str, password: str, phone: str = '',
                   profile: dict | None = None, label: str | None = None) -> User:
    """Create a user of ``role`` together with its payload model.

    ``profile`` carries the camelCase payload fields for doctors and
    patients.  A duplicate email raises :class:`ConflictError` whichever
    role already holds it.
    """
    email = normalize_email(email)
    label = label or 'User'
    if email_taken(email):
        raise ConflictError(f"{label} with this email already exists")
    try:
        with transaction.atomic():
            user = User.objects.create_user(email, password, name=name, role=role, phone=phone or '')
            payload = ensure_profile(user)
            if payload is not None and profile:
                _apply(payload, profile, DOCTOR_FIELDS if role == User.ROLE_DOCTOR else PATIENT_FIELDS)
                payload.save()
    except IntegrityError:
        raise ConflictError(f"{label} with this email already exists")
    logger.info("Created %s account %s", role, user.id)
    return user


def with_profiles(qs):
    return qs.select_related('doctor_profile', 'patient_profile')


def get_user(user_id, *, role: str | None = None, label: str = 'User') -> User:
    user_id = ensure_object_id(user_id, label.lower())
    qs = with_profiles(User.objects.filter(pk=user_id))
    if role:
        qs = qs.filter(role=role)
    user = qs.first()
    if user is None:
        raise NotFoundError(f"{label} not found")
    return user


def search_users(*, role: str | None = None, search: str = '', specialization: str = '',
                 is_active=None):
    qs = with_profiles(User.objects.all())
    if role:
        qs = qs.filter(role=role)
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    if specialization:
        qs = qs.filter(doctor_profile__specialization__icontains=specialization)
    if search:
        cond = Q(name__icontains=search) | Q(email__icontains=search)
        if role == User.ROLE_PATIENT:
            cond |= Q(phone__icontains=search)
        if role == User.ROLE_DOCTOR:
            cond |= Q(doctor_profile__specialization__icontains=search)
        qs = qs.filter(cond)
    return qs.order_by('-created_at')


def update_own_profile(user: User, data: dict) -> User:
    """Self-service update of name, phone and the role payload."""
    with transaction.atomic():
        if data.get('name'):
            user.name = data['name']
        if 'phone' in data:
            user.phone = data['phone'] or ''
        user.save(update_fields=['name', 'phone', 'updated_at'])
        payload = ensure_profile(user)
        if payload is not None:
            _apply(payload, data, DOCTOR_FIELDS if user.role == User.ROLE_DOCTOR else PATIENT_FIELDS)
            payload.save()
    return with_profiles(User.objects.filter(pk=user.pk)).get()


def admin_update_user(actor: User, user_id, data: dict) -> User:
    user = get_user(user_id)
    if user.pk == actor.pk and ('role' in data or 'isActive' in data):
        raise AuthorizationError('Cannot modify your own role or status')
    fields = ['updated_at']
    if data.get('name'):
        user.name = data['name']
        fields.append('name')
    if 'phone' in data:
        user.phone = data['phone'] or ''
        fields.append('phone')
    if 'role' in data:
        if data['role'] not in ROLE_LABELS:
            raise ValidationError('Invalid role')
        user.role = data['role']
        fields.append('role')
    if 'isActive' in data:
        user.is_active = bool(data['isActive'])
        fields.append('is_active')
    with transaction.atomic():
        user.save(update_fields=fields)
        ensure_profile(user)
    logger.info("Admin %s updated user %s (%s)", actor.id, user.id, ', '.join(f for f in fields if f != 'updated_at'))
    return with_profiles(User.objects.filter(pk=user.pk)).get()


def deactivate_user(actor: User, user_id, *, role: str | None = None) -> User:
    """Soft-delete an account; ``role`` restricts the lookup when given."""
    label = ROLE_LABELS.get(role, 'User') if role else 'User'
    user = get_user(user_id, role=role, label=label)
    if user.pk == actor.pk:
        raise AuthorizationError('Cannot delete your own account')
    if user.is_active:
        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info("Admin %s deactivated %s %s", actor.id, user.role, user.id)
    return user
