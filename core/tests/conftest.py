import itertools
from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from core.models import Appointment, DoctorProfile, PatientProfile, User
from core.tokens import issue_session_token

PASSWORD = 'secret123'

_seq = itertools.count(1)


@pytest.fixture(autouse=True)
def _fast_hashing_and_fresh_throttles(settings):
    settings.PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def _make(role=User.ROLE_PATIENT, *, email=None, name=None, password=PASSWORD,
              is_active=True, phone='', **profile):
        n = next(_seq)
        user = User.objects.create_user(
            email or f'{role}{n}@example.com',
            password,
            name=name or f'{role.title()} {n}',
            role=role,
            phone=phone,
            is_active=is_active,
        )
        if role == User.ROLE_DOCTOR:
            profile.setdefault('specialization', 'Cardiology')
            DoctorProfile.objects.create(user=user, **profile)
        elif role == User.ROLE_PATIENT:
            PatientProfile.objects.create(user=user, **profile)
        return user
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(User.ROLE_ADMIN, email='admin@example.com', name='Admin')


@pytest.fixture
def doctor(make_user):
    return make_user(User.ROLE_DOCTOR, email='doctor@example.com', name='Dr House')


@pytest.fixture
def patient(make_user):
    return make_user(User.ROLE_PATIENT, email='patient@example.com', name='Jane Patient',
                     phone='555-123-4567')


@pytest.fixture
def receptionist(make_user):
    return make_user(User.ROLE_RECEPTIONIST, email='front@example.com', name='Front Desk')


@pytest.fixture
def client_for():
    """Build an APIClient carrying a session token for ``user``."""
    def _client(user):
        c = APIClient()
        c.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_session_token(user)}')
        return c
    return _client


@pytest.fixture
def tomorrow():
    return timezone.localdate() + timedelta(days=1)


@pytest.fixture
def make_appointment(db, receptionist):
    def _make(patient, doctor, *, day=None, time='10:00', status=Appointment.STATUS_PENDING, **extra):
        return Appointment.objects.create(
            patient=patient,
            doctor=doctor,
            appointment_date=day or timezone.localdate() + timedelta(days=1),
            time=time,
            status=status,
            reason=extra.pop('reason', 'Checkup'),
            booked_by=receptionist,
            **extra,
        )
    return _make
