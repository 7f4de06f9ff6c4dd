"""
Admin dashboard aggregation.

Everything is counted straight from the database on each call.
"""
from __future__ import annotations

from django.db.models import Count
from django.utils import timezone

from core.models import Appointment, User
from core.serializers.appointments import format_appointment
from core.services.appointments import with_parties

RECENT_LIMIT = 5


def user_counts() -> dict:
    by_role = dict(User.objects.values_list('role').annotate(n=Count('id')).order_by())
    return {
        'totalDoctors': by_role.get(User.ROLE_DOCTOR, 0),
        'totalPatients': by_role.get(User.ROLE_PATIENT, 0),
        'totalReceptionists': by_role.get(User.ROLE_RECEPTIONIST, 0),
        'totalAdmins': by_role.get(User.ROLE_ADMIN, 0),
    }


def appointment_counts() -> dict:
    by_status = dict(Appointment.objects.values_list('status').annotate(n=Count('id')).order_by())
    return {
        'total': sum(by_status.values()),
        'pending': by_status.get(Appointment.STATUS_PENDING, 0),
        'confirmed': by_status.get(Appointment.STATUS_CONFIRMED, 0),
        'inProgress': by_status.get(Appointment.STATUS_IN_PROGRESS, 0),
        'completed': by_status.get(Appointment.STATUS_COMPLETED, 0),
        'cancelled': by_status.get(Appointment.STATUS_CANCELLED, 0),
        'noShow': by_status.get(Appointment.STATUS_NO_SHOW, 0),
        'today': Appointment.objects.filter(appointment_date=timezone.localdate()).count(),
    }


def recent_appointments(limit: int = RECENT_LIMIT) -> list[dict]:
    qs = with_parties(Appointment.objects.all()).order_by('-created_at')[:limit]
    return [format_appointment(a) for a in qs]


def dashboard_snapshot() -> dict:
    return {
        'users': user_counts(),
        'appointments': appointment_counts(),
        'recentAppointments': recent_appointments(),
    }
