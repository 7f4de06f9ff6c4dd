"""
Appointment lifecycle.

Status moves along a fixed table; the three terminal states never move
again through the normal update path.  Booking checks the doctor's slot
and inserts inside one transaction, and the ``unique_active_doctor_slot``
constraint rejects whichever of two racing bookings commits second.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from core.ids import ensure_object_id
from core.models import Appointment, User

logger = logging.getLogger(__name__)

SLOT_TAKEN = 'Doctor already has an appointment at this time'

# active appointments may move freely; finished ones are locked
TRANSITIONS = {
    **{s: set(Appointment.ACTIVE_STATUSES + Appointment.TERMINAL_STATUSES) - {s}
       for s in Appointment.ACTIVE_STATUSES},
    **{s: set() for s in Appointment.TERMINAL_STATUSES},
}


def with_parties(qs):
    return qs.select_related('patient', 'doctor', 'doctor__doctor_profile')


def get_appointment(appointment_id) -> Appointment:
    appointment_id = ensure_object_id(appointment_id, 'appointment')
    appt = with_parties(Appointment.objects.filter(pk=appointment_id)).first()
    if appt is None:
        raise NotFoundError('Appointment not found')
    return appt


def _active_party(user_id, role: str, label: str) -> User:
    user = User.objects.filter(pk=user_id, role=role, is_active=True).first()
    if user is None:
        raise NotFoundError(f"{label} not found")
    return user


def book(actor: User, *, patient_id, doctor_id, appointment_date, time, reason,
         appointment_type='general', notes='', duration=30) -> Appointment:
    """Create a pending appointment on behalf of ``actor``.

    ``appointment_date`` is a ``date``; ``time`` is already ``HH:MM``.
    """
    if appointment_date < timezone.localdate():
        raise ValidationError('Cannot book appointment for a past date')
    patient = _active_party(ensure_object_id(patient_id, 'patient'), User.ROLE_PATIENT, 'Patient')
    doctor = _active_party(ensure_object_id(doctor_id, 'doctor'), User.ROLE_DOCTOR, 'Doctor')
    try:
        with transaction.atomic():
            clash = Appointment.objects.select_for_update().filter(
                doctor=doctor,
                appointment_date=appointment_date,
                time=time,
                status__in=Appointment.ACTIVE_STATUSES,
            ).exists()
            if clash:
                raise ConflictError(SLOT_TAKEN)
            appt = Appointment.objects.create(
                patient=patient,
                doctor=doctor,
                appointment_date=appointment_date,
                time=time,
                reason=reason,
                appointment_type=appointment_type or 'general',
                notes=notes or '',
                duration=duration or 30,
                booked_by=actor,
            )
    except IntegrityError:
        logger.warning("Lost booking race for doctor %s on %s %s", doctor.id, appointment_date, time)
        raise ConflictError(SLOT_TAKEN)
    logger.info(
        "Appointment %s booked by %s: patient %s, doctor %s, %s %s",
        appt.id, actor.id, patient.id, doctor.id, appointment_date, time,
    )
    return get_appointment(appt.id)


def update_status(actor: User, appointment_id, *, status=None, notes=None) -> Appointment:
    """Doctor-side update of status and notes on an assigned appointment."""
    appt = get_appointment(appointment_id)
    if appt.doctor_id != actor.id:
        raise AuthorizationError('Not authorized to update this appointment')
    fields = ['updated_at']
    if status is not None:
        if status not in TRANSITIONS:
            raise ValidationError('Invalid status')
        if status != appt.status:
            if status not in TRANSITIONS[appt.status]:
                raise ValidationError(f"Cannot change appointment status from {appt.status} to {status}")
            previous = appt.status
            appt.status = status
            fields.append('status')
            now = timezone.now()
            if status == Appointment.STATUS_COMPLETED:
                appt.completed_at = now
                fields.append('completed_at')
            elif status == Appointment.STATUS_CANCELLED:
                appt.cancelled_at = now
                appt.cancelled_by = actor
                fields.extend(['cancelled_at', 'cancelled_by'])
            logger.info("Appointment %s: %s -> %s by doctor %s", appt.id, previous, status, actor.id)
    if notes is not None:
        appt.notes = notes
        fields.append('notes')
    appt.save(update_fields=fields)
    return get_appointment(appt.id)


def cancel(actor: User, appointment_id, *, reason='') -> Appointment:
    appt = get_appointment(appointment_id)
    if appt.status in (Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED):
        raise ValidationError(f"Cannot cancel appointment with status: {appt.status}")
    appt.status = Appointment.STATUS_CANCELLED
    appt.cancelled_at = timezone.now()
    appt.cancelled_by = actor
    appt.cancellation_reason = reason or ''
    appt.save(update_fields=['status', 'cancelled_at', 'cancelled_by', 'cancellation_reason', 'updated_at'])
    logger.info("Appointment %s cancelled by %s", appt.id, actor.id)
    return get_appointment(appt.id)


def list_appointments(*, patient=None, doctor=None, status=None, appointment_date=None,
                      doctor_id=None, patient_id=None, descending=False):
    """Filtered queryset ordered by date then time."""
    qs = with_parties(Appointment.objects.all())
    if patient is not None:
        qs = qs.filter(patient=patient)
    if doctor is not None:
        qs = qs.filter(doctor=doctor)
    if status:
        qs = qs.filter(status=status)
    if appointment_date:
        qs = qs.filter(appointment_date=appointment_date)
    if doctor_id:
        qs = qs.filter(doctor_id=doctor_id)
    if patient_id:
        qs = qs.filter(patient_id=patient_id)
    if descending:
        return qs.order_by('-appointment_date', '-time')
    return qs.order_by('appointment_date', 'time')
