from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone

from core.exceptions import AuthorizationError, NotFoundError, ValidationError
from core.ids import ensure_object_id
from core.models import Appointment, Prescription, User

logger = logging.getLogger(__name__)


def add_prescription(actor: User, *, appointment_id, medicines, diagnosis='', instructions='',
                     follow_up_date=None, refills=0, is_refillable=False) -> Prescription:
    """Issue a prescription against one of the doctor's appointments.

    The appointment is marked completed, with ``completed_at`` stamped,
    when it is not completed already.
    """
    appointment_id = ensure_object_id(appointment_id, 'appointment')
    if not medicines:
        raise ValidationError('At least one medicine is required')
    issued = timezone.now()
    if follow_up_date and follow_up_date < timezone.localdate(issued):
        raise ValidationError('Follow-up date cannot be before the issued date')

    with transaction.atomic():
        appt = Appointment.objects.select_for_update().filter(pk=appointment_id).first()
        if appt is None:
            raise NotFoundError('Appointment not found')
        if appt.doctor_id != actor.id:
            raise AuthorizationError('Not authorized to add prescription for this appointment')
        if appt.status in (Appointment.STATUS_CANCELLED, Appointment.STATUS_NO_SHOW):
            raise ValidationError(f"Cannot add prescription to appointment with status: {appt.status}")

        rx = Prescription.objects.create(
            appointment=appt,
            doctor_id=appt.doctor_id,
            patient_id=appt.patient_id,
            medicines=[dict(m) for m in medicines],
            diagnosis=diagnosis or '',
            instructions=instructions or '',
            follow_up_date=follow_up_date,
            issued_date=issued,
            refills=refills or 0,
            is_refillable=bool(is_refillable),
        )
        if appt.status != Appointment.STATUS_COMPLETED:
            appt.status = Appointment.STATUS_COMPLETED
            appt.completed_at = issued
            appt.save(update_fields=['status', 'completed_at', 'updated_at'])

    logger.info("Prescription %s issued by doctor %s for appointment %s", rx.id, actor.id, appt.id)
    return get_prescription(rx.id)


def with_relations(qs):
    return qs.select_related('appointment', 'doctor', 'doctor__doctor_profile', 'patient')


def get_prescription(prescription_id) -> Prescription:
    rx = with_relations(Prescription.objects.filter(pk=prescription_id)).first()
    if rx is None:
        raise NotFoundError('Prescription not found')
    return rx


def list_prescriptions(*, patient=None, doctor=None):
    qs = with_relations(Prescription.objects.all())
    if patient is not None:
        qs = qs.filter(patient=patient)
    if doctor is not None:
        qs = qs.filter(doctor=doctor)
    return qs.order_by('-issued_date', '-created_at')
