from __future__ import annotations

from rest_framework import serializers

from core.models import Prescription
from core.serializers.common import CleanCharField, DayField, ObjectIdField


def _iso(value):
    return value.isoformat() if value else None


def format_prescription(rx: Prescription) -> dict:
    appt = rx.appointment
    return {
        'id': rx.id,
        'appointment': {
            'id': appt.id,
            'appointmentDate': _iso(appt.appointment_date),
            'time': appt.time,
            'status': appt.status,
            'reason': appt.reason,
        },
        'doctor': {
            'id': rx.doctor.id,
            'name': rx.doctor.name,
            'email': rx.doctor.email,
            'specialization': getattr(getattr(rx.doctor, 'doctor_profile', None), 'specialization', ''),
        },
        'patient': {'id': rx.patient.id, 'name': rx.patient.name, 'email': rx.patient.email},
        'medicines': rx.medicines,
        'diagnosis': rx.diagnosis,
        'instructions': rx.instructions,
        'followUpDate': _iso(rx.follow_up_date),
        'issuedDate': _iso(rx.issued_date),
        'refills': rx.refills,
        'isRefillable': rx.is_refillable,
        'isRecent': rx.is_recent,
        'totalMedicines': rx.total_medicines,
        'createdAt': _iso(rx.created_at),
    }


class MedicineSerializer(serializers.Serializer):
    name = CleanCharField(max_length=100)
    dosage = CleanCharField(max_length=50)
    frequency = CleanCharField(max_length=50)
    duration = CleanCharField(required=False, allow_blank=True, max_length=50)
    quantity = serializers.IntegerField(required=False, min_value=0)
    instructions = CleanCharField(required=False, allow_blank=True, max_length=200)


class PrescriptionCreateSerializer(serializers.Serializer):
    appointmentId = ObjectIdField()
    medicines = MedicineSerializer(many=True, allow_empty=False)
    diagnosis = CleanCharField(required=False, allow_blank=True, max_length=500, default='')
    instructions = CleanCharField(required=False, allow_blank=True, max_length=1000, default='')
    followUpDate = DayField(required=False, allow_null=True)
    refills = serializers.IntegerField(required=False, min_value=0, default=0)
    isRefillable = serializers.BooleanField(required=False, default=False)
