from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from rest_framework import serializers

from core.models import Appointment
from core.serializers.common import (
    CleanCharField,
    DayField,
    ObjectIdField,
    PaginationQuerySerializer,
    TimeSlotField,
)
from core.serializers.users import format_user_ref

STATUS_VALUES = [c for c, _ in Appointment.STATUS_CHOICES]
TYPE_VALUES = [c for c, _ in Appointment.TYPE_CHOICES]


def _iso(value):
    return value.isoformat() if value else None


def format_appointment(appt: Appointment) -> dict:
    return {
        'id': appt.id,
        'patient': format_user_ref(appt.patient),
        'doctor': format_user_ref(appt.doctor, with_specialization=True),
        'appointmentDate': _iso(appt.appointment_date),
        'time': appt.time,
        'status': appt.status,
        'reason': appt.reason,
        'notes': appt.notes,
        'appointmentType': appt.appointment_type,
        'duration': appt.duration,
        'bookedBy': appt.booked_by_id,
        'cancelledAt': _iso(appt.cancelled_at),
        'cancelledBy': appt.cancelled_by_id,
        'cancellationReason': appt.cancellation_reason,
        'completedAt': _iso(appt.completed_at),
        'isToday': appt.is_today,
        'isUpcoming': appt.is_upcoming,
        'createdAt': _iso(appt.created_at),
        'updatedAt': _iso(appt.updated_at),
    }


class AppointmentCreateSerializer(serializers.Serializer):
    patientId = ObjectIdField()
    doctorId = ObjectIdField()
    appointmentDate = DayField()
    time = TimeSlotField()
    reason = CleanCharField(max_length=500)
    appointmentType = serializers.ChoiceField(required=False, choices=TYPE_VALUES, default='general')
    notes = CleanCharField(required=False, allow_blank=True, max_length=1000, default='')
    duration = serializers.IntegerField(
        required=False, default=30, validators=[MinValueValidator(15), MaxValueValidator(120)]
    )


class AppointmentStatusSerializer(serializers.Serializer):
    status = serializers.CharField(required=False)
    notes = CleanCharField(required=False, allow_blank=True, max_length=1000)

    def validate(self, attrs):
        if 'status' not in attrs and 'notes' not in attrs:
            raise serializers.ValidationError('Provide a status or notes to update')
        return attrs


class AppointmentCancelSerializer(serializers.Serializer):
    cancellationReason = CleanCharField(required=False, allow_blank=True, max_length=500, default='')


class AppointmentListQuerySerializer(PaginationQuerySerializer):
    status = serializers.ChoiceField(required=False, choices=STATUS_VALUES)
    appointmentDate = DayField(required=False)
    doctorId = ObjectIdField(required=False)
    patientId = ObjectIdField(required=False)


class ReceptionistAppointmentQuerySerializer(AppointmentListQuerySerializer):
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=15)
