"""
Doctor views: own profile, assigned appointments and prescriptions.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from core.pagination import paginate
from core.permissions import IsDoctor
from core.responses import api_response
from core.serializers.appointments import (
    AppointmentListQuerySerializer,
    AppointmentStatusSerializer,
    format_appointment,
)
from core.serializers.common import PaginationQuerySerializer
from core.serializers.prescriptions import PrescriptionCreateSerializer, format_prescription
from core.serializers.users import DoctorProfileUpdateSerializer, format_user
from core.services import appointments as appointment_service
from core.services import prescriptions as prescription_service
from core.services.users import get_user, update_own_profile


@api_view(['GET', 'PUT'])
@permission_classes([IsDoctor])
def profile(request):
    if request.method == 'GET':
        return api_response(format_user(get_user(request.user.id)))
    s = DoctorProfileUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = update_own_profile(request.user, s.validated_data)
    return api_response(format_user(user), message='Profile updated successfully')


@api_view(['GET'])
@permission_classes([IsDoctor])
def appointments(request):
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = appointment_service.list_appointments(
        doctor=request.user,
        status=vd.get('status'),
        appointment_date=vd.get('appointmentDate'),
        patient_id=vd.get('patientId'),
    )
    items, pagination = paginate(qs, vd['page'], vd['limit'])
    return api_response([format_appointment(a) for a in items], pagination=pagination)


@api_view(['PUT'])
@permission_classes([IsDoctor])
def appointment_status(request, pk):
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = appointment_service.update_status(
        request.user, pk,
        status=s.validated_data.get('status'),
        notes=s.validated_data.get('notes'),
    )
    return api_response(format_appointment(appt), message='Appointment updated successfully')


@api_view(['GET', 'POST'])
@permission_classes([IsDoctor])
def prescriptions(request):
    if request.method == 'GET':
        q = PaginationQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = prescription_service.list_prescriptions(doctor=request.user)
        items, pagination = paginate(qs, q.validated_data['page'], q.validated_data['limit'])
        return api_response([format_prescription(rx) for rx in items], pagination=pagination)

    s = PrescriptionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    rx = prescription_service.add_prescription(
        request.user,
        appointment_id=vd['appointmentId'],
        medicines=vd['medicines'],
        diagnosis=vd.get('diagnosis', ''),
        instructions=vd.get('instructions', ''),
        follow_up_date=vd.get('followUpDate'),
        refills=vd.get('refills', 0),
        is_refillable=vd.get('isRefillable', False),
    )
    return api_response(format_prescription(rx), message='Prescription added successfully',
                        status=status.HTTP_201_CREATED)
