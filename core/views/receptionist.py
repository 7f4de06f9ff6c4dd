"""
Receptionist views.

Receptionists register patients, book appointments for them and cancel
appointments that have not been completed yet.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from core.models import User
from core.pagination import paginate
from core.permissions import IsReceptionist
from core.responses import api_response
from core.serializers.appointments import (
    AppointmentCancelSerializer,
    AppointmentCreateSerializer,
    ReceptionistAppointmentQuerySerializer,
    format_appointment,
)
from core.serializers.common import SearchQuerySerializer
from core.serializers.users import PatientCreateSerializer, format_user
from core.services import appointments as appointment_service
from core.services import users as user_service

PATIENT_PROFILE_KEYS = ('dateOfBirth', 'gender', 'address', 'emergencyContact', 'bloodGroup')


@api_view(['GET', 'POST'])
@permission_classes([IsReceptionist])
def patients(request):
    if request.method == 'POST':
        s = PatientCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        user = user_service.create_account(
            role=User.ROLE_PATIENT,
            name=vd['name'],
            email=vd['email'],
            password=vd['password'],
            phone=vd['phone'],
            profile={k: vd[k] for k in PATIENT_PROFILE_KEYS if k in vd},
            label='Patient',
        )
        user = user_service.get_user(user.id)
        return api_response(format_user(user), message='Patient registered successfully',
                            status=status.HTTP_201_CREATED)

    q = SearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = user_service.search_users(
        role=User.ROLE_PATIENT, search=q.validated_data.get('search', ''), is_active=True,
    )
    items, pagination = paginate(qs, q.validated_data['page'], q.validated_data['limit'])
    return api_response([format_user(u) for u in items], pagination=pagination)


@api_view(['GET', 'POST'])
@permission_classes([IsReceptionist])
def appointments(request):
    if request.method == 'POST':
        s = AppointmentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        appt = appointment_service.book(
            request.user,
            patient_id=vd['patientId'],
            doctor_id=vd['doctorId'],
            appointment_date=vd['appointmentDate'],
            time=vd['time'],
            reason=vd['reason'],
            appointment_type=vd.get('appointmentType', 'general'),
            notes=vd.get('notes', ''),
            duration=vd.get('duration', 30),
        )
        return api_response(format_appointment(appt), message='Appointment booked successfully',
                            status=status.HTTP_201_CREATED)

    q = ReceptionistAppointmentQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = appointment_service.list_appointments(
        status=vd.get('status'),
        appointment_date=vd.get('appointmentDate'),
        doctor_id=vd.get('doctorId'),
        patient_id=vd.get('patientId'),
    )
    items, pagination = paginate(qs, vd['page'], vd['limit'])
    return api_response([format_appointment(a) for a in items], pagination=pagination)


@api_view(['PUT'])
@permission_classes([IsReceptionist])
def cancel_appointment(request, pk):
    s = AppointmentCancelSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    appt = appointment_service.cancel(
        request.user, pk, reason=s.validated_data.get('cancellationReason', ''),
    )
    return api_response(format_appointment(appt), message='Appointment cancelled successfully')
