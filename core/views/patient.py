from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes

from core.pagination import paginate
from core.permissions import IsPatient
from core.responses import api_response
from core.serializers.appointments import AppointmentListQuerySerializer, format_appointment
from core.serializers.common import PaginationQuerySerializer
from core.serializers.prescriptions import format_prescription
from core.serializers.users import PatientProfileUpdateSerializer, format_user
from core.services import appointments as appointment_service
from core.services import prescriptions as prescription_service
from core.services.users import get_user, update_own_profile


@api_view(['GET', 'PUT'])
@permission_classes([IsPatient])
def profile(request):
    if request.method == 'GET':
        return api_response(format_user(get_user(request.user.id)))
    s = PatientProfileUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = update_own_profile(request.user, s.validated_data)
    return api_response(format_user(user), message='Profile updated successfully')


@api_view(['GET'])
@permission_classes([IsPatient])
def appointments(request):
    """The caller's appointments, newest date first."""
    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = appointment_service.list_appointments(
        patient=request.user,
        status=vd.get('status'),
        appointment_date=vd.get('appointmentDate'),
        doctor_id=vd.get('doctorId'),
        descending=True,
    )
    items, pagination = paginate(qs, vd['page'], vd['limit'])
    return api_response([format_appointment(a) for a in items], pagination=pagination)


@api_view(['GET'])
@permission_classes([IsPatient])
def prescriptions(request):
    q = PaginationQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = prescription_service.list_prescriptions(patient=request.user)
    items, pagination = paginate(qs, q.validated_data['page'], q.validated_data['limit'])
    return api_response([format_prescription(rx) for rx in items], pagination=pagination)
