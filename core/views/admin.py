"""
Administrator views.

Admins create doctors and receptionists, browse every account, edit
name/phone/role/active flag of other users and read the dashboard.
Deletion is always a deactivation.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes

from core.models import User
from core.pagination import paginate
from core.permissions import IsAdmin
from core.responses import api_response
from core.serializers.common import SearchQuerySerializer
from core.serializers.users import (
    AdminUserUpdateSerializer,
    DoctorCreateSerializer,
    DoctorListQuerySerializer,
    StaffCreateSerializer,
    UserListQuerySerializer,
    format_user,
)
from core.services import users as user_service
from core.services.dashboard import dashboard_snapshot


def _user_page(qs, q):
    items, pagination = paginate(qs, q['page'], q['limit'])
    return api_response([format_user(u) for u in items], pagination=pagination)


@api_view(['GET', 'POST'])
@permission_classes([IsAdmin])
def doctors(request):
    if request.method == 'POST':
        s = DoctorCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        user = user_service.create_account(
            role=User.ROLE_DOCTOR,
            name=vd['name'],
            email=vd['email'],
            password=vd['password'],
            phone=vd.get('phone', ''),
            profile={k: vd[k] for k in ('specialization', 'qualifications', 'experience') if k in vd},
            label='Doctor',
        )
        user = user_service.get_user(user.id)
        return api_response(format_user(user), message='Doctor created successfully',
                            status=status.HTTP_201_CREATED)

    q = DoctorListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = user_service.search_users(
        role=User.ROLE_DOCTOR,
        search=q.validated_data.get('search', ''),
        specialization=q.validated_data.get('specialization', ''),
    )
    return _user_page(qs, q.validated_data)


@api_view(['DELETE'])
@permission_classes([IsAdmin])
def doctor_detail(request, pk):
    user_service.deactivate_user(request.user, pk, role=User.ROLE_DOCTOR)
    return api_response(message='Doctor deleted successfully')


@api_view(['GET', 'POST'])
@permission_classes([IsAdmin])
def receptionists(request):
    if request.method == 'POST':
        s = StaffCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        user = user_service.create_account(
            role=User.ROLE_RECEPTIONIST,
            name=vd['name'],
            email=vd['email'],
            password=vd['password'],
            phone=vd.get('phone', ''),
            label='Receptionist',
        )
        return api_response(format_user(user), message='Receptionist created successfully',
                            status=status.HTTP_201_CREATED)

    q = SearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = user_service.search_users(role=User.ROLE_RECEPTIONIST, search=q.validated_data.get('search', ''))
    return _user_page(qs, q.validated_data)


@api_view(['DELETE'])
@permission_classes([IsAdmin])
def receptionist_detail(request, pk):
    user_service.deactivate_user(request.user, pk, role=User.ROLE_RECEPTIONIST)
    return api_response(message='Receptionist deleted successfully')


@api_view(['GET'])
@permission_classes([IsAdmin])
def patients(request):
    q = SearchQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = user_service.search_users(role=User.ROLE_PATIENT, search=q.validated_data.get('search', ''))
    return _user_page(qs, q.validated_data)


@api_view(['GET'])
@permission_classes([IsAdmin])
def users(request):
    q = UserListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    vd = q.validated_data
    qs = user_service.search_users(
        role=vd.get('role'),
        search=vd.get('search', ''),
        is_active=vd.get('isActive'),
    )
    return _user_page(qs, vd)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAdmin])
def user_detail(request, pk):
    if request.method == 'GET':
        return api_response(format_user(user_service.get_user(pk)))
    if request.method == 'DELETE':
        user_service.deactivate_user(request.user, pk)
        return api_response(message='User deactivated successfully')

    s = AdminUserUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    user = user_service.admin_update_user(request.user, pk, s.validated_data)
    return api_response(format_user(user), message='User updated successfully')


@api_view(['GET'])
@permission_classes([IsAdmin])
def dashboard(request):
    return api_response(dashboard_snapshot())
