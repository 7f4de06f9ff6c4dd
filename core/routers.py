"""
URL mappings for the hospital API.

Paths carry no trailing slash.  Identifiers in paths are matched as plain
strings and validated by the services, so a malformed id answers 400
rather than falling through to a 404.
"""
from django.urls import include, path

from .auth_views import (
    forgot_password_view,
    login_view,
    logout_view,
    me_view,
    register_view,
    reset_password_view,
    update_password_view,
)
from .views import admin, doctor, health, patient, receptionist

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('api/health', health.health, name='health'),

    # Authentication
    path('api/auth/register', register_view, name='register'),
    path('api/auth/login', login_view, name='login'),
    path('api/auth/logout', logout_view, name='logout'),
    path('api/auth/me', me_view, name='me'),
    path('api/auth/password', update_password_view, name='update-password'),
    path('api/auth/forgot-password', forgot_password_view, name='forgot-password'),
    path('api/auth/reset-password/<str:token>', reset_password_view, name='reset-password'),

    # Admin
    path('api/admin/doctors', admin.doctors, name='admin-doctors'),
    path('api/admin/doctors/<str:pk>', admin.doctor_detail, name='admin-doctor-detail'),
    path('api/admin/receptionists', admin.receptionists, name='admin-receptionists'),
    path('api/admin/receptionists/<str:pk>', admin.receptionist_detail, name='admin-receptionist-detail'),
    path('api/admin/patients', admin.patients, name='admin-patients'),
    path('api/admin/users', admin.users, name='admin-users'),
    path('api/admin/users/<str:pk>', admin.user_detail, name='admin-user-detail'),
    path('api/admin/dashboard', admin.dashboard, name='admin-dashboard'),

    # Doctor
    path('api/doctor/profile', doctor.profile, name='doctor-profile'),
    path('api/doctor/appointments', doctor.appointments, name='doctor-appointments'),
    path('api/doctor/appointments/<str:pk>/status', doctor.appointment_status, name='doctor-appointment-status'),
    path('api/doctor/prescriptions', doctor.prescriptions, name='doctor-prescriptions'),

    # Patient
    path('api/patient/profile', patient.profile, name='patient-profile'),
    path('api/patient/appointments', patient.appointments, name='patient-appointments'),
    path('api/patient/prescriptions', patient.prescriptions, name='patient-prescriptions'),

    # Receptionist
    path('api/receptionist/patients', receptionist.patients, name='receptionist-patients'),
    path('api/receptionist/appointments', receptionist.appointments, name='receptionist-appointments'),
    path('api/receptionist/appointments/<str:pk>/cancel', receptionist.cancel_appointment,
         name='receptionist-appointment-cancel'),
]
