"""
Database models for the hospital backend.

A :class:`User` carries the identity fields shared by every role.  Fields
that only make sense for one role live in a separate payload model
selected by the role tag: :class:`DoctorProfile` for doctors and
:class:`PatientProfile` for patients.  Appointments and prescriptions
reference users by identifier and are resolved with ``select_related``
at read time.
"""
from __future__ import annotations

from datetime import timedelta

from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from .ids import new_object_id


class UserManager(BaseUserManager):
    def normalize_email(self, email):
        return (email or '').strip().lower()

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')
        user = self.model(email=self.normalize_email(email), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields['role'] = User.ROLE_ADMIN
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser):
    """Identity record common to all roles.

    The password hash is stored in ``password`` by :class:`AbstractBaseUser`
    and is never part of any API representation.  Accounts are never
    removed; ``is_active`` is cleared instead.
    """
    ROLE_PATIENT = 'patient'
    ROLE_DOCTOR = 'doctor'
    ROLE_ADMIN = 'admin'
    ROLE_RECEPTIONIST = 'receptionist'
    ROLE_CHOICES = [
        (ROLE_PATIENT, 'Patient'),
        (ROLE_DOCTOR, 'Doctor'),
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_RECEPTIONIST, 'Receptionist'),
    ]

    id = models.CharField(max_length=24, primary_key=True, default=new_object_id, editable=False)
    name = models.CharField(max_length=50)
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_PATIENT)
    phone = models.CharField(max_length=32, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        indexes = [
            models.Index(fields=['role', 'is_active'], name='user_role_active_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"

    @property
    def role_profile(self):
        """Return the payload model matching the role tag, if any."""
        if self.role == self.ROLE_DOCTOR:
            return getattr(self, 'doctor_profile', None)
        if self.role == self.ROLE_PATIENT:
            return getattr(self, 'patient_profile', None)
        return None


class DoctorProfile(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name='doctor_profile')
    specialization = models.CharField(max_length=100, blank=True)
    qualifications = models.CharField(max_length=255, blank=True)
    experience = models.PositiveIntegerField(default=0)
    # weekday -> list of slots, shape decided by the front-end
    availability = models.JSONField(default=dict, blank=True)

    def __str__(self) -> str:
        return f"{self.user.name} ({self.specialization})"


class PatientProfile(models.Model):
    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
        ('', 'Unspecified'),
    ]
    BLOOD_GROUPS = ['A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-']

    user = models.OneToOneField(User, on_delete=models.CASCADE, primary_key=True, related_name='patient_profile')
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, default='')
    address = models.CharField(max_length=200, blank=True)
    emergency_contact = models.CharField(max_length=32, blank=True)
    blood_group = models.CharField(max_length=3, blank=True)

    def __str__(self) -> str:
        return f"{self.user.name} ({self.blood_group or '-'})"


class Appointment(models.Model):
    """A scheduled encounter between one patient and one doctor.

    ``appointment_date`` has day granularity and ``time`` holds the slot
    as ``HH:MM``.  A doctor can hold at most one active appointment per
    date and time; the conditional unique constraint backs up the check
    performed while booking.
    """
    STATUS_PENDING = 'pending'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_IN_PROGRESS = 'in-progress'
    STATUS_COMPLETED = 'completed'
    STATUS_CANCELLED = 'cancelled'
    STATUS_NO_SHOW = 'no-show'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_IN_PROGRESS, 'In progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_NO_SHOW, 'No-show'),
    ]
    ACTIVE_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_IN_PROGRESS)
    TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED, STATUS_NO_SHOW)

    TYPE_CHOICES = [
        ('general', 'General'),
        ('follow-up', 'Follow-up'),
        ('emergency', 'Emergency'),
        ('consultation', 'Consultation'),
        ('checkup', 'Checkup'),
    ]

    id = models.CharField(max_length=24, primary_key=True, default=new_object_id, editable=False)
    patient = models.ForeignKey(User, on_delete=models.PROTECT, related_name='patient_appointments')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='doctor_appointments')
    appointment_date = models.DateField()
    time = models.CharField(max_length=5)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING)
    reason = models.CharField(max_length=500)
    notes = models.TextField(max_length=1000, blank=True)
    appointment_type = models.CharField(max_length=16, choices=TYPE_CHOICES, default='general')
    booked_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='booked_appointments'
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='cancelled_appointments'
    )
    cancellation_reason = models.CharField(max_length=500, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    duration = models.PositiveSmallIntegerField(
        default=30, validators=[MinValueValidator(15), MaxValueValidator(120)]
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'appointment_date'], name='appt_patient_date_idx'),
            models.Index(fields=['doctor', 'appointment_date', 'time'], name='appt_doctor_slot_idx'),
            models.Index(fields=['status', 'appointment_date'], name='appt_status_date_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['doctor', 'appointment_date', 'time'],
                condition=models.Q(status__in=['pending', 'confirmed', 'in-progress']),
                name='unique_active_doctor_slot',
            ),
        ]

    def __str__(self) -> str:
        return f"appt {self.id} d={self.doctor_id} p={self.patient_id} {self.appointment_date} {self.time}"

    @property
    def is_today(self) -> bool:
        return self.appointment_date == timezone.localdate()

    @property
    def is_upcoming(self) -> bool:
        if self.status in (self.STATUS_CANCELLED, self.STATUS_COMPLETED):
            return False
        today = timezone.localdate()
        if self.appointment_date != today:
            return self.appointment_date > today
        return self.time > timezone.localtime().strftime('%H:%M')


class Prescription(models.Model):
    """Medication issued by a doctor against one appointment.

    ``medicines`` is an ordered list of dicts with ``name``, ``dosage`` and
    ``frequency`` plus optional ``duration``, ``quantity`` and
    ``instructions``.  Prescriptions are never edited after creation.
    """
    id = models.CharField(max_length=24, primary_key=True, default=new_object_id, editable=False)
    appointment = models.ForeignKey(Appointment, on_delete=models.PROTECT, related_name='prescriptions')
    doctor = models.ForeignKey(User, on_delete=models.PROTECT, related_name='issued_prescriptions')
    patient = models.ForeignKey(User, on_delete=models.PROTECT, related_name='prescriptions')
    medicines = models.JSONField(default=list)
    diagnosis = models.CharField(max_length=500, blank=True)
    instructions = models.TextField(max_length=1000, blank=True)
    follow_up_date = models.DateField(null=True, blank=True)
    issued_date = models.DateTimeField(default=timezone.now)
    refills = models.PositiveIntegerField(default=0)
    is_refillable = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['patient', 'issued_date'], name='rx_patient_issued_idx'),
            models.Index(fields=['doctor', 'issued_date'], name='rx_doctor_issued_idx'),
        ]

    def __str__(self) -> str:
        return f"rx {self.id} appt={self.appointment_id}"

    @property
    def is_recent(self) -> bool:
        return self.issued_date > timezone.now() - timedelta(days=30)

    @property
    def total_medicines(self) -> int:
        return len(self.medicines or [])
