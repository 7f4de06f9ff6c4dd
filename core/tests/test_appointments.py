"""
Booking, status changes and cancellation of appointments.
"""
from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.ids import new_object_id
from core.models import Appointment, User

pytestmark = pytest.mark.django_db

BOOK = '/api/receptionist/appointments'


def booking(patient, doctor, day, time='10:00', **extra):
    body = {
        'patientId': patient.id,
        'doctorId': doctor.id,
        'appointmentDate': day.isoformat(),
        'time': time,
        'reason': 'Chest pain',
    }
    body.update(extra)
    return body


@pytest.fixture
def front(client_for, receptionist):
    return client_for(receptionist)


def test_book_appointment(front, receptionist, patient, doctor, tomorrow):
    r = front.post(BOOK, booking(patient, doctor, tomorrow, time='9:30'), format='json')
    assert r.status_code == 201
    data = r.json()['data']
    assert data['status'] == 'pending'
    assert data['time'] == '09:30'
    assert data['appointmentDate'] == tomorrow.isoformat()
    assert data['bookedBy'] == receptionist.id
    assert data['patient']['name'] == 'Jane Patient'
    assert data['doctor']['specialization'] == 'Cardiology'
    assert data['duration'] == 30


def test_book_accepts_iso_datetime(front, patient, doctor, tomorrow):
    body = booking(patient, doctor, tomorrow)
    body['appointmentDate'] = f'{tomorrow.isoformat()}T00:00:00.000Z'
    r = front.post(BOOK, body, format='json')
    assert r.status_code == 201
    assert r.json()['data']['appointmentDate'] == tomorrow.isoformat()


def test_same_slot_conflicts_other_time_succeeds(front, patient, doctor, make_user, tomorrow):
    assert front.post(BOOK, booking(patient, doctor, tomorrow), format='json').status_code == 201
    other_patient = make_user(User.ROLE_PATIENT)

    clash = front.post(BOOK, booking(other_patient, doctor, tomorrow), format='json')
    assert clash.status_code == 409
    assert clash.json()['message'] == 'Doctor already has an appointment at this time'

    later = front.post(BOOK, booking(other_patient, doctor, tomorrow, time='10:30'), format='json')
    assert later.status_code == 201


def test_cancelled_slot_can_be_rebooked(front, patient, doctor, make_appointment, tomorrow):
    make_appointment(patient, doctor, day=tomorrow, time='10:00', status=Appointment.STATUS_CANCELLED)
    r = front.post(BOOK, booking(patient, doctor, tomorrow), format='json')
    assert r.status_code == 201


@pytest.mark.parametrize('time', ['00:00', '12:00', '23:59'])
def test_past_date_rejected(front, patient, doctor, time):
    yesterday = timezone.localdate() - timedelta(days=1)
    r = front.post(BOOK, booking(patient, doctor, yesterday, time=time), format='json')
    assert r.status_code == 400
    assert r.json()['message'] == 'Cannot book appointment for a past date'
    assert not Appointment.objects.exists()


def test_today_is_bookable(front, patient, doctor):
    r = front.post(BOOK, booking(patient, doctor, timezone.localdate(), time='00:00'), format='json')
    assert r.status_code == 201


@pytest.mark.parametrize('field, value', [
    ('time', '25:00'),
    ('time', '9.30'),
    ('appointmentDate', 'next tuesday'),
    ('patientId', 'abc'),
    ('doctorId', '123'),
    ('duration', 5),
    ('appointmentType', 'surgery'),
])
def test_malformed_booking_rejected(front, patient, doctor, tomorrow, field, value):
    body = booking(patient, doctor, tomorrow)
    body[field] = value
    r = front.post(BOOK, body, format='json')
    assert r.status_code == 400
    assert any(e.startswith(f'{field}:') for e in r.json()['errors'])


def test_booking_requires_matching_active_parties(front, patient, doctor, make_user, tomorrow):
    r = front.post(BOOK, booking(patient, patient, tomorrow), format='json')
    assert r.status_code == 404
    assert r.json()['message'] == 'Doctor not found'

    r = front.post(BOOK, booking(doctor, doctor, tomorrow), format='json')
    assert r.status_code == 404
    assert r.json()['message'] == 'Patient not found'

    inactive = make_user(User.ROLE_DOCTOR, is_active=False)
    r = front.post(BOOK, booking(patient, inactive, tomorrow), format='json')
    assert r.status_code == 404

    ghost = User(id=new_object_id())
    r = front.post(BOOK, booking(patient, ghost, tomorrow), format='json')
    assert r.status_code == 404


def test_store_rejects_second_active_booking(patient, doctor, make_appointment, tomorrow):
    make_appointment(patient, doctor, day=tomorrow, time='11:00')
    with pytest.raises(IntegrityError), transaction.atomic():
        make_appointment(patient, doctor, day=tomorrow, time='11:00', status=Appointment.STATUS_CONFIRMED)
    make_appointment(patient, doctor, day=tomorrow, time='11:00', status=Appointment.STATUS_NO_SHOW)


def status_url(appt):
    return f'/api/doctor/appointments/{appt.id}/status'


def test_doctor_confirms_then_completes(client_for, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    client = client_for(doctor)

    r = client.put(status_url(appt), {'status': 'confirmed'}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['status'] == 'confirmed'
    assert r.json()['data']['completedAt'] is None

    r = client.put(status_url(appt), {'status': 'completed', 'notes': 'All good'}, format='json')
    assert r.status_code == 200
    appt.refresh_from_db()
    assert appt.status == 'completed'
    assert appt.completed_at is not None
    assert appt.notes == 'All good'


@pytest.mark.parametrize('start, target', [
    (Appointment.STATUS_COMPLETED, Appointment.STATUS_CONFIRMED),
    (Appointment.STATUS_CANCELLED, Appointment.STATUS_PENDING),
    (Appointment.STATUS_NO_SHOW, Appointment.STATUS_IN_PROGRESS),
    (Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED),
])
def test_terminal_status_cannot_move(client_for, patient, doctor, make_appointment, start, target):
    appt = make_appointment(patient, doctor, status=start)
    r = client_for(doctor).put(status_url(appt), {'status': target}, format='json')
    assert r.status_code == 400
    assert r.json()['message'] == f'Cannot change appointment status from {start} to {target}'
    appt.refresh_from_db()
    assert appt.status == start


@pytest.mark.parametrize('start, target', [
    (Appointment.STATUS_CONFIRMED, Appointment.STATUS_PENDING),
    (Appointment.STATUS_IN_PROGRESS, Appointment.STATUS_CONFIRMED),
    (Appointment.STATUS_IN_PROGRESS, Appointment.STATUS_PENDING),
])
def test_active_status_can_move_back(client_for, patient, doctor, make_appointment, start, target):
    appt = make_appointment(patient, doctor, status=start)
    r = client_for(doctor).put(status_url(appt), {'status': target}, format='json')
    assert r.status_code == 200
    assert r.json()['data']['status'] == target
    appt.refresh_from_db()
    assert appt.status == target
    assert appt.completed_at is None
    assert appt.cancelled_at is None


def test_doctor_cancel_stamps_metadata(client_for, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor, status=Appointment.STATUS_CONFIRMED)
    r = client_for(doctor).put(status_url(appt), {'status': 'cancelled'}, format='json')
    assert r.status_code == 200
    appt.refresh_from_db()
    assert appt.cancelled_at is not None
    assert appt.cancelled_by_id == doctor.id


def test_only_assigned_doctor_updates(client_for, patient, doctor, make_user, make_appointment):
    appt = make_appointment(patient, doctor)
    r = client_for(make_user(User.ROLE_DOCTOR)).put(status_url(appt), {'status': 'confirmed'}, format='json')
    assert r.status_code == 403
    assert r.json()['message'] == 'Not authorized to update this appointment'


def test_invalid_status_and_ids(client_for, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    client = client_for(doctor)
    r = client.put(status_url(appt), {'status': 'done'}, format='json')
    assert r.status_code == 400
    assert r.json()['message'] == 'Invalid status'

    r = client.put('/api/doctor/appointments/not-an-id/status', {'status': 'confirmed'}, format='json')
    assert r.status_code == 400
    assert r.json()['message'] == 'Invalid appointment ID'

    r = client.put(f'/api/doctor/appointments/{new_object_id()}/status', {'status': 'confirmed'}, format='json')
    assert r.status_code == 404


def cancel_url(appt):
    return f'/api/receptionist/appointments/{appt.id}/cancel'


def test_receptionist_cancels(front, receptionist, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    r = front.put(cancel_url(appt), {'cancellationReason': 'Patient called'}, format='json')
    assert r.status_code == 200
    appt.refresh_from_db()
    assert appt.status == 'cancelled'
    assert appt.cancelled_by_id == receptionist.id
    assert appt.cancelled_at is not None
    assert appt.cancellation_reason == 'Patient called'


@pytest.mark.parametrize('status', [Appointment.STATUS_COMPLETED, Appointment.STATUS_CANCELLED])
def test_cancel_finished_appointment_rejected(front, patient, doctor, make_appointment, status):
    appt = make_appointment(patient, doctor, status=status)
    r = front.put(cancel_url(appt), {}, format='json')
    assert r.status_code == 400
    assert r.json()['message'] == f'Cannot cancel appointment with status: {status}'


def test_listing_filters_and_pagination(front, patient, doctor, make_user, make_appointment, tomorrow):
    other = make_user(User.ROLE_DOCTOR)
    for hour in range(8, 12):
        make_appointment(patient, doctor, day=tomorrow, time=f'{hour:02d}:00')
    make_appointment(patient, other, day=tomorrow + timedelta(days=1), time='09:00',
                     status=Appointment.STATUS_CONFIRMED)

    r = front.get(BOOK, {'limit': 3, 'page': 2})
    body = r.json()
    assert body['pagination'] == {'total': 5, 'page': 2, 'pages': 2}
    assert len(body['data']) == 2

    r = front.get(BOOK, {'doctorId': doctor.id})
    assert [a['time'] for a in r.json()['data']] == ['08:00', '09:00', '10:00', '11:00']

    r = front.get(BOOK, {'status': 'confirmed'})
    assert [a['doctor']['id'] for a in r.json()['data']] == [other.id]

    r = front.get(BOOK, {'appointmentDate': tomorrow.isoformat()})
    assert r.json()['pagination']['total'] == 4

    r = front.get(BOOK, {'limit': 500})
    assert r.status_code == 400


def test_doctor_sees_only_own_appointments(client_for, patient, doctor, make_user, make_appointment):
    mine = make_appointment(patient, doctor)
    make_appointment(patient, make_user(User.ROLE_DOCTOR))
    r = client_for(doctor).get('/api/doctor/appointments')
    assert [a['id'] for a in r.json()['data']] == [mine.id]


def test_patient_list_is_newest_first(client_for, patient, doctor, make_appointment, tomorrow):
    early = make_appointment(patient, doctor, day=tomorrow, time='09:00')
    late = make_appointment(patient, doctor, day=tomorrow + timedelta(days=3), time='09:00')
    r = client_for(patient).get('/api/patient/appointments')
    assert [a['id'] for a in r.json()['data']] == [late.id, early.id]
