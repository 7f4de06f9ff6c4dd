from datetime import timedelta

import pytest
from django.utils import timezone

from core.exceptions import flatten_errors
from core.models import Appointment, Prescription, User

pytestmark = pytest.mark.django_db

URL = '/api/doctor/prescriptions'

MEDS = [
    {'name': 'Amoxicillin', 'dosage': '500mg', 'frequency': 'Three times daily', 'duration': '7 days'},
    {'name': 'Ibuprofen', 'dosage': '200mg', 'frequency': 'As needed', 'quantity': 10},
]


def rx_body(appt, **extra):
    body = {'appointmentId': appt.id, 'medicines': MEDS, 'diagnosis': 'Sinusitis'}
    body.update(extra)
    return body


def test_prescription_completes_pending_appointment(client_for, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    r = client_for(doctor).post(URL, rx_body(appt), format='json')
    assert r.status_code == 201
    data = r.json()['data']
    assert data['patient']['id'] == patient.id
    assert data['doctor']['id'] == doctor.id
    assert data['totalMedicines'] == 2
    assert data['medicines'][0]['name'] == 'Amoxicillin'
    assert data['appointment']['status'] == 'completed'

    appt.refresh_from_db()
    assert appt.status == 'completed'
    assert appt.completed_at is not None


def test_completed_appointment_keeps_timestamp(client_for, patient, doctor, make_appointment):
    stamp = timezone.now() - timedelta(hours=1)
    appt = make_appointment(patient, doctor, status=Appointment.STATUS_COMPLETED, completed_at=stamp)
    r = client_for(doctor).post(URL, rx_body(appt), format='json')
    assert r.status_code == 201
    appt.refresh_from_db()
    assert appt.completed_at == stamp


def test_medicines_required(client_for, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    client = client_for(doctor)
    r = client.post(URL, rx_body(appt, medicines=[]), format='json')
    assert r.status_code == 400

    r = client.post(URL, rx_body(appt, medicines=[{'name': 'Aspirin', 'frequency': 'Daily'}]), format='json')
    assert r.status_code == 400
    assert 'medicines[0].dosage: This field is required.' in r.json()['errors']
    assert not Prescription.objects.exists()
    appt.refresh_from_db()
    assert appt.status == 'pending'


def test_other_doctor_forbidden(client_for, patient, doctor, make_user, make_appointment):
    appt = make_appointment(patient, doctor)
    r = client_for(make_user(User.ROLE_DOCTOR)).post(URL, rx_body(appt), format='json')
    assert r.status_code == 403
    assert r.json()['message'] == 'Not authorized to add prescription for this appointment'


@pytest.mark.parametrize('status', [Appointment.STATUS_CANCELLED, Appointment.STATUS_NO_SHOW])
def test_closed_appointment_rejected(client_for, patient, doctor, make_appointment, status):
    appt = make_appointment(patient, doctor, status=status)
    r = client_for(doctor).post(URL, rx_body(appt), format='json')
    assert r.status_code == 400
    appt.refresh_from_db()
    assert appt.status == status


def test_follow_up_not_before_issue(client_for, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    client = client_for(doctor)
    past = (timezone.localdate() - timedelta(days=1)).isoformat()
    r = client.post(URL, rx_body(appt, followUpDate=past), format='json')
    assert r.status_code == 400

    soon = (timezone.localdate() + timedelta(days=14)).isoformat()
    r = client.post(URL, rx_body(appt, followUpDate=soon, refills=2, isRefillable=True), format='json')
    assert r.status_code == 201
    assert r.json()['data']['followUpDate'] == soon
    assert r.json()['data']['refills'] == 2


def test_unknown_appointment(client_for, doctor):
    r = client_for(doctor).post(URL, {'appointmentId': 'f' * 24, 'medicines': MEDS}, format='json')
    assert r.status_code == 404


def test_reads_are_scoped_to_owner(client_for, patient, doctor, make_user, make_appointment):
    other_patient = make_user(User.ROLE_PATIENT)
    mine = make_appointment(patient, doctor, time='09:00')
    theirs = make_appointment(other_patient, doctor, time='10:00')
    client = client_for(doctor)
    client.post(URL, rx_body(mine), format='json')
    client.post(URL, rx_body(theirs), format='json')

    r = client_for(patient).get('/api/patient/prescriptions')
    assert r.status_code == 200
    assert [rx['appointment']['id'] for rx in r.json()['data']] == [mine.id]
    assert r.json()['pagination'] == {'total': 1, 'page': 1, 'pages': 1}

    r = client.get(URL)
    assert r.json()['pagination']['total'] == 2

    r = client_for(make_user(User.ROLE_DOCTOR)).get(URL)
    assert r.json()['data'] == []


def test_second_medicine_error_is_indexed(client_for, patient, doctor, make_appointment):
    appt = make_appointment(patient, doctor)
    meds = [MEDS[0], {'name': 'Ibuprofen', 'dosage': '200mg'}]
    r = client_for(doctor).post(URL, rx_body(appt, medicines=meds), format='json')
    assert r.status_code == 400
    assert 'medicines[1].frequency: This field is required.' in r.json()['errors']


@pytest.mark.parametrize('detail', [
    {'medicines': [{}, {'dosage': ['This field is required.']}]},
    {'medicines': {1: {'dosage': ['This field is required.']}}},
])
def test_nested_list_errors_use_bracket_index(detail):
    assert flatten_errors(detail) == ['medicines[1].dosage: This field is required.']
