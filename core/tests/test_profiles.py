import pytest

from core.models import User

pytestmark = pytest.mark.django_db


def test_doctor_updates_profile(client_for, doctor):
    client = client_for(doctor)
    r = client.put('/api/doctor/profile', {
        'qualifications': 'MD, FACC',
        'experience': 12,
        'availability': {'monday': ['09:00', '10:00']},
        'phone': '555 987 6543',
    }, format='json')
    assert r.status_code == 200
    data = r.json()['data']
    assert data['qualifications'] == 'MD, FACC'
    assert data['experience'] == 12
    assert data['availability'] == {'monday': ['09:00', '10:00']}
    assert data['specialization'] == 'Cardiology'

    r = client.get('/api/doctor/profile')
    assert r.json()['data']['phone'] == '555 987 6543'


def test_doctor_profile_rejects_bad_phone(client_for, doctor):
    r = client_for(doctor).put('/api/doctor/profile', {'phone': '12'}, format='json')
    assert r.status_code == 400
    assert 'phone: Invalid phone number format' in r.json()['errors']


def test_patient_updates_profile(client_for, patient):
    r = client_for(patient).put('/api/patient/profile', {
        'dateOfBirth': '1990-04-01',
        'gender': 'female',
        'bloodGroup': 'O+',
        'address': '<script>x</script>12 Main St',
    }, format='json')
    assert r.status_code == 200
    data = r.json()['data']
    assert data['dateOfBirth'] == '1990-04-01'
    assert data['gender'] == 'female'
    assert data['bloodGroup'] == 'O+'
    assert '<script>' not in data['address']
    assert data['role'] == 'patient'


def test_patient_profile_rejects_unknown_blood_group(client_for, patient):
    r = client_for(patient).put('/api/patient/profile', {'bloodGroup': 'C+'}, format='json')
    assert r.status_code == 400


def test_receptionist_registers_patient(client_for, receptionist):
    client = client_for(receptionist)
    body = {
        'name': 'Walk In',
        'email': 'walkin@example.com',
        'password': 'walkin1',
        'phone': '555-000-1234',
        'bloodGroup': 'A-',
        'emergencyContact': '555-000-9999',
    }
    r = client.post('/api/receptionist/patients', body, format='json')
    assert r.status_code == 201
    assert r.json()['data']['bloodGroup'] == 'A-'
    assert User.objects.get(email='walkin@example.com').role == 'patient'

    again = client.post('/api/receptionist/patients', body, format='json')
    assert again.status_code == 409
    assert again.json()['message'] == 'Patient with this email already exists'

    r = client.get('/api/receptionist/patients', {'search': 'walk'})
    assert r.json()['pagination']['total'] == 1


def test_receptionist_patient_requires_phone(client_for, receptionist):
    r = client_for(receptionist).post('/api/receptionist/patients', {
        'name': 'No Phone', 'email': 'nophone@example.com', 'password': 'secret1',
    }, format='json')
    assert r.status_code == 400
    assert any(e.startswith('phone:') for e in r.json()['errors'])
