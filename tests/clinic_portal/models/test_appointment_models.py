from datetime import datetime, timezone

import pytest

from clinic_portal.models.appointment import (
    PATIENT_OCCUPYING_STATUSES,
    STAFF_OCCUPYING_STATUSES,
    AppointmentRef,
    BookingRequest,
    format_wire_datetime,
    to_clinic_wall_clock,
)


def test_appointment_ref_parses_backend_wire_format() -> None:
    appointment = AppointmentRef.model_validate(
        {
            'appointmentId': 7,
            'preferredDateTime': '2026-01-05 09:00:00',
            'status': ' Pending ',
            'serviceId': 3,
            'patientId': 11,
            'symptom': 'Cough',
        }
    )

    assert appointment.appointment_id == 7
    assert appointment.preferred_date_time == datetime(2026, 1, 5, 9, 0)
    assert appointment.status == 'Pending'
    assert appointment.patient_id == 11


def test_appointment_ref_converts_utc_to_clinic_wall_clock() -> None:
    appointment = AppointmentRef.model_validate(
        {'preferredDateTime': '2026-01-05T01:00:00Z', 'status': 'Accepted'}
    )

    assert appointment.clinic_date_time == datetime(2026, 1, 5, 9, 0)


@pytest.mark.parametrize(
    ('status', 'patient', 'staff'),
    [
        ('Pending', True, True),
        ('accepted', True, True),
        ('Confirmed', False, True),
        ('Cancelled', False, False),
        ('Declined', False, False),
    ],
)
def test_occupies_slot_depends_on_status_set(status: str, patient: bool, staff: bool) -> None:
    appointment = AppointmentRef(preferred_date_time=datetime(2026, 1, 5, 9, 0), status=status)

    assert appointment.occupies_slot(PATIENT_OCCUPYING_STATUSES) is patient
    assert appointment.occupies_slot(STAFF_OCCUPYING_STATUSES) is staff


def test_format_wire_datetime_always_has_seconds_and_no_offset() -> None:
    assert format_wire_datetime(datetime(2026, 1, 5, 9, 5)) == '2026-01-05 09:05:00'
    assert format_wire_datetime(datetime(2026, 1, 5, 1, 0, tzinfo=timezone.utc)) == '2026-01-05 09:00:00'


def test_to_clinic_wall_clock_leaves_naive_values_alone() -> None:
    value = datetime(2026, 1, 5, 23, 30)

    assert to_clinic_wall_clock(value) is value


def test_booking_request_accepts_camel_case_fields() -> None:
    request = BookingRequest.model_validate({'dateTime': '2026-01-05T09:00', 'symptomText': 'Fever'})

    assert request.date_time == datetime(2026, 1, 5, 9, 0)
    assert request.symptom_text == 'Fever'



def test_booking_request_keeps_long_symptom_text() -> None:
    symptom = 'x' * 2000

    assert BookingRequest(symptom_text=symptom).symptom_text == symptom
