import logging
from datetime import datetime

import pytest

from clinic_portal.models.appointment import STAFF_OCCUPYING_STATUSES, AppointmentRef, BookingRequest
from clinic_portal.models.schedule import WeeklySchedule
from clinic_portal.scheduling.booking import (
    INVALID_DATE_TIME_REASON,
    MISSING_SYMPTOM_REASON,
    SLOT_BOOKED_REASON,
    BookingDecision,
    DecisionCategory,
    decide,
)

NOW = datetime(2026, 1, 4, 12, 0)
SCHEDULE = WeeklySchedule.from_records([
    {'weekday': 0, 'status': 'AVAILABLE', 'start_time': '08:00:00', 'end_time': '17:00:00', 'notes': 'Room 2'},
    {'weekday': 1, 'status': 'DAY_OFF', 'notes': 'Seminar'},
])


def _request(when: datetime | None, symptom: str = 'Headache') -> BookingRequest:
    return BookingRequest(date_time=when, symptom_text=symptom)


def _appointment(when: str, status: str = 'Pending', appointment_id: int = 1) -> AppointmentRef:
    return AppointmentRef.model_validate({'appointmentId': appointment_id, 'preferredDateTime': when, 'status': status})


def test_decide_accepts_free_slot_inside_window() -> None:
    decision = decide(_request(datetime(2026, 1, 5, 9, 0)), SCHEDULE, [], now=NOW)

    assert decision == BookingDecision(
        accept=True,
        reason='Available (08:00 - 17:00). Room 2',
        category=DecisionCategory.ACCEPTED,
    )


def test_decide_rejects_missing_date_time() -> None:
    decision = decide(_request(None), SCHEDULE, [], now=NOW)

    assert decision.accept is False
    assert decision.category is DecisionCategory.INPUT_INVALID
    assert decision.reason == INVALID_DATE_TIME_REASON


def test_decide_rejects_past_date_time_even_when_slot_is_free() -> None:
    decision = decide(_request(datetime(2025, 12, 29, 9, 0)), SCHEDULE, [], now=NOW)

    assert decision.accept is False
    assert decision.reason == INVALID_DATE_TIME_REASON


def test_decide_accepts_request_in_current_minute() -> None:
    now = datetime(2026, 1, 5, 9, 0, 40)

    assert decide(_request(datetime(2026, 1, 5, 9, 0)), SCHEDULE, [], now=now).accept is True


@pytest.mark.parametrize('symptom', ['', '   ', '\n\t'])
def test_decide_rejects_blank_symptom_even_when_slot_is_free(symptom: str) -> None:
    decision = decide(_request(datetime(2026, 1, 5, 9, 0), symptom), SCHEDULE, [], now=NOW)

    assert decision.accept is False
    assert decision.category is DecisionCategory.INPUT_INVALID
    assert decision.reason == MISSING_SYMPTOM_REASON


def test_decide_rejects_day_off_with_evaluator_reason() -> None:
    decision = decide(_request(datetime(2026, 1, 6, 9, 0)), SCHEDULE, [], now=NOW)

    assert decision.accept is False
    assert decision.category is DecisionCategory.UNAVAILABLE
    assert decision.reason == 'Doctor unavailable (DAY_OFF). Seminar'


def test_decide_rejects_outside_window() -> None:
    decision = decide(_request(datetime(2026, 1, 5, 18, 0)), SCHEDULE, [], now=NOW)

    assert decision.category is DecisionCategory.UNAVAILABLE
    assert decision.reason == 'Outside available time (08:00 - 17:00). Room 2'


def test_decide_rejects_booked_slot() -> None:
    appointments = [_appointment('2026-01-05 09:00:00', status='Accepted')]

    decision = decide(_request(datetime(2026, 1, 5, 9, 0)), SCHEDULE, appointments, now=NOW)

    assert decision.accept is False
    assert decision.category is DecisionCategory.CONFLICT
    assert decision.reason == SLOT_BOOKED_REASON


def test_decide_first_failure_wins() -> None:
    appointments = [_appointment('2026-01-06 09:00:00')]

    decision = decide(_request(datetime(2026, 1, 6, 9, 0), ''), SCHEDULE, appointments, now=NOW)

    assert decision.reason == MISSING_SYMPTOM_REASON


def test_decide_reschedule_excludes_own_slot() -> None:
    appointments = [_appointment('2026-01-05 09:00:00', appointment_id=5)]

    decision = decide(
        _request(datetime(2026, 1, 5, 9, 0)),
        SCHEDULE,
        appointments,
        now=NOW,
        exclude_appointment_id=5,
    )

    assert decision.accept is True


def test_decide_staff_side_counts_confirmed_appointments() -> None:
    appointments = [_appointment('2026-01-05 10:00:00', status='Confirmed')]
    request = _request(datetime(2026, 1, 5, 10, 0))

    assert decide(request, SCHEDULE, appointments, now=NOW).accept is True
    assert decide(request, SCHEDULE, appointments, now=NOW, occupying=STAFF_OCCUPYING_STATUSES).accept is False


def test_decide_logs_rejections(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger='clinic_portal.scheduling.booking'):
        decide(_request(datetime(2026, 1, 6, 9, 0)), SCHEDULE, [], now=NOW)

    assert 'Booking rejected (unavailable)' in caplog.text
