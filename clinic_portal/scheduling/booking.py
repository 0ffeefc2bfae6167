"""Authorization of new bookings and reschedules.

``decide`` runs before any write reaches the backend. It never performs the
write itself, so the same rules serve both new bookings and reschedules.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from clinic_portal.models.appointment import (
    PATIENT_OCCUPYING_STATUSES,
    AppointmentRef,
    BookingRequest,
    clinic_now,
    to_clinic_wall_clock,
)
from clinic_portal.models.schedule import WeeklySchedule
from clinic_portal.scheduling.availability import evaluate
from clinic_portal.scheduling.conflicts import is_occupied

logger = logging.getLogger(__name__)

INVALID_DATE_TIME_REASON = 'Please select a valid future date/time.'
MISSING_SYMPTOM_REASON = 'Please describe your symptoms.'
SLOT_BOOKED_REASON = 'This slot is already booked.'


class DecisionCategory(str, Enum):
    ACCEPTED = 'accepted'
    INPUT_INVALID = 'input_invalid'
    UNAVAILABLE = 'unavailable'
    CONFLICT = 'conflict'


@dataclass(frozen=True)
class BookingDecision:
    accept: bool
    reason: str
    category: DecisionCategory


def _reject(category: DecisionCategory, reason: str) -> BookingDecision:
    logger.info('Booking rejected (%s): %s', category.value, reason)
    return BookingDecision(accept=False, reason=reason, category=category)


def decide(
    request: BookingRequest,
    schedule: WeeklySchedule,
    existing_appointments: Iterable[AppointmentRef],
    now: datetime | None = None,
    exclude_appointment_id=None,
    occupying: frozenset[str] = PATIENT_OCCUPYING_STATUSES,
) -> BookingDecision:
    current = to_clinic_wall_clock(now) if now is not None else clinic_now()

    if request.date_time is None:
        return _reject(DecisionCategory.INPUT_INVALID, INVALID_DATE_TIME_REASON)

    requested = to_clinic_wall_clock(request.date_time).replace(second=0, microsecond=0)
    if requested < current.replace(second=0, microsecond=0):
        return _reject(DecisionCategory.INPUT_INVALID, INVALID_DATE_TIME_REASON)

    if not request.symptom_text.strip():
        return _reject(DecisionCategory.INPUT_INVALID, MISSING_SYMPTOM_REASON)

    availability = evaluate(requested, schedule)
    if not availability.available:
        return _reject(DecisionCategory.UNAVAILABLE, availability.reason)

    if is_occupied(
        requested.date(),
        f'{requested.hour:02d}:{requested.minute:02d}',
        existing_appointments,
        occupying=occupying,
        exclude_appointment_id=exclude_appointment_id,
    ):
        return _reject(DecisionCategory.CONFLICT, SLOT_BOOKED_REASON)

    return BookingDecision(accept=True, reason=availability.reason, category=DecisionCategory.ACCEPTED)
