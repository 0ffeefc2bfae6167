"""Slot occupancy checks against existing appointments.

All comparisons happen on clinic wall-clock values (``CLINIC_TIMEZONE``):
two values collide when both the calendar date and the zero-padded HH:MM match.
"""

from collections.abc import Iterable
from datetime import date, datetime

from clinic_portal.models.appointment import (
    PATIENT_OCCUPYING_STATUSES,
    STAFF_OCCUPYING_STATUSES,
    AppointmentRef,
    to_clinic_wall_clock,
)


def occupying_statuses(staff: bool = False) -> frozenset[str]:
    return STAFF_OCCUPYING_STATUSES if staff else PATIENT_OCCUPYING_STATUSES


def normalize_time_label(time_str: str) -> str:
    parts = time_str.strip().split(':')
    if len(parts) < 2:
        raise ValueError(f"Invalid slot time '{time_str}'.")
    return f'{int(parts[0]):02d}:{int(parts[1]):02d}'


def _slot_key(value: datetime) -> tuple[date, str]:
    wall_clock = to_clinic_wall_clock(value)
    return wall_clock.date(), f'{wall_clock.hour:02d}:{wall_clock.minute:02d}'


def find_occupying_appointment(
    slot_date: date | datetime,
    time_str: str,
    appointments: Iterable[AppointmentRef],
    occupying: frozenset[str] = PATIENT_OCCUPYING_STATUSES,
    exclude_appointment_id=None,
) -> AppointmentRef | None:
    if isinstance(slot_date, datetime):
        slot_date = to_clinic_wall_clock(slot_date).date()
    target = (slot_date, normalize_time_label(time_str))

    for appointment in appointments:
        if exclude_appointment_id is not None and str(appointment.appointment_id) == str(exclude_appointment_id):
            continue
        if not appointment.occupies_slot(occupying):
            continue
        if _slot_key(appointment.preferred_date_time) == target:
            return appointment
    return None


def is_occupied(
    slot_date: date | datetime,
    time_str: str,
    appointments: Iterable[AppointmentRef],
    occupying: frozenset[str] = PATIENT_OCCUPYING_STATUSES,
    exclude_appointment_id=None,
) -> bool:
    return find_occupying_appointment(
        slot_date,
        time_str,
        appointments,
        occupying=occupying,
        exclude_appointment_id=exclude_appointment_id,
    ) is not None
