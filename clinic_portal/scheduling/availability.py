from dataclasses import dataclass
from datetime import datetime

from clinic_portal.models.appointment import to_clinic_wall_clock
from clinic_portal.models.schedule import ACTIVE_STATUSES, INACTIVE_STATUSES, WeeklySchedule

NO_RESTRICTION_REASON = 'No schedule restriction.'
DEFAULT_AVAILABLE_REASON = 'Available.'


@dataclass(frozen=True)
class AvailabilityDecision:
    available: bool
    reason: str


def _with_notes(message: str, notes: str) -> str:
    return f'{message} {notes}'.strip()


def evaluate(date_time: datetime, schedule: WeeklySchedule) -> AvailabilityDecision:
    """Decide whether ``date_time`` falls inside the doctor's window for that weekday.

    The window is inclusive at both ends: a request at exactly the end time is
    accepted. Statuses that cannot be recognised are treated as available.
    """
    wall_clock = to_clinic_wall_clock(date_time)
    entry = schedule.for_date(wall_clock)
    if entry is None:
        return AvailabilityDecision(available=True, reason=NO_RESTRICTION_REASON)

    status = entry.normalized_status
    notes = entry.notes

    if status in INACTIVE_STATUSES:
        return AvailabilityDecision(
            available=False,
            reason=_with_notes(f'Doctor unavailable ({entry.status}).', notes),
        )

    if status in ACTIVE_STATUSES:
        window = entry.window
        if window is None:
            return AvailabilityDecision(available=True, reason=_with_notes(DEFAULT_AVAILABLE_REASON, notes))

        start, end = window
        current = f'{wall_clock.hour:02d}:{wall_clock.minute:02d}'
        if not start <= current <= end:
            return AvailabilityDecision(
                available=False,
                reason=_with_notes(f'Outside available time ({start} - {end}).', notes),
            )
        return AvailabilityDecision(available=True, reason=_with_notes(f'Available ({start} - {end}).', notes))

    return AvailabilityDecision(available=True, reason=notes or DEFAULT_AVAILABLE_REASON)
