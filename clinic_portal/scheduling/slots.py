"""Bookable one-hour slots derived from the weekly schedule."""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from clinic_portal.models.schedule import INACTIVE_STATUSES, WeeklySchedule

SLOT_DURATION_MINUTES = 60


def minutes_since_midnight(value: time) -> int:
    return value.hour * 60 + value.minute


def format_minutes(minutes: int) -> str:
    # A slot starting at 23:00 ends at '24:00'; the label is not clamped.
    return f'{minutes // 60:02d}:{minutes % 60:02d}'


@dataclass(frozen=True)
class Slot:
    date: date
    start_minutes: int
    end_minutes: int

    @property
    def start_time(self) -> str:
        return format_minutes(self.start_minutes)

    @property
    def end_time(self) -> str:
        return format_minutes(self.end_minutes)

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.date, time()) + timedelta(minutes=self.start_minutes)


def generate_slots(schedule: WeeklySchedule, slot_date: date) -> tuple[Slot, ...]:
    entry = schedule.for_date(slot_date)
    if entry is None or entry.normalized_status in INACTIVE_STATUSES:
        return ()

    if entry.start_time is None or entry.end_time is None:
        return ()

    start = minutes_since_midnight(entry.start_time)
    end = minutes_since_midnight(entry.end_time)

    slots: list[Slot] = []
    current = start
    while end - current >= SLOT_DURATION_MINUTES:
        slots.append(Slot(date=slot_date, start_minutes=current, end_minutes=current + SLOT_DURATION_MINUTES))
        current += SLOT_DURATION_MINUTES

    return tuple(slots)
