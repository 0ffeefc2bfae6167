"""Weekly doctor schedule definitions."""

import re
from datetime import date, datetime, time
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from clinic_portal.scheduling.weekdays import canonical_weekday, day_name


class ScheduleStatus(str, Enum):
    AVAILABLE = 'AVAILABLE'
    HALF_DAY = 'HALF_DAY'
    UNAVAILABLE = 'UNAVAILABLE'
    DAY_OFF = 'DAY_OFF'
    UNKNOWN = 'UNKNOWN'


ACTIVE_STATUSES = frozenset({ScheduleStatus.AVAILABLE, ScheduleStatus.HALF_DAY})
INACTIVE_STATUSES = frozenset({ScheduleStatus.UNAVAILABLE, ScheduleStatus.DAY_OFF})

_STATUS_ALIASES = {
    'AVAILABLE': ScheduleStatus.AVAILABLE,
    'HALF_DAY': ScheduleStatus.HALF_DAY,
    'HALFDAY': ScheduleStatus.HALF_DAY,
    'UNAVAILABLE': ScheduleStatus.UNAVAILABLE,
    'DAY_OFF': ScheduleStatus.DAY_OFF,
    'DAYOFF': ScheduleStatus.DAY_OFF,
    'OFF': ScheduleStatus.DAY_OFF,
}
_SEPARATOR_RUN = re.compile(r'[\s\-]+')


def normalize_status(raw: str | None) -> ScheduleStatus:
    """Map a raw status label ('day off', 'Half-Day', 'OFF', ...) onto ScheduleStatus."""
    if raw is None:
        return ScheduleStatus.UNKNOWN
    key = _SEPARATOR_RUN.sub('_', str(raw).strip().upper())
    return _STATUS_ALIASES.get(key, ScheduleStatus.UNKNOWN)


def parse_time_of_day(value) -> time | None:
    """Parse 'HH:MM' / 'HH:MM:SS' (or a time) into a time with seconds dropped."""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.time()
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0, tzinfo=None)

    text = str(value).strip()
    if not text:
        return None

    parts = text.split(':')
    if len(parts) < 2:
        raise ValueError(f"Invalid time of day '{text}'.")
    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError as exc:
        raise ValueError(f"Invalid time of day '{text}'.") from exc
    return time(hour, minute)


def format_hhmm(value: time) -> str:
    return f'{value.hour:02d}:{value.minute:02d}'


class WeeklyScheduleEntry(BaseModel):
    """One weekday of the doctor's recurring schedule."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    weekday: int = Field(ge=0, le=6)
    status: str = ''
    start_time: time | None = Field(default=None, validation_alias=AliasChoices('start_time', 'startTime'))
    end_time: time | None = Field(default=None, validation_alias=AliasChoices('end_time', 'endTime'))
    notes: str = Field(default='', validation_alias=AliasChoices('notes', 'note'))

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, value) -> str:
        return '' if value is None else str(value)

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def validate_time(cls, value) -> time | None:
        return parse_time_of_day(value)

    @field_validator('notes', mode='before')
    @classmethod
    def validate_notes(cls, value) -> str:
        return '' if value is None else str(value).strip()

    @property
    def normalized_status(self) -> ScheduleStatus:
        return normalize_status(self.status)

    @property
    def day_name(self) -> str:
        return day_name(self.weekday)

    @property
    def window(self) -> tuple[str, str] | None:
        if self.start_time is None or self.end_time is None:
            return None
        return format_hhmm(self.start_time), format_hhmm(self.end_time)


class WeeklySchedule(BaseModel):
    """Immutable snapshot of the weekly schedule, at most one entry per weekday."""
    model_config = ConfigDict(frozen=True)

    entries: tuple[WeeklyScheduleEntry, ...] = ()

    @model_validator(mode='after')
    def validate_unique_weekdays(self) -> 'WeeklySchedule':
        seen: set[int] = set()
        for entry in self.entries:
            if entry.weekday in seen:
                raise ValueError(f'Duplicate schedule entry for weekday {entry.weekday}.')
            seen.add(entry.weekday)
        return self

    @classmethod
    def from_records(cls, records) -> 'WeeklySchedule':
        return cls(entries=tuple(WeeklyScheduleEntry.model_validate(record) for record in records))

    def for_weekday(self, weekday: int) -> WeeklyScheduleEntry | None:
        for entry in self.entries:
            if entry.weekday == weekday:
                return entry
        return None

    def for_date(self, value: date | datetime) -> WeeklyScheduleEntry | None:
        return self.for_weekday(canonical_weekday(value))

    def ordered(self) -> list[WeeklyScheduleEntry]:
        return sorted(self.entries, key=lambda entry: entry.weekday)
