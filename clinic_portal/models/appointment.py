"""Appointment model definitions."""

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from clinic_portal.core import config

WIRE_DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'

PATIENT_OCCUPYING_STATUSES = frozenset({'pending', 'accepted'})
STAFF_OCCUPYING_STATUSES = frozenset({'pending', 'accepted', 'confirmed'})


def to_clinic_wall_clock(value: datetime) -> datetime:
    """Naive datetimes are already clinic wall-clock; aware ones are converted."""
    if value.tzinfo is None:
        return value
    return value.astimezone(config.get_clinic_timezone()).replace(tzinfo=None)


def clinic_now() -> datetime:
    return datetime.now(config.get_clinic_timezone()).replace(tzinfo=None)


def format_wire_datetime(value: datetime) -> str:
    return to_clinic_wall_clock(value).strftime(WIRE_DATETIME_FORMAT)


class AppointmentRef(BaseModel):
    """Projection of a backend appointment record used for conflict checks."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='ignore')

    appointment_id: int | str | None = Field(
        default=None,
        validation_alias=AliasChoices('appointmentId', 'appointment_id', 'id'),
    )
    preferred_date_time: datetime = Field(
        validation_alias=AliasChoices('preferredDateTime', 'preferred_date_time'),
    )
    status: str = ''
    service_id: int | str | None = Field(default=None, validation_alias=AliasChoices('serviceId', 'service_id'))
    patient_id: int | str | None = Field(default=None, validation_alias=AliasChoices('patientId', 'patient_id'))
    symptom: str | None = None

    @field_validator('status', mode='before')
    @classmethod
    def validate_status(cls, value) -> str:
        return '' if value is None else str(value).strip()

    def occupies_slot(self, occupying: frozenset[str] = PATIENT_OCCUPYING_STATUSES) -> bool:
        return self.status.lower() in occupying

    @property
    def clinic_date_time(self) -> datetime:
        return to_clinic_wall_clock(self.preferred_date_time)


class BookingRequest(BaseModel):
    date_time: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices('dateTime', 'date_time', 'preferredDateTime'),
    )
    symptom_text: str = Field(default='', validation_alias=AliasChoices('symptomText', 'symptom_text', 'symptom'))

    @field_validator('symptom_text', mode='before')
    @classmethod
    def validate_symptom_text(cls, value) -> str:
        return '' if value is None else str(value)
