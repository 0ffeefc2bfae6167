import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator

from clinic_portal.clients.clinic_api import ClinicApiClient, ClinicApiError
from clinic_portal.models.appointment import BookingRequest, format_wire_datetime
from clinic_portal.routes.dependencies import fetch_snapshot, get_client, raise_transport_error
from clinic_portal.scheduling.booking import BookingDecision, DecisionCategory, decide
from clinic_portal.scheduling.conflicts import occupying_statuses

router = APIRouter(tags=['appointments'])
logger = logging.getLogger(__name__)

REJECTION_STATUS_CODES = {
    DecisionCategory.INPUT_INVALID: status.HTTP_400_BAD_REQUEST,
    DecisionCategory.UNAVAILABLE: status.HTTP_400_BAD_REQUEST,
    DecisionCategory.CONFLICT: status.HTTP_409_CONFLICT,
}


class DecisionRequest(BaseModel):
    date_time: datetime | None = None
    symptom: str = ''
    exclude_appointment_id: int | str | None = None


class DecisionResponse(BaseModel):
    accept: bool
    reason: str
    category: str


class CreateAppointmentRequest(BaseModel):
    patient_id: int | str
    service_id: int | str
    date_time: datetime | None = None
    symptom: str = ''

    @field_validator('symptom')
    @classmethod
    def validate_symptom(cls, value: str) -> str:
        return value.strip()


class RescheduleAppointmentRequest(BaseModel):
    date_time: datetime | None = None
    symptom: str = ''

    @field_validator('symptom')
    @classmethod
    def validate_symptom(cls, value: str) -> str:
        return value.strip()


class BookingResponse(BaseModel):
    accept: bool
    reason: str
    preferred_date_time: str
    appointment: dict | None = None


def _slot_start(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(second=0, microsecond=0)


def _to_response(decision: BookingDecision) -> DecisionResponse:
    return DecisionResponse(accept=decision.accept, reason=decision.reason, category=decision.category.value)


def authorize_booking(
    client,
    date_time: datetime | None,
    symptom: str,
    staff: bool = False,
    exclude_appointment_id=None,
) -> BookingDecision:
    # Conflicts are checked against every patient's appointments, never a filtered list.
    snapshot = fetch_snapshot(client)
    decision = decide(
        BookingRequest(date_time=date_time, symptom_text=symptom),
        snapshot.schedule,
        snapshot.appointments,
        exclude_appointment_id=exclude_appointment_id,
        occupying=occupying_statuses(staff),
    )
    if not decision.accept:
        raise HTTPException(status_code=REJECTION_STATUS_CODES[decision.category], detail=decision.reason)
    return decision


@router.post('/decisions', response_model=DecisionResponse)
def preview_decision(
    data: DecisionRequest,
    staff: bool = Query(default=False),
    client: ClinicApiClient = Depends(get_client),
):
    snapshot = fetch_snapshot(client)
    decision = decide(
        BookingRequest(date_time=data.date_time, symptom_text=data.symptom),
        snapshot.schedule,
        snapshot.appointments,
        exclude_appointment_id=data.exclude_appointment_id,
        occupying=occupying_statuses(staff),
    )
    return _to_response(decision)


@router.post('', response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: CreateAppointmentRequest,
    staff: bool = Query(default=False),
    client: ClinicApiClient = Depends(get_client),
):
    start_time = _slot_start(data.date_time)
    decision = authorize_booking(client, start_time, data.symptom, staff=staff)

    try:
        created = client.create_appointment(data.patient_id, data.service_id, start_time, data.symptom)
    except ClinicApiError as exc:
        raise_transport_error(exc)

    logger.info('Appointment booked for patient %s at %s', data.patient_id, format_wire_datetime(start_time))
    return BookingResponse(
        accept=True,
        reason=decision.reason,
        preferred_date_time=format_wire_datetime(start_time),
        appointment=created if isinstance(created, dict) else None,
    )


@router.put('/{appointment_id}', response_model=BookingResponse)
def reschedule_appointment(
    appointment_id: int,
    data: RescheduleAppointmentRequest,
    staff: bool = Query(default=False),
    client: ClinicApiClient = Depends(get_client),
):
    start_time = _slot_start(data.date_time)
    decision = authorize_booking(
        client,
        start_time,
        data.symptom,
        staff=staff,
        exclude_appointment_id=appointment_id,
    )

    try:
        updated = client.update_appointment(appointment_id, start_time, data.symptom)
    except ClinicApiError as exc:
        raise_transport_error(exc)

    logger.info('Appointment %s rescheduled to %s', appointment_id, format_wire_datetime(start_time))
    return BookingResponse(
        accept=True,
        reason=decision.reason,
        preferred_date_time=format_wire_datetime(start_time),
        appointment=updated if isinstance(updated, dict) else None,
    )
