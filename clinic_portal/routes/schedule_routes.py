from datetime import date, datetime, time

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, field_validator

from clinic_portal.clients.clinic_api import ClinicApiClient, ClinicApiError, ScheduleInputError
from clinic_portal.models.schedule import normalize_status
from clinic_portal.routes.dependencies import fetch_snapshot, get_client, raise_transport_error
from clinic_portal.scheduling.availability import evaluate
from clinic_portal.scheduling.conflicts import is_occupied, occupying_statuses
from clinic_portal.scheduling.slots import generate_slots

router = APIRouter(tags=['schedule'])


class ScheduleEntryResponse(BaseModel):
    weekday: int
    day: str
    status: str
    normalized_status: str
    start_time: time | None = None
    end_time: time | None = None
    notes: str


class SlotResponse(BaseModel):
    date: date
    start_time: str
    end_time: str
    starts_at: datetime
    occupied: bool


class AvailabilityResponse(BaseModel):
    available: bool
    reason: str


class UpdateScheduleDayRequest(BaseModel):
    status: str
    start_time: time | None = None
    end_time: time | None = None


class UpdateScheduleStatusRequest(BaseModel):
    status: str


class AddScheduleNoteRequest(BaseModel):
    note: str

    @field_validator('note')
    @classmethod
    def validate_note(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Note cannot be empty.')
        return normalized


def validate_weekday(weekday: int) -> int:
    if not 0 <= weekday <= 6:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail='Weekday must be between 0 (Monday) and 6 (Sunday).',
        )
    return weekday


@router.get('', response_model=list[ScheduleEntryResponse])
def list_schedule(client: ClinicApiClient = Depends(get_client)):
    try:
        schedule = client.fetch_schedule()
    except ClinicApiError as exc:
        raise_transport_error(exc)

    return [
        ScheduleEntryResponse(
            weekday=entry.weekday,
            day=entry.day_name,
            status=entry.status,
            normalized_status=entry.normalized_status.value,
            start_time=entry.start_time,
            end_time=entry.end_time,
            notes=entry.notes,
        )
        for entry in schedule.ordered()
    ]


@router.get('/slots', response_model=list[SlotResponse])
def list_slots(
    slot_date: date = Query(..., alias='date'),
    staff: bool = Query(default=False),
    client: ClinicApiClient = Depends(get_client),
):
    snapshot = fetch_snapshot(client)
    occupying = occupying_statuses(staff)

    return [
        SlotResponse(
            date=slot.date,
            start_time=slot.start_time,
            end_time=slot.end_time,
            starts_at=slot.starts_at,
            occupied=is_occupied(slot.date, slot.start_time, snapshot.appointments, occupying=occupying),
        )
        for slot in generate_slots(snapshot.schedule, slot_date)
    ]


@router.get('/availability', response_model=AvailabilityResponse)
def check_availability(
    date_time: datetime = Query(...),
    client: ClinicApiClient = Depends(get_client),
):
    try:
        schedule = client.fetch_schedule()
    except ClinicApiError as exc:
        raise_transport_error(exc)

    decision = evaluate(date_time, schedule)
    return AvailabilityResponse(available=decision.available, reason=decision.reason)


def _proxy_schedule_edit(call, *args):
    try:
        return call(*args)
    except ScheduleInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except ClinicApiError as exc:
        raise_transport_error(exc)


@router.put('/{weekday}')
def update_schedule_day(
    weekday: int,
    data: UpdateScheduleDayRequest,
    client: ClinicApiClient = Depends(get_client),
):
    validate_weekday(weekday)
    _proxy_schedule_edit(client.update_schedule_day, weekday, data.status, data.start_time, data.end_time)
    return {'weekday': weekday, 'status': normalize_status(data.status).value}


@router.put('/{weekday}/status')
def update_schedule_status(
    weekday: int,
    data: UpdateScheduleStatusRequest,
    client: ClinicApiClient = Depends(get_client),
):
    validate_weekday(weekday)
    _proxy_schedule_edit(client.update_schedule_status, weekday, data.status)
    return {'weekday': weekday, 'status': normalize_status(data.status).value}


@router.post('/{weekday}/notes', status_code=status.HTTP_201_CREATED)
def add_schedule_note(
    weekday: int,
    data: AddScheduleNoteRequest,
    client: ClinicApiClient = Depends(get_client),
):
    validate_weekday(weekday)
    _proxy_schedule_edit(client.add_schedule_note, weekday, data.note)
    return {'weekday': weekday, 'note': data.note}
