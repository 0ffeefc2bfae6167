"""Client for the clinic REST API (schedule store and appointment store).

Requests are never retried automatically; a failed read or write surfaces as
``ClinicApiError`` and the user decides whether to try again.
"""

import logging
from datetime import datetime, time

import requests

from clinic_portal.core import config
from clinic_portal.models.appointment import AppointmentRef, format_wire_datetime
from clinic_portal.models.schedule import (
    ACTIVE_STATUSES,
    ScheduleStatus,
    WeeklySchedule,
    normalize_status,
    parse_time_of_day,
)

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = 'Network error. Please try again.'
MALFORMED_SCHEDULE_MESSAGE = 'The doctor schedule could not be read. Please contact the clinic.'
SCHEDULE_PATHS = ('/schedule', '/schedules')
STATUS_QUICK_DEFAULTS = {
    ScheduleStatus.AVAILABLE: (time(8, 0), time(17, 0)),
    ScheduleStatus.HALF_DAY: (time(8, 0), time(12, 0)),
}


class ClinicApiError(Exception):
    def __init__(self, message: str = NETWORK_ERROR_MESSAGE, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ScheduleInputError(ValueError):
    """A schedule edit that can be rejected before calling the backend."""


def _api_time(value) -> str | None:
    parsed = parse_time_of_day(value)
    if parsed is None:
        return None
    return parsed.strftime('%H:%M:%S')


def _error_message(response: requests.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        text = response.text.strip()
        return text or None
    if isinstance(data, str):
        return data or None
    if isinstance(data, dict):
        return data.get('error') or data.get('message')
    return None


class ClinicApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or config.CLINIC_API_BASE_URL).rstrip('/')
        self.timeout = timeout if timeout is not None else config.CLINIC_API_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    def close(self) -> None:
        self.session.close()

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f'{self.base_url}{path}'
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning('%s %s failed: %s', method, url, exc)
            raise ClinicApiError() from exc

    def _json(self, response: requests.Response, *, keep_backend_message: bool = False):
        if not response.ok:
            logger.warning(
                '%s %s returned HTTP %s',
                response.request.method if response.request is not None else '?',
                response.url,
                response.status_code,
            )
            message = _error_message(response) if keep_backend_message else None
            raise ClinicApiError(message or NETWORK_ERROR_MESSAGE, status_code=response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.exception('Invalid JSON from %s', response.url)
            raise ClinicApiError(status_code=response.status_code) from exc

    def fetch_schedule(self) -> WeeklySchedule:
        response = None
        for path in SCHEDULE_PATHS:
            response = self._send('GET', path)
            if response.status_code != 404:
                break
            logger.debug('Schedule not found at %s, trying next path', path)

        records = self._json(response) or []
        try:
            return WeeklySchedule.from_records(records)
        except ValueError as exc:
            logger.error('Malformed schedule payload from %s: %s', response.url, exc)
            raise ClinicApiError(MALFORMED_SCHEDULE_MESSAGE, status_code=response.status_code) from exc

    def fetch_appointments(self, patient_id=None) -> list[AppointmentRef]:
        params = {'patient': patient_id} if patient_id is not None else None
        records = self._json(self._send('GET', '/appointments', params=params)) or []
        appointments: list[AppointmentRef] = []
        for record in records:
            try:
                appointments.append(AppointmentRef.model_validate(record))
            except ValueError as exc:
                # A record without a usable preferredDateTime can never occupy a slot.
                logger.warning('Skipping malformed appointment record %r: %s', record, exc)
        return appointments

    def create_appointment(self, patient_id, service_id, preferred_date_time: datetime, symptom: str):
        payload = {
            'patientId': patient_id,
            'serviceId': service_id,
            'preferredDateTime': format_wire_datetime(preferred_date_time),
            'symptom': symptom,
        }
        return self._json(self._send('POST', '/appointments', json=payload), keep_backend_message=True)

    def update_appointment(self, appointment_id, preferred_date_time: datetime, symptom: str):
        payload = {
            'preferredDateTime': format_wire_datetime(preferred_date_time),
            'symptom': symptom,
        }
        return self._json(
            self._send('PUT', f'/appointments/{appointment_id}', json=payload),
            keep_backend_message=True,
        )

    def update_schedule_day(self, weekday: int, status: str, start_time=None, end_time=None):
        normalized = normalize_status(status)
        if normalized is ScheduleStatus.UNKNOWN:
            raise ScheduleInputError(f"Unknown schedule status '{status}'.")

        if normalized in ACTIVE_STATUSES:
            if parse_time_of_day(start_time) is None or parse_time_of_day(end_time) is None:
                raise ScheduleInputError('Start and end time are required for this status.')
            payload = {
                'status': normalized.value,
                'start_time': _api_time(start_time),
                'end_time': _api_time(end_time),
            }
        else:
            payload = {'status': normalized.value, 'start_time': None, 'end_time': None}

        return self._json(self._send('PUT', f'/schedule/{weekday}', json=payload), keep_backend_message=True)

    def update_schedule_status(self, weekday: int, status: str):
        normalized = normalize_status(status)
        if normalized is ScheduleStatus.UNKNOWN:
            raise ScheduleInputError(f"Unknown schedule status '{status}'.")

        start, end = STATUS_QUICK_DEFAULTS.get(normalized, (None, None))
        payload = {
            'status': normalized.value,
            'start_time': _api_time(start),
            'end_time': _api_time(end),
        }
        return self._json(
            self._send('PUT', f'/schedule/{weekday}/status', json=payload),
            keep_backend_message=True,
        )

    def add_schedule_note(self, weekday: int, note: str):
        cleaned = (note or '').strip()
        if not cleaned:
            raise ScheduleInputError('Note cannot be empty.')
        return self._json(
            self._send('POST', f'/schedule/{weekday}/notes', json={'note': cleaned}),
            keep_backend_message=True,
        )
