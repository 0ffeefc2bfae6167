"""Schedule/appointment snapshots and the last-issued-request-wins gate.

A view that changes its target date while a fetch is in flight must not be
overwritten by the older response when it finally resolves. Every load is
tagged with a ticket; only the most recently *issued* ticket may publish.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from itertools import count
from threading import Lock

from clinic_portal.models.appointment import AppointmentRef, clinic_now
from clinic_portal.models.schedule import WeeklySchedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClinicSnapshot:
    schedule: WeeklySchedule
    appointments: tuple[AppointmentRef, ...]
    target_key: object = None
    fetched_at: datetime = field(default_factory=clinic_now)


@dataclass(frozen=True)
class Ticket:
    sequence: int
    target_key: object


class SnapshotGate:
    def __init__(self):
        self._lock = Lock()
        self._counter = count(1)
        self._latest: Ticket | None = None

    def issue(self, target_key) -> Ticket:
        with self._lock:
            ticket = Ticket(sequence=next(self._counter), target_key=target_key)
            self._latest = ticket
            return ticket

    def is_current(self, ticket: Ticket) -> bool:
        with self._lock:
            return self._latest is not None and self._latest.sequence == ticket.sequence

    @property
    def latest(self) -> Ticket | None:
        with self._lock:
            return self._latest


def load_snapshot(client, patient_id=None, target_key=None) -> ClinicSnapshot:
    schedule = client.fetch_schedule()
    appointments = client.fetch_appointments(patient_id=patient_id)
    return ClinicSnapshot(schedule=schedule, appointments=tuple(appointments), target_key=target_key)


class SnapshotLoader:
    """Loads snapshots for one view, discarding responses to superseded requests."""

    def __init__(self, client, gate: SnapshotGate | None = None):
        self.client = client
        self.gate = gate or SnapshotGate()
        self._current: ClinicSnapshot | None = None
        self._lock = Lock()

    @property
    def current(self) -> ClinicSnapshot | None:
        with self._lock:
            return self._current

    def load(self, target_key, patient_id=None) -> ClinicSnapshot | None:
        ticket = self.gate.issue(target_key)
        snapshot = load_snapshot(self.client, patient_id=patient_id, target_key=target_key)
        return self.publish(ticket, snapshot)

    def publish(self, ticket: Ticket, snapshot: ClinicSnapshot) -> ClinicSnapshot | None:
        with self._lock:
            if not self.gate.is_current(ticket):
                logger.debug(
                    'Discarding stale snapshot for %r (ticket %d)',
                    ticket.target_key,
                    ticket.sequence,
                )
                return None
            self._current = snapshot
            return snapshot
