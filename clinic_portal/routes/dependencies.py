from fastapi import HTTPException, status

from clinic_portal.clients.clinic_api import ClinicApiClient, ClinicApiError
from clinic_portal.scheduling.snapshots import ClinicSnapshot, load_snapshot


def get_client():
    client = ClinicApiClient()
    try:
        yield client
    finally:
        client.close()


def raise_transport_error(exc: ClinicApiError) -> None:
    raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message) from exc


def fetch_snapshot(client) -> ClinicSnapshot:
    try:
        return load_snapshot(client)
    except ClinicApiError as exc:
        raise_transport_error(exc)
