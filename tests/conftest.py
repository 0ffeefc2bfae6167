import pytest

from clinic_portal.core import config


@pytest.fixture(autouse=True)
def clinic_timezone(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setattr(config, 'CLINIC_TIMEZONE', 'Asia/Manila')
    return 'Asia/Manila'
