import pytest

from clinic_portal.core import config


def test_get_bool_parses_common_truthy_values() -> None:
    assert config._get_bool(' Yes ') is True
    assert config._get_bool('0') is False
    assert config._get_bool(None, default=True) is True


def test_get_list_splits_and_trims() -> None:
    assert config._get_list(' http://a.test , ,http://b.test', 'x') == ['http://a.test', 'http://b.test']
    assert config._get_list(None, 'http://c.test') == ['http://c.test']


def test_get_clinic_timezone_uses_configured_zone() -> None:
    assert config.get_clinic_timezone().zone == 'Asia/Manila'


def test_validate_runtime_config_accepts_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'CLINIC_API_BASE_URL', 'http://localhost:3000/api')
    monkeypatch.setattr(config, 'CLINIC_API_TIMEOUT_SECONDS', 10.0)

    config.validate_runtime_config()


def test_validate_runtime_config_rejects_unknown_timezone(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'CLINIC_TIMEZONE', 'Mars/Olympus')

    with pytest.raises(RuntimeError, match='CLINIC_TIMEZONE'):
        config.validate_runtime_config()


def test_validate_runtime_config_rejects_relative_api_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, 'CLINIC_API_BASE_URL', '/api')

    with pytest.raises(RuntimeError, match='CLINIC_API_BASE_URL'):
        config.validate_runtime_config()
