from __future__ import annotations

import pytest

from pysensi.config import SensiConfig
from pysensi.exceptions import SensiConfigError


def test_defaults() -> None:
    config = SensiConfig(username="user@example.com", password="secret")

    assert config.base_url == "https://bus-serv.sensicomfort.com"
    assert config.polling_retry_count == 5
    assert config.polling_retry_delay == 0.0
    assert config.api_trace_enabled is False


def test_base_url_trailing_slash_is_stripped() -> None:
    config = SensiConfig(username="u", password="p", base_url="https://example.test/")

    assert config.base_url == "https://example.test"


def test_from_env_reads_sensi_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SENSI_USERNAME", "env-user")
    monkeypatch.setenv("SENSI_PASSWORD", "env-pass")
    monkeypatch.setenv("SENSI_BASE_URL", "https://staging.example.test")
    monkeypatch.setenv("SENSI_POLLING_RETRY_COUNT", "9")
    monkeypatch.setenv("SENSI_POLLING_RETRY_DELAY", "1.5")
    monkeypatch.setenv("SENSI_API_TRACE_ENABLED", "yes")

    config = SensiConfig.from_env()

    assert config.username == "env-user"
    assert config.password == "env-pass"
    assert config.base_url == "https://staging.example.test"
    assert config.polling_retry_count == 9
    assert config.polling_retry_delay == 1.5
    assert config.api_trace_enabled is True


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SENSI_USERNAME", "env-user")
    monkeypatch.setenv("SENSI_PASSWORD", "env-pass")
    monkeypatch.setenv("SENSI_POLLING_RETRY_COUNT", "not-a-number")

    config = SensiConfig.from_env(username="explicit", polling_retry_count=2)

    assert config.username == "explicit"
    assert config.polling_retry_count == 2


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SENSI_USERNAME", "env-user")
    monkeypatch.setenv("SENSI_PASSWORD", "env-pass")
    monkeypatch.setenv("SENSI_REQUEST_TIMEOUT", "soon")

    with pytest.raises(SensiConfigError, match="SENSI_REQUEST_TIMEOUT"):
        SensiConfig.from_env()


def test_missing_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SENSI_USERNAME", raising=False)
    monkeypatch.delenv("SENSI_PASSWORD", raising=False)

    with pytest.raises(SensiConfigError):
        SensiConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"polling_retry_count": -1},
        {"polling_retry_delay": -0.5},
        {"request_timeout": 0},
    ],
)
def test_invalid_values(kwargs: dict[str, float]) -> None:
    with pytest.raises(SensiConfigError):
        SensiConfig(username="u", password="p", **kwargs)  # type: ignore[arg-type]
