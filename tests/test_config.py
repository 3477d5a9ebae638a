import pytest

from viesvat.config import Settings, load_settings, normalise_timeout, parse_fault_list
from viesvat.transport import SERVICE_URL


def test_defaults() -> None:
    assert load_settings({}) == Settings(
        service_url=SERVICE_URL,
        timeout=30.0,
        degraded_faults=None,
        retries=3,
    )


def test_values_from_environment() -> None:
    settings = load_settings(
        {
            "VIES_SERVICE_URL": "https://example.test/vies",
            "VIES_TIMEOUT": "7.5",
            "VIES_DEGRADED_FAULTS": "MS_UNAVAILABLE, soap:Server ,",
            "VIES_RETRIES": "5",
        }
    )

    assert settings.service_url == "https://example.test/vies"
    assert settings.timeout == 7.5
    assert settings.degraded_faults == frozenset({"MS_UNAVAILABLE", "soap:Server"})
    assert settings.retries == 5


@pytest.mark.parametrize("raw", ["0", ""])
def test_timeout_can_be_disabled(raw: str) -> None:
    assert load_settings({"VIES_TIMEOUT": raw}).timeout is None


def test_reads_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIES_RETRIES", "2")
    monkeypatch.delenv("VIES_TIMEOUT", raising=False)

    assert load_settings().retries == 2


@pytest.mark.parametrize(
    "env",
    [
        {"VIES_TIMEOUT": "soon"},
        {"VIES_TIMEOUT": "-1"},
        {"VIES_RETRIES": "many"},
        {"VIES_RETRIES": "0"},
    ],
)
def test_invalid_values_raise(env: dict) -> None:
    with pytest.raises(ValueError):
        load_settings(env)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        ("*", None),
        ("  ", None),
        ("none", frozenset()),
        ("MS_UNAVAILABLE", frozenset({"MS_UNAVAILABLE"})),
    ],
)
def test_parse_fault_list(raw, expected) -> None:
    assert parse_fault_list(raw) == expected


def test_normalise_timeout() -> None:
    assert normalise_timeout(2.5) == 2.5
    assert normalise_timeout(0) is None
    with pytest.raises(ValueError, match="--timeout"):
        normalise_timeout(-1, "--timeout")
