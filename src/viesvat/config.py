"""Environment-based settings for the command line."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .transport import SERVICE_URL

_DEFAULT_TIMEOUT = 30.0
_DEFAULT_RETRIES = 3


@dataclass(frozen=True)
class Settings:
    service_url: str = SERVICE_URL
    timeout: float | None = _DEFAULT_TIMEOUT
    degraded_faults: frozenset[str] | None = None
    retries: int = _DEFAULT_RETRIES


def normalise_timeout(value: float, source: str = "VIES_TIMEOUT") -> float | None:
    """Return *value* in seconds; ``0`` disables the timeout."""

    if value < 0:
        raise ValueError(f"{source} darf nicht negativ sein: {value!r}")
    return value or None


def _parse_timeout(raw: str | None) -> float | None:
    if raw is None:
        return _DEFAULT_TIMEOUT
    raw = raw.strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"VIES_TIMEOUT muss eine Zahl sein: {raw!r}") from exc
    return normalise_timeout(value)


def _parse_retries(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return _DEFAULT_RETRIES
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"VIES_RETRIES muss eine ganze Zahl sein: {raw!r}") from exc
    if value < 1:
        raise ValueError(f"VIES_RETRIES muss mindestens 1 sein: {raw!r}")
    return value


def parse_fault_list(raw: str | None) -> frozenset[str] | None:
    """Parse a comma separated fault list.

    Unset or ``*`` means all faults degrade, ``none`` means no fault does.
    """

    if raw is None:
        return None
    raw = raw.strip()
    if raw in {"", "*"}:
        return None
    if raw.lower() == "none":
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    return Settings(
        service_url=env.get("VIES_SERVICE_URL") or SERVICE_URL,
        timeout=_parse_timeout(env.get("VIES_TIMEOUT")),
        degraded_faults=parse_fault_list(env.get("VIES_DEGRADED_FAULTS")),
        retries=_parse_retries(env.get("VIES_RETRIES")),
    )


__all__ = ["Settings", "load_settings", "normalise_timeout", "parse_fault_list"]
